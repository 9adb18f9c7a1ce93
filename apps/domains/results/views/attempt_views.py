# PATH: apps/domains/results/views/attempt_views.py
"""
Student-facing attempt lifecycle.

student_id is always request.user.id: a student can only start, resume
and submit their own attempts (someone else's attempt -> 404).
"""
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.domains.results.permissions import is_teacher_user
from apps.domains.results.serializers.attempt import (
    AttemptSerializer,
    StartAttemptSerializer,
    SubmitAttemptSerializer,
)
from apps.domains.results.serializers.result import (
    AnswerBreakdownSerializer,
    WeakAreaSerializer,
)
from apps.domains.results.services.attempt_session_service import AttemptSessionService


class StartAttemptView(APIView):
    """
    POST /results/attempts/
    body: {exam_id, mode, part_selection?}
    """

    permission_classes = [IsAuthenticated]

    def post(self, request):
        s = StartAttemptSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        attempt = AttemptSessionService.start_attempt(
            exam_id=s.validated_data["exam_id"],
            mode=s.validated_data["mode"],
            part_selection=s.validated_data.get("part_selection"),
            student_id=request.user.id,
        )
        return Response(AttemptSerializer(attempt).data, status=status.HTTP_201_CREATED)


class ActiveAttemptView(APIView):
    """
    GET /results/attempts/active/
    -> {"attempt": {...}} or {"attempt": null}
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        attempt = AttemptSessionService.get_active_attempt(student_id=request.user.id)
        return Response({
            "attempt": AttemptSerializer(attempt).data if attempt else None,
        })


class SubmitAttemptView(APIView):
    """
    POST /results/attempts/<attempt_id>/submit/
    body: {answers: [{question_id, choice_id}]}
    """

    permission_classes = [IsAuthenticated]

    def post(self, request, attempt_id: int):
        s = SubmitAttemptSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        outcome = AttemptSessionService.submit_attempt(
            attempt_id=attempt_id,
            answers=s.validated_data["answers"],
            student_id=request.user.id,
        )
        result = outcome.grading.as_dict()
        breakdown = result.pop("breakdown")

        return Response({
            "result": result,
            "breakdown": breakdown,
            "weak_areas": WeakAreaSerializer(outcome.weak_areas, many=True).data,
        })


class AttemptResultView(APIView):
    """
    GET /results/attempts/<attempt_id>/
    owner, or teacher/admin for any attempt
    """

    permission_classes = [IsAuthenticated]

    def get(self, request, attempt_id: int):
        dimension = request.query_params.get("dimension") or "section"
        if dimension not in ("section", "question_type", "skill"):
            return Response(
                {"code": "invalid_dimension", "detail": f"unknown dimension: {dimension}"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        student_id = None if is_teacher_user(request.user) else request.user.id
        result = AttemptSessionService.get_results(
            attempt_id=attempt_id,
            student_id=student_id,
            dimension=dimension,
        )
        return Response({
            "attempt": AttemptSerializer(result.attempt).data,
            "breakdown": AnswerBreakdownSerializer(result.breakdown, many=True).data,
            "weak_areas": WeakAreaSerializer(result.weak_areas, many=True).data,
        })
