# PATH: apps/domains/exams/views/answer_key_view.py
"""
Answer-key edit (staff only).

Changing the correct choice re-grades every historical attempt that answered
the question, through question_correct_answer_changed (sent after commit).
"""
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.domains.exams.models import Choice
from apps.domains.exams.serializers.answer_key import (
    ChoiceSerializer,
    CorrectChoiceUpdateSerializer,
)
from apps.domains.exams.services.answer_key_service import AnswerKeyService
from apps.domains.results.permissions import IsTeacherOrAdmin


class QuestionCorrectChoiceView(APIView):
    """
    PUT /exams/questions/<question_id>/correct-choice/
    body: {choice_id}
    """

    permission_classes = [IsAuthenticated, IsTeacherOrAdmin]

    def put(self, request, question_id: int):
        s = CorrectChoiceUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        changed = AnswerKeyService.change_correct_choice(
            question_id=question_id,
            choice_id=s.validated_data["choice_id"],
            triggered_by=f"user:{request.user.id}",
        )

        choices = Choice.objects.filter(question_id=question_id).order_by("label")
        return Response({
            "question_id": int(question_id),
            "changed": changed,
            "choices": ChoiceSerializer(choices, many=True).data,
        })
