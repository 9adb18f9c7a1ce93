# PATH: apps/domains/results/views/recalculation_views.py
"""
Manual re-run of the recalculation cascade for one question.

Runs inline and returns the report, regardless of RESULTS_RECALCULATION_ASYNC:
the operator wants to see which attempts failed.
"""
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.domains.exams.services import exam_catalog
from apps.domains.results.permissions import IsTeacherOrAdmin
from apps.domains.results.services.recalculation_service import question_correct_answer_changed


class RecalculateQuestionView(APIView):
    """
    POST /results/questions/<question_id>/recalculate/
    """

    permission_classes = [IsAuthenticated, IsTeacherOrAdmin]

    def post(self, request, question_id: int):
        # 404 for unknown questions instead of an empty report
        exam_catalog.get_question_skill_and_section(question_id)

        report = question_correct_answer_changed(
            question_id,
            triggered_by=f"user:{request.user.id}",
        )
        return Response(report.as_dict())
