# PATH: apps/domains/results/views/progress_views.py
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.domains.results.permissions import IsTeacherOrAdmin
from apps.domains.results.services.progress_service import ProgressService


class MyProgressView(APIView):
    """
    GET /results/me/progress/
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(ProgressService.get_progress_summary(student_id=request.user.id))


class ExamStatisticsView(APIView):
    """
    GET /results/exams/<exam_id>/statistics/
    """

    permission_classes = [IsAuthenticated, IsTeacherOrAdmin]

    def get(self, request, exam_id: int):
        return Response(ProgressService.get_exam_statistics(exam_id=exam_id))


class QuestionStatisticsView(APIView):
    """
    GET /results/questions/<question_id>/statistics/
    """

    permission_classes = [IsAuthenticated, IsTeacherOrAdmin]

    def get(self, request, question_id: int):
        return Response(ProgressService.get_question_statistics(question_id=question_id))
