# PATH: apps/domains/results/views/admin_attempt_views.py
"""
GET /results/exams/<exam_id>/attempts/?student=&mode=&submitted=

Staff view of every attempt of an exam, newest first (paginated).
"""
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.generics import ListAPIView
from rest_framework.permissions import IsAuthenticated

from apps.domains.results.filters import AttemptFilter
from apps.domains.results.models import Attempt
from apps.domains.results.permissions import IsTeacherOrAdmin
from apps.domains.results.serializers.attempt import AttemptSerializer


class ExamAttemptListView(ListAPIView):
    serializer_class = AttemptSerializer
    permission_classes = [IsAuthenticated, IsTeacherOrAdmin]

    filter_backends = [DjangoFilterBackend]
    filterset_class = AttemptFilter

    def get_queryset(self):
        return (
            Attempt.objects
            .select_related("exam")
            .filter(exam_id=self.kwargs["exam_id"])
            .order_by("-started_at", "-id")
        )
