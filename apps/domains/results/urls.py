# PATH: apps/domains/results/urls.py

from django.urls import path

# ======================================================
# Student
# ======================================================
from apps.domains.results.views.attempt_views import (
    ActiveAttemptView,
    AttemptResultView,
    StartAttemptView,
    SubmitAttemptView,
)
from apps.domains.results.views.progress_views import MyProgressView

# ======================================================
# Admin / Teacher
# ======================================================
from apps.domains.results.views.progress_views import ExamStatisticsView, QuestionStatisticsView
from apps.domains.results.views.admin_attempt_views import ExamAttemptListView
from apps.domains.results.views.recalculation_views import RecalculateQuestionView


urlpatterns = [
    # -------- Student --------
    path("attempts/", StartAttemptView.as_view(), name="results-attempt-start"),
    path("attempts/active/", ActiveAttemptView.as_view(), name="results-attempt-active"),
    path("attempts/<int:attempt_id>/submit/", SubmitAttemptView.as_view(), name="results-attempt-submit"),
    path("attempts/<int:attempt_id>/", AttemptResultView.as_view(), name="results-attempt-result"),
    path("me/progress/", MyProgressView.as_view(), name="results-my-progress"),

    # -------- Admin / Teacher --------
    path("exams/<int:exam_id>/attempts/", ExamAttemptListView.as_view(), name="results-exam-attempts"),
    path("exams/<int:exam_id>/statistics/", ExamStatisticsView.as_view(), name="results-exam-statistics"),
    path(
        "questions/<int:question_id>/recalculate/",
        RecalculateQuestionView.as_view(),
        name="results-question-recalculate",
    ),
    path(
        "questions/<int:question_id>/statistics/",
        QuestionStatisticsView.as_view(),
        name="results-question-statistics",
    ),
]
