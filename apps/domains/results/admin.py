# PATH: apps/domains/results/admin.py

from django.contrib import admin
from .models import Attempt, AttemptAnswer


@admin.register(Attempt)
class AttemptAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "student_id",
        "exam",
        "mode",
        "started_at",
        "submitted_at",
        "score_percent",
        "score_listening",
        "score_reading",
        "recalculated_at",
    )
    list_filter = ("mode", "exam")
    search_fields = ("student_id",)
    ordering = ("-started_at",)
    # scores are written by grading / recalculation only
    readonly_fields = (
        "started_at",
        "submitted_at",
        "score_percent",
        "score_listening",
        "score_reading",
        "total_correct",
        "total_questions",
        "listening_correct",
        "listening_total",
        "reading_correct",
        "reading_total",
        "recalculated_at",
    )


@admin.register(AttemptAnswer)
class AttemptAnswerAdmin(admin.ModelAdmin):
    list_display = ("id", "attempt", "question", "choice", "is_correct", "created_at")
    list_filter = ("is_correct",)
    ordering = ("-created_at",)
    raw_id_fields = ("attempt", "question", "choice")
