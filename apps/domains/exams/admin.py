# PATH: apps/domains/exams/admin.py

from django.contrib import admin
from .models import Exam, ExamQuestion, Choice


class ChoiceInline(admin.TabularInline):
    model = Choice
    extra = 0


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "time_limit_minutes", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("title",)
    ordering = ("-created_at",)


@admin.register(ExamQuestion)
class ExamQuestionAdmin(admin.ModelAdmin):
    list_display = ("id", "exam", "number", "skill", "section", "question_type")
    list_filter = ("skill", "section", "exam")
    search_fields = ("question_text", "question_type")
    ordering = ("exam", "number")
    inlines = [ChoiceInline]
