from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from apps.api.common.models import BaseModel
from .exam import Exam


class Skill(models.TextChoices):
    LISTENING = "LISTENING", "Listening"
    READING = "READING", "Reading"


# TOEIC parts: 1-4 listening, 5-7 reading
SECTION_MIN = 1
SECTION_MAX = 7


class ExamQuestion(BaseModel):
    """
    Exam question definition
    """

    exam = models.ForeignKey(
        Exam,
        on_delete=models.CASCADE,
        related_name="questions",
    )

    number = models.PositiveIntegerField()  # 1..200

    skill = models.CharField(max_length=10, choices=Skill.choices)
    section = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(SECTION_MIN), MaxValueValidator(SECTION_MAX)],
    )

    # weak-area grouping tag, e.g. "photo", "inference", "grammar"
    question_type = models.CharField(max_length=50, blank=True)

    question_text = models.TextField(blank=True)

    class Meta:
        db_table = "exams_question"
        unique_together = ("exam", "number")
        ordering = ["number"]
        indexes = [
            models.Index(fields=["exam", "section"], name="exams_q_exam_section_idx"),
        ]

    def __str__(self):
        return f"{self.exam} Q{self.number}"
