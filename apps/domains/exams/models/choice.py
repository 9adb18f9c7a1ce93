from django.db import models
from apps.api.common.models import BaseModel
from .question import ExamQuestion


class Choice(BaseModel):
    """
    Answer option of a question (A/B/C/D, part 2 has only A/B/C).

    is_correct is owned by the question-bank side and may change at any time;
    graded answers keep their own copy (AttemptAnswer.is_correct) which only
    the recalculation cascade re-syncs.
    """

    question = models.ForeignKey(
        ExamQuestion,
        on_delete=models.CASCADE,
        related_name="choices",
    )

    label = models.CharField(max_length=5)
    content = models.CharField(max_length=255, blank=True)
    is_correct = models.BooleanField(default=False)

    class Meta:
        db_table = "exams_choice"
        unique_together = ("question", "label")
        ordering = ["label"]

    def __str__(self):
        return f"{self.question} ({self.label})"
