# apps/domains/results/models/attempt_answer.py
from django.db import models

from apps.api.common.models import BaseModel


class AttemptAnswer(BaseModel):
    """
    One graded answer inside an attempt.

    - choice NULL = unanswered (counted in totals, never correct)
    - is_correct is a copy of Choice.is_correct taken at grading time;
      only the recalculation cascade re-syncs it afterwards
    """

    attempt = models.ForeignKey(
        "results.Attempt",
        on_delete=models.CASCADE,
        related_name="answers",
    )

    question = models.ForeignKey(
        "exams.ExamQuestion",
        on_delete=models.PROTECT,
        related_name="attempt_answers",
    )

    choice = models.ForeignKey(
        "exams.Choice",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="attempt_answers",
    )

    is_correct = models.BooleanField(default=False)

    class Meta:
        db_table = "results_attempt_answer"
        constraints = [
            models.UniqueConstraint(
                fields=["attempt", "question"],
                name="results_answer_attempt_question_uniq",
            ),
        ]
        indexes = [
            models.Index(fields=["question"], name="results_answer_question_idx"),
        ]

    def __str__(self) -> str:
        return f"AttemptAnswer(attempt={self.attempt_id}, q={self.question_id}, ok={self.is_correct})"
