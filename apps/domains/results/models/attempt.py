# apps/domains/results/models/attempt.py
from django.db import models
from django.utils import timezone

from apps.api.common.models import BaseModel


class Attempt(BaseModel):
    """
    One test-taking session of a student against an exam.

    Lifecycle (fixed):
    --------------------------------------------------
    1) created by AttemptSessionService.start_attempt
       - started_at = now, submitted_at = NULL
    2) graded exactly once on submit
       - submitted_at set together with the score fields, one transaction
       - submitted_at never goes back to NULL
    3) afterwards only the recalculation cascade rewrites score fields
       (mode / submitted_at are never touched by it)

    Deletion is not a grading concern.
    """

    class Mode(models.TextChoices):
        FULL_TEST = "FULL_TEST", "Full test"
        PRACTICE_BY_PART = "PRACTICE_BY_PART", "Practice by part"

    student_id = models.PositiveIntegerField(db_index=True)

    exam = models.ForeignKey(
        "exams.Exam",
        on_delete=models.PROTECT,
        related_name="attempts",
    )

    mode = models.CharField(max_length=20, choices=Mode.choices)

    # sorted section numbers, [] for FULL_TEST
    part_selection = models.JSONField(default=list, blank=True)

    started_at = models.DateTimeField(default=timezone.now, editable=False)
    submitted_at = models.DateTimeField(null=True, blank=True)

    # ==================================================
    # scores (NULL until graded)
    # ==================================================
    score_percent = models.PositiveSmallIntegerField(null=True, blank=True)
    score_listening = models.PositiveSmallIntegerField(null=True, blank=True)
    score_reading = models.PositiveSmallIntegerField(null=True, blank=True)

    # tallies behind the scores (result screens read these directly)
    total_correct = models.PositiveIntegerField(default=0)
    total_questions = models.PositiveIntegerField(default=0)
    listening_correct = models.PositiveIntegerField(default=0)
    listening_total = models.PositiveIntegerField(default=0)
    reading_correct = models.PositiveIntegerField(default=0)
    reading_total = models.PositiveIntegerField(default=0)

    # last cascade rewrite of the score fields
    recalculated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "results_attempt"
        ordering = ["-started_at"]
        indexes = [
            models.Index(
                fields=["student_id", "submitted_at", "started_at"],
                name="results_att_student_idx",
            ),
        ]

    def __str__(self):
        return f"Attempt#{self.pk} exam={self.exam_id} student={self.student_id} {self.mode}"

    @property
    def is_submitted(self) -> bool:
        return self.submitted_at is not None

    @property
    def total_score(self):
        if self.score_listening is None or self.score_reading is None:
            return None
        return int(self.score_listening) + int(self.score_reading)
