from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from apps.api.common.models import BaseModel


class Exam(BaseModel):
    """
    Exam definition (meta only).

    Full tests carry all 200 questions; part-practice attempts pick a subset
    of its sections at start time.
    """

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    # checked once, at submission
    time_limit_minutes = models.PositiveIntegerField(
        default=120,
        validators=[MinValueValidator(1), MaxValueValidator(240)],
    )

    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "exams_exam"
        ordering = ["-created_at"]

    def __str__(self):
        return self.title
