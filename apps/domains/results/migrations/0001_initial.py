# apps/domains/results/migrations/0001_initial.py
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("exams", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Attempt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("student_id", models.PositiveIntegerField(db_index=True)),
                (
                    "mode",
                    models.CharField(
                        choices=[("FULL_TEST", "Full test"), ("PRACTICE_BY_PART", "Practice by part")],
                        max_length=20,
                    ),
                ),
                ("part_selection", models.JSONField(blank=True, default=list)),
                ("started_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("submitted_at", models.DateTimeField(blank=True, null=True)),
                ("score_percent", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("score_listening", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("score_reading", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("total_correct", models.PositiveIntegerField(default=0)),
                ("total_questions", models.PositiveIntegerField(default=0)),
                ("listening_correct", models.PositiveIntegerField(default=0)),
                ("listening_total", models.PositiveIntegerField(default=0)),
                ("reading_correct", models.PositiveIntegerField(default=0)),
                ("reading_total", models.PositiveIntegerField(default=0)),
                ("recalculated_at", models.DateTimeField(blank=True, null=True)),
                (
                    "exam",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="attempts",
                        to="exams.exam",
                    ),
                ),
            ],
            options={
                "db_table": "results_attempt",
                "ordering": ["-started_at"],
                "indexes": [
                    models.Index(
                        fields=["student_id", "submitted_at", "started_at"],
                        name="results_att_student_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AttemptAnswer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("is_correct", models.BooleanField(default=False)),
                (
                    "attempt",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="results.attempt",
                    ),
                ),
                (
                    "choice",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="attempt_answers",
                        to="exams.choice",
                    ),
                ),
                (
                    "question",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="attempt_answers",
                        to="exams.examquestion",
                    ),
                ),
            ],
            options={
                "db_table": "results_attempt_answer",
                "indexes": [
                    models.Index(fields=["question"], name="results_answer_question_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("attempt", "question"),
                        name="results_answer_attempt_question_uniq",
                    ),
                ],
            },
        ),
    ]
