# apps/domains/results/management/commands/recalculate_attempt_scores.py
from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from apps.domains.exams.models import ExamQuestion
from apps.domains.results.models import AttemptAnswer
from apps.domains.results.services.recalculation_service import (
    affected_attempt_ids,
    question_correct_answer_changed,
)


class Command(BaseCommand):
    """
    Re-run the recalculation cascade, e.g. after a failed async run
    or an answer-key fix made directly in the database.

    usage)
    python manage.py recalculate_attempt_scores --question-id 12 --question-id 13
    python manage.py recalculate_attempt_scores --exam-id 3
    python manage.py recalculate_attempt_scores --exam-id 3 --dry-run
    python manage.py recalculate_attempt_scores --exam-id 3 --async
    """

    help = "Recompute AttemptAnswer.is_correct and attempt scores for the given questions."

    def add_arguments(self, parser):
        parser.add_argument("--question-id", type=int, action="append", dest="question_ids")
        parser.add_argument("--exam-id", type=int)
        parser.add_argument("--dry-run", action="store_true")
        parser.add_argument("--async", action="store_true", dest="run_async")

    def _question_ids(self, opts) -> list:
        ids = set(int(q) for q in (opts.get("question_ids") or []))

        exam_id = opts.get("exam_id")
        if exam_id:
            ids.update(
                ExamQuestion.objects
                .filter(exam_id=int(exam_id))
                .values_list("id", flat=True)
            )

        if not ids:
            raise CommandError("pass --question-id and/or --exam-id")

        # questions nobody answered have nothing to repair
        answered = set(
            AttemptAnswer.objects
            .filter(question_id__in=ids)
            .values_list("question_id", flat=True)
            .distinct()
        )
        return sorted(ids & answered)

    def handle(self, *args, **opts):
        dry_run = bool(opts.get("dry_run", False))
        run_async = bool(opts.get("run_async", False))
        question_ids = self._question_ids(opts)

        if dry_run:
            for qid in question_ids:
                self.stdout.write(f"question={qid} attempts={affected_attempt_ids(qid)}")
            self.stdout.write(self.style.SUCCESS(f"Dry run. questions={len(question_ids)}"))
            return

        if run_async:
            from apps.domains.results.tasks import recalculate_question_scores_task

            for qid in question_ids:
                recalculate_question_scores_task.delay(qid, triggered_by="command")
            self.stdout.write(self.style.SUCCESS(f"Enqueued. questions={len(question_ids)}"))
            return

        repaired = unchanged = 0
        failed = []

        for qid in question_ids:
            report = question_correct_answer_changed(qid, triggered_by="command")
            repaired += len(report.repaired_attempt_ids)
            unchanged += len(report.unchanged_attempt_ids)
            failed.extend(f.attempt_id for f in report.failures)

        self.stdout.write(
            self.style.SUCCESS(
                f"Recalculation done. questions={len(question_ids)}, "
                f"repaired={repaired}, unchanged={unchanged}, failed={len(failed)}"
            )
        )
        if failed:
            raise CommandError(f"recalculation failed for attempts: {sorted(set(failed))}")
