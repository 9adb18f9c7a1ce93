# PATH: apps/domains/results/receivers.py
"""
exams.question_correct_answer_changed -> recalculation cascade.

The signal is already sent after commit, so the cascade sees the new answer key.
RESULTS_RECALCULATION_ASYNC=True hands the work to Celery instead.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.dispatch import receiver

from apps.domains.exams.signals import question_correct_answer_changed

logger = logging.getLogger(__name__)


@receiver(question_correct_answer_changed, dispatch_uid="results_recalculate_on_answer_change")
def recalculate_on_answer_change(sender, question_id, triggered_by=None, **kwargs):
    by = None if triggered_by is None else str(triggered_by)

    if getattr(settings, "RESULTS_RECALCULATION_ASYNC", False):
        from apps.domains.results.tasks import recalculate_question_scores_task

        recalculate_question_scores_task.delay(int(question_id), triggered_by=by)
        logger.info("recalculation enqueued: question=%s by=%s", question_id, by)
        return

    from apps.domains.results.services.recalculation_service import (
        question_correct_answer_changed as run_cascade,
    )

    run_cascade(int(question_id), triggered_by=by)
