# apps/domains/results/tasks/recalculation_tasks.py
import logging

from celery import shared_task

from apps.domains.results.services.recalculation_service import question_correct_answer_changed

logger = logging.getLogger(__name__)

RETRY_COUNTDOWN_SECONDS = 30


@shared_task(bind=True, autoretry_for=(Exception,), retry_kwargs={"max_retries": 3})
def recalculate_question_scores_task(self, question_id: int, triggered_by=None) -> dict:
    report = question_correct_answer_changed(int(question_id), triggered_by=triggered_by)
    if report.failures:
        # failed attempts were rolled back one by one; the retry walks the question again
        logger.warning(
            "recalculation incomplete: question=%s failed_attempts=%s retry=%s",
            question_id,
            [f.attempt_id for f in report.failures],
            self.request.retries,
        )
        raise self.retry(exc=report.failures[0], countdown=RETRY_COUNTDOWN_SECONDS)
    return report.as_dict()
