# PATH: apps/domains/results/services/recalculation_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from django.db import transaction
from django.utils import timezone

from apps.domains.exams.services import exam_catalog
from apps.domains.results.exceptions import RecalculationPartialFailure
from apps.domains.results.models import Attempt, AttemptAnswer
from apps.domains.results.services.grading_engine import (
    apply_scores,
    score_values,
    scores_match,
    tally_by_skill,
)

logger = logging.getLogger(__name__)


@dataclass
class RecalculationReport:
    question_id: int
    repaired_attempt_ids: List[int] = field(default_factory=list)
    unchanged_attempt_ids: List[int] = field(default_factory=list)
    failures: List[RecalculationPartialFailure] = field(default_factory=list)
    triggered_by: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return not self.failures

    def as_dict(self) -> Dict[str, Any]:
        return {
            "question_id": self.question_id,
            "repaired_attempt_ids": list(self.repaired_attempt_ids),
            "unchanged_attempt_ids": list(self.unchanged_attempt_ids),
            "failures": [f.as_dict() for f in self.failures],
            "triggered_by": None if self.triggered_by is None else str(self.triggered_by),
        }


def affected_attempt_ids(question_id: int) -> List[int]:
    return list(
        AttemptAnswer.objects
        .filter(question_id=int(question_id))
        .values_list("attempt_id", flat=True)
        .distinct()
        .order_by("attempt_id")
    )


class RecalculationCascadeService:
    """
    Answer-key change -> every graded attempt that touched the question is rescored.

    Rules:
    - one transaction per attempt (row locked), never one big transaction
    - AttemptAnswer.is_correct follows the chosen choice's current flag
      (blank answer stays False)
    - tallies come from the attempt's full AttemptAnswer set, not deltas
    - scoring regime = attempt.mode, mode / submitted_at are never written
    - one broken attempt does not stop the others
    - the row is rewritten unless every stored tally and score already equals
      the recomputed value
    """

    @staticmethod
    def _recalculate_attempt(attempt_id: int, question_id: int) -> bool:
        """
        returns True when anything on the attempt changed
        """
        with transaction.atomic():
            attempt = Attempt.objects.select_for_update().get(id=int(attempt_id))

            # ---------------------------
            # a) re-derive correctness of the edited question
            # ---------------------------
            rows = list(
                AttemptAnswer.objects
                .filter(attempt_id=attempt.id, question_id=int(question_id))
            )
            flipped: List[AttemptAnswer] = []
            for row in rows:
                expected = (
                    exam_catalog.get_choice_correctness(row.choice_id)
                    if row.choice_id is not None
                    else False
                )
                if row.is_correct != expected:
                    row.is_correct = expected
                    flipped.append(row)
            if flipped:
                AttemptAnswer.objects.bulk_update(flipped, ["is_correct"])

            # ---------------------------
            # b) full re-tally
            # ---------------------------
            tally = tally_by_skill(
                AttemptAnswer.objects
                .filter(attempt_id=attempt.id)
                .values_list("question__skill", "is_correct")
            )

            if not flipped and scores_match(attempt, score_values(attempt.mode, tally)):
                return False

            # ---------------------------
            # c) + d) rescore in the original mode
            # ---------------------------
            attempt.recalculated_at = timezone.now()
            apply_scores(attempt, tally, extra_fields=["recalculated_at"])

        logger.info(
            "attempt rescored: attempt=%s question=%s flipped=%s correct=%s/%s L=%s R=%s",
            attempt.id,
            question_id,
            len(flipped),
            tally.total_correct,
            tally.total_questions,
            attempt.score_listening,
            attempt.score_reading,
        )
        return True

    @classmethod
    def on_question_correct_answer_changed(
        cls,
        *,
        question_id: int,
        triggered_by: Optional[Any] = None,
    ) -> RecalculationReport:
        report = RecalculationReport(question_id=int(question_id), triggered_by=triggered_by)

        for attempt_id in affected_attempt_ids(question_id):
            try:
                changed = cls._recalculate_attempt(attempt_id, question_id)
            except Exception as e:
                logger.exception(
                    "attempt rescore failed: attempt=%s question=%s",
                    attempt_id,
                    question_id,
                )
                report.failures.append(RecalculationPartialFailure(attempt_id=attempt_id, cause=e))
                continue

            if changed:
                report.repaired_attempt_ids.append(int(attempt_id))
            else:
                report.unchanged_attempt_ids.append(int(attempt_id))

        logger.info(
            "recalculation done: question=%s repaired=%s unchanged=%s failed=%s by=%s",
            question_id,
            len(report.repaired_attempt_ids),
            len(report.unchanged_attempt_ids),
            len(report.failures),
            triggered_by,
        )
        return report


def question_correct_answer_changed(
    question_id: int,
    triggered_by: Optional[Any] = None,
) -> RecalculationReport:
    return RecalculationCascadeService.on_question_correct_answer_changed(
        question_id=question_id,
        triggered_by=triggered_by,
    )
