# PATH: apps/domains/results/services/attempt_session_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional, Sequence

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.domains.exams.models import SECTION_MAX, SECTION_MIN
from apps.domains.exams.services import exam_catalog
from apps.domains.results.dto.grading import (
    AnswerBreakdown,
    SubmissionOutcome,
    SubmittedAnswer,
    WeakArea,
)
from apps.domains.results.exceptions import (
    AlreadySubmitted,
    AttemptNotFound,
    AttemptNotSubmitted,
    InvalidAttemptMode,
    InvalidPartSelection,
    TimeExceeded,
)
from apps.domains.results.models import Attempt, AttemptAnswer
from apps.domains.results.services.grading_engine import GradingEngine
from apps.domains.results.services.weak_area_analyzer import analyze_weak_areas

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttemptResult:
    attempt: Attempt
    breakdown: List[AnswerBreakdown]
    weak_areas: List[WeakArea]


def _weak_area_threshold() -> float:
    return float(getattr(settings, "RESULTS_WEAK_AREA_THRESHOLD", 0.6))


def _coerce_answers(answers: Iterable[Any]) -> List[SubmittedAnswer]:
    """
    Accept SubmittedAnswer or {"question_id", "choice_id"} dicts
    (the serializer hands over validated dicts).
    """
    out: List[SubmittedAnswer] = []
    for a in answers or []:
        if isinstance(a, SubmittedAnswer):
            out.append(a)
            continue
        choice_id = a.get("choice_id")
        out.append(
            SubmittedAnswer(
                question_id=int(a["question_id"]),
                choice_id=int(choice_id) if choice_id is not None else None,
            )
        )
    return out


def _validate_part_selection(exam_id: int, part_selection: Optional[Iterable[Any]]) -> List[int]:
    if not part_selection:
        raise InvalidPartSelection("part_selection must not be empty for PRACTICE_BY_PART")

    try:
        parts = sorted({int(p) for p in part_selection})
    except (TypeError, ValueError) as e:
        raise InvalidPartSelection(f"part_selection must be section numbers: {e}") from e

    available = set(exam_catalog.sections_with_questions(exam_id))
    unknown = [
        p for p in parts
        if not (SECTION_MIN <= p <= SECTION_MAX) or p not in available
    ]
    if unknown:
        raise InvalidPartSelection(
            f"unknown sections for exam {exam_id}: {unknown}",
            sections=unknown,
        )
    return parts


class AttemptSessionService:
    """
    Attempt lifecycle: start / resume / submit.

    Critical rules:
    - submit is at-most-once per attempt
      (row lock + compare-and-set on submitted_at IS NULL + unique answer rows)
    - time limit is checked once, at submit; over the limit -> rejected, not graded
    - a new attempt never cancels an older active one
    """

    # ======================================================
    # start
    # ======================================================
    @staticmethod
    @transaction.atomic
    def start_attempt(
        *,
        exam_id: int,
        mode: str,
        student_id: int,
        part_selection: Optional[Iterable[Any]] = None,
    ) -> Attempt:
        if mode not in Attempt.Mode.values:
            raise InvalidAttemptMode(f"unknown attempt mode: {mode!r}", mode=str(mode))

        exam = exam_catalog.get_active_exam(exam_id)

        parts: List[int] = []
        if mode == Attempt.Mode.PRACTICE_BY_PART:
            parts = _validate_part_selection(exam.id, part_selection)

        attempt = Attempt.objects.create(
            student_id=int(student_id),
            exam=exam,
            mode=mode,
            part_selection=parts,
        )

        logger.info(
            "attempt started: attempt=%s exam=%s student=%s mode=%s parts=%s",
            attempt.id,
            exam.id,
            student_id,
            mode,
            parts,
        )
        return attempt

    # ======================================================
    # resume
    # ======================================================
    @staticmethod
    def get_active_attempt(*, student_id: int) -> Optional[Attempt]:
        return (
            Attempt.objects
            .select_related("exam")
            .filter(student_id=int(student_id), submitted_at__isnull=True)
            .order_by("-started_at", "-id")
            .first()
        )

    # ======================================================
    # submit
    # ======================================================
    @staticmethod
    def _lock_attempt(attempt_id: int, student_id: Optional[int]) -> Attempt:
        qs = Attempt.objects.select_for_update().filter(id=int(attempt_id))
        if student_id is not None:
            qs = qs.filter(student_id=int(student_id))
        attempt = qs.first()
        if attempt is None:
            raise AttemptNotFound(f"attempt {attempt_id} not found", attempt_id=int(attempt_id))
        return attempt

    @staticmethod
    def _check_time_limit(attempt: Attempt, now: datetime) -> None:
        limit_minutes = exam_catalog.get_exam_time_limit_and_question_set(
            attempt.exam_id,
            attempt.part_selection or None,
            active_only=False,
        ).time_limit_minutes
        elapsed = now - attempt.started_at
        if elapsed > timedelta(minutes=limit_minutes):
            raise TimeExceeded(
                f"attempt {attempt.id} exceeded the {limit_minutes} minute limit",
                attempt_id=int(attempt.id),
                limit_minutes=int(limit_minutes),
                elapsed_seconds=int(elapsed.total_seconds()),
            )

    @classmethod
    def submit_attempt(
        cls,
        *,
        attempt_id: int,
        answers: Sequence[Any],
        student_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> SubmissionOutcome:
        submitted = _coerce_answers(answers)

        try:
            with transaction.atomic():
                # 1) load + lock, submitted_at must still be NULL
                attempt = cls._lock_attempt(attempt_id, student_id)
                if attempt.submitted_at is not None:
                    raise AlreadySubmitted(
                        f"attempt {attempt.id} was already submitted",
                        attempt_id=int(attempt.id),
                    )

                # 2) time limit (rejected -> nothing graded, stays unsubmitted)
                now = now or timezone.now()
                cls._check_time_limit(attempt, now)

                # 3) grading (answers + scores)
                grading = GradingEngine().grade(attempt, submitted)

                # 4) compare-and-set submitted_at in the same transaction
                claimed = (
                    Attempt.objects
                    .filter(id=attempt.id, submitted_at__isnull=True)
                    .update(submitted_at=now, updated_at=now)
                )
                if claimed != 1:
                    raise AlreadySubmitted(
                        f"attempt {attempt.id} was submitted concurrently",
                        attempt_id=int(attempt.id),
                    )
        except IntegrityError as e:
            # only a committed concurrent submit turns this into AlreadySubmitted
            if not Attempt.objects.filter(id=int(attempt_id), submitted_at__isnull=False).exists():
                raise
            logger.warning("submit race lost: attempt=%s (%s)", attempt_id, e)
            raise AlreadySubmitted(
                f"attempt {attempt_id} was submitted concurrently",
                attempt_id=int(attempt_id),
            ) from e

        weak_areas = analyze_weak_areas(
            grading.breakdown,
            dimension="section",
            threshold=_weak_area_threshold(),
        )

        logger.info(
            "attempt submitted: attempt=%s percent=%s total=%s weak_sections=%s",
            grading.attempt_id,
            grading.score_percent,
            grading.total_score,
            [w.key for w in weak_areas],
        )
        return SubmissionOutcome(grading=grading, weak_areas=weak_areas)

    # ======================================================
    # results
    # ======================================================
    @staticmethod
    def get_results(
        *,
        attempt_id: int,
        student_id: Optional[int] = None,
        dimension: str = "section",
    ) -> AttemptResult:
        qs = Attempt.objects.select_related("exam").filter(id=int(attempt_id))
        if student_id is not None:
            qs = qs.filter(student_id=int(student_id))
        attempt = qs.first()
        if attempt is None:
            raise AttemptNotFound(f"attempt {attempt_id} not found", attempt_id=int(attempt_id))
        if attempt.submitted_at is None:
            raise AttemptNotSubmitted(
                f"attempt {attempt.id} is still in progress",
                attempt_id=int(attempt.id),
            )

        breakdown = breakdown_for_attempt(attempt.id)
        weak_areas = analyze_weak_areas(
            breakdown,
            dimension=dimension,
            threshold=_weak_area_threshold(),
        )
        return AttemptResult(attempt=attempt, breakdown=breakdown, weak_areas=weak_areas)


def breakdown_for_attempt(attempt_id: int) -> List[AnswerBreakdown]:
    """
    Stored answers -> breakdown, correct choice resolved as of now.
    """
    rows = list(
        AttemptAnswer.objects
        .filter(attempt_id=int(attempt_id))
        .select_related("question")
        .order_by("question__number")
    )
    correct_map = exam_catalog.correct_choice_ids(r.question_id for r in rows)

    return [
        AnswerBreakdown(
            question_id=int(r.question_id),
            number=int(r.question.number),
            skill=str(r.question.skill),
            section=int(r.question.section),
            question_type=str(r.question.question_type or ""),
            chosen_choice_id=int(r.choice_id) if r.choice_id is not None else None,
            correct_choice_id=correct_map.get(int(r.question_id)),
            is_correct=bool(r.is_correct),
        )
        for r in rows
    ]
