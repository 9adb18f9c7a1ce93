# PATH: apps/domains/results/services/grading_engine.py
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from django.db import transaction

from apps.domains.exams.models import Skill
from apps.domains.exams.services import exam_catalog
from apps.domains.results.dto.grading import (
    AnswerBreakdown,
    GradingResult,
    SubmittedAnswer,
)
from apps.domains.results.exceptions import (
    ChoiceNotFound,
    DuplicateAnswer,
    QuestionNotInExam,
)
from apps.domains.results.models import Attempt, AttemptAnswer
from apps.domains.results.services.score_conversion import (
    SkillScores,
    SkillTally,
    compute_skill_scores,
    score_percent,
)

logger = logging.getLogger(__name__)

SCORE_FIELDS = [
    "score_percent",
    "score_listening",
    "score_reading",
    "total_correct",
    "total_questions",
    "listening_correct",
    "listening_total",
    "reading_correct",
    "reading_total",
]


# ============================================================
# shared with the recalculation cascade
# ============================================================
def tally_by_skill(pairs: Iterable[tuple]) -> SkillTally:
    """
    pairs: (skill, is_correct) per graded question
    """
    lc = lt = rc = rt = 0
    for skill, is_correct in pairs:
        if skill == Skill.LISTENING:
            lt += 1
            lc += 1 if is_correct else 0
        elif skill == Skill.READING:
            rt += 1
            rc += 1 if is_correct else 0
    return SkillTally(
        listening_correct=lc,
        listening_total=lt,
        reading_correct=rc,
        reading_total=rt,
    )


def score_values(mode: str, tally: SkillTally) -> Dict[str, Optional[int]]:
    """
    SCORE_FIELDS -> value, regime by mode. Pure, nothing is written.
    """
    scores = compute_skill_scores(mode, tally)
    return {
        "score_percent": score_percent(tally.total_correct, tally.total_questions),
        "score_listening": scores.listening,
        "score_reading": scores.reading,
        "total_correct": tally.total_correct,
        "total_questions": tally.total_questions,
        "listening_correct": tally.listening_correct,
        "listening_total": tally.listening_total,
        "reading_correct": tally.reading_correct,
        "reading_total": tally.reading_total,
    }


def scores_match(attempt: Attempt, values: Dict[str, Optional[int]]) -> bool:
    return all(getattr(attempt, name) == value for name, value in values.items())


def apply_scores(attempt: Attempt, tally: SkillTally, *, extra_fields: Sequence[str] = ()) -> SkillScores:
    """
    Regime by attempt.mode -> write score fields on the attempt row.
    """
    values = score_values(attempt.mode, tally)
    for name, value in values.items():
        setattr(attempt, name, value)

    attempt.save(update_fields=[*SCORE_FIELDS, *extra_fields, "updated_at"])
    return SkillScores(listening=values["score_listening"], reading=values["score_reading"])


# ============================================================
# engine
# ============================================================
class GradingEngine:
    """
    One submission -> AttemptAnswer rows + attempt score fields.

    Contract:
    - validation first, writes after: a bad question / choice reference fails
      the whole submission and nothing is written
    - every in-scope question gets exactly one AttemptAnswer
      (unanswered -> choice NULL, is_correct False)
    - is_correct is copied from the choice as it is right now
    - runs inside transaction.atomic; the caller's transaction (submit) owns
      the final commit together with submitted_at
    """

    def _normalize_answers(
        self,
        *,
        attempt: Attempt,
        answers: Sequence[SubmittedAnswer],
        in_scope: Dict[int, object],
    ) -> Dict[int, Optional[int]]:
        chosen: Dict[int, Optional[int]] = {}

        for a in answers:
            qid = int(a.question_id)
            if qid not in in_scope:
                raise QuestionNotInExam(
                    f"question {qid} is not part of attempt {attempt.id}",
                    attempt_id=int(attempt.id),
                    question_id=qid,
                )
            if qid in chosen:
                raise DuplicateAnswer(
                    f"question {qid} answered more than once",
                    question_id=qid,
                )
            chosen[qid] = int(a.choice_id) if a.choice_id is not None else None

        return chosen

    def _check_choices(self, chosen: Dict[int, Optional[int]]) -> Dict[int, object]:
        choices = exam_catalog.load_choices(cid for cid in chosen.values() if cid is not None)

        for qid, cid in chosen.items():
            if cid is None:
                continue
            choice = choices.get(cid)
            if choice is None or int(choice.question_id) != qid:
                raise ChoiceNotFound(
                    f"choice {cid} does not belong to question {qid}",
                    question_id=qid,
                    choice_id=cid,
                )

        return choices

    @transaction.atomic
    def grade(self, attempt: Attempt, answers: Sequence[SubmittedAnswer]) -> GradingResult:
        # ---------------------------
        # 1) question scope (exam + parts)
        # ---------------------------
        questions = list(
            exam_catalog.questions_in_scope(attempt.exam_id, attempt.part_selection or None)
        )
        in_scope = {int(q.id): q for q in questions}

        # ---------------------------
        # 2) validation (no writes yet)
        # ---------------------------
        chosen = self._normalize_answers(attempt=attempt, answers=answers, in_scope=in_scope)
        choices = self._check_choices(chosen)
        correct_map = exam_catalog.correct_choice_ids(in_scope.keys())

        # ---------------------------
        # 3) AttemptAnswer rows + breakdown
        # ---------------------------
        rows: List[AttemptAnswer] = []
        breakdown: List[AnswerBreakdown] = []

        for q in questions:
            cid = chosen.get(int(q.id))
            is_correct = bool(choices[cid].is_correct) if cid is not None else False

            rows.append(
                AttemptAnswer(
                    attempt=attempt,
                    question_id=q.id,
                    choice_id=cid,
                    is_correct=is_correct,
                )
            )
            breakdown.append(
                AnswerBreakdown(
                    question_id=int(q.id),
                    number=int(q.number),
                    skill=str(q.skill),
                    section=int(q.section),
                    question_type=str(q.question_type or ""),
                    chosen_choice_id=cid,
                    correct_choice_id=correct_map.get(int(q.id)),
                    is_correct=is_correct,
                )
            )

        AttemptAnswer.objects.bulk_create(rows)

        # ---------------------------
        # 4) tallies + scores
        # ---------------------------
        tally = tally_by_skill((b.skill, b.is_correct) for b in breakdown)
        scores = apply_scores(attempt, tally)

        logger.info(
            "graded attempt=%s mode=%s correct=%s/%s L=%s R=%s",
            attempt.id,
            attempt.mode,
            tally.total_correct,
            tally.total_questions,
            scores.listening,
            scores.reading,
        )

        return GradingResult(
            attempt_id=int(attempt.id),
            mode=str(attempt.mode),
            total_correct=tally.total_correct,
            total_questions=tally.total_questions,
            listening_correct=tally.listening_correct,
            listening_total=tally.listening_total,
            reading_correct=tally.reading_correct,
            reading_total=tally.reading_total,
            score_percent=int(attempt.score_percent),
            score_listening=scores.listening,
            score_reading=scores.reading,
            breakdown=breakdown,
        )
