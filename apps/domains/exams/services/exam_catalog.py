# apps/domains/exams/services/exam_catalog.py
"""
Read side of the exam / question bank, as seen by the grading engine.

The grading engine never queries exams models directly for these three facts;
it goes through here so the contract stays in one place:
  - time limit + ordered question set of an exam (optionally per part)
  - correctness of a choice
  - skill / section of a question
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from apps.domains.exams.models import Choice, Exam, ExamQuestion
from apps.domains.results.exceptions import (
    ChoiceNotFound,
    ExamNotFound,
    QuestionNotFound,
)


@dataclass(frozen=True)
class ExamQuestionSet:
    time_limit_minutes: int
    ordered_question_ids: List[int]


@dataclass(frozen=True)
class QuestionTag:
    skill: str
    section: int


def get_active_exam(exam_id: int) -> Exam:
    exam = Exam.objects.filter(id=int(exam_id), is_active=True).first()
    if exam is None:
        raise ExamNotFound(f"exam {exam_id} not found", exam_id=int(exam_id))
    return exam


def questions_in_scope(exam_id: int, part_selection: Optional[Iterable[int]] = None):
    """
    QuerySet of the exam's questions, ordered by number.
    part_selection (section numbers) narrows it down for part practice.
    """
    qs = ExamQuestion.objects.filter(exam_id=int(exam_id)).order_by("number")
    sections = sorted({int(s) for s in (part_selection or [])})
    if sections:
        qs = qs.filter(section__in=sections)
    return qs


def get_exam_time_limit_and_question_set(
    exam_id: int,
    part_selection: Optional[Iterable[int]] = None,
    *,
    active_only: bool = True,
) -> ExamQuestionSet:
    """
    active_only=False: an attempt started before the exam was retired
    can still be submitted.
    """
    if active_only:
        exam = get_active_exam(exam_id)
    else:
        exam = Exam.objects.filter(id=int(exam_id)).first()
        if exam is None:
            raise ExamNotFound(f"exam {exam_id} not found", exam_id=int(exam_id))
    ids = list(questions_in_scope(exam.id, part_selection).values_list("id", flat=True))
    return ExamQuestionSet(
        time_limit_minutes=int(exam.time_limit_minutes),
        ordered_question_ids=[int(i) for i in ids],
    )


def get_choice_correctness(choice_id: int) -> bool:
    flag = Choice.objects.filter(id=int(choice_id)).values_list("is_correct", flat=True).first()
    if flag is None:
        raise ChoiceNotFound(f"choice {choice_id} not found", choice_id=int(choice_id))
    return bool(flag)


def get_question_skill_and_section(question_id: int) -> QuestionTag:
    row = (
        ExamQuestion.objects
        .filter(id=int(question_id))
        .values("skill", "section")
        .first()
    )
    if row is None:
        raise QuestionNotFound(f"question {question_id} not found", question_id=int(question_id))
    return QuestionTag(skill=str(row["skill"]), section=int(row["section"]))


def sections_with_questions(exam_id: int) -> List[int]:
    return sorted(
        set(
            ExamQuestion.objects
            .filter(exam_id=int(exam_id))
            .values_list("section", flat=True)
        )
    )


def load_choices(choice_ids: Iterable[int]) -> Dict[int, Choice]:
    ids = {int(c) for c in choice_ids}
    if not ids:
        return {}
    return Choice.objects.filter(id__in=ids).in_bulk()


def correct_choice_ids(question_ids: Iterable[int]) -> Dict[int, int]:
    """question_id -> id of the choice currently marked correct"""
    ids = {int(q) for q in question_ids}
    if not ids:
        return {}
    rows = (
        Choice.objects
        .filter(question_id__in=ids, is_correct=True)
        .order_by("question_id", "id")
        .values_list("question_id", "id")
    )
    out: Dict[int, int] = {}
    for qid, cid in rows:
        out.setdefault(int(qid), int(cid))
    return out
