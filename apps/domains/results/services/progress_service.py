# PATH: apps/domains/results/services/progress_service.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db.models import Avg, Count, Max, Q

from apps.domains.exams.models import Exam, ExamQuestion
from apps.domains.results.dto.grading import AnswerBreakdown
from apps.domains.results.exceptions import ExamNotFound, QuestionNotFound
from apps.domains.results.models import Attempt, AttemptAnswer
from apps.domains.results.services.score_conversion import score_percent
from apps.domains.results.services.weak_area_analyzer import analyze_weak_areas


def _avg(value) -> Optional[float]:
    return round(float(value), 2) if value is not None else None


def _difficulty(percentage: int) -> str:
    if percentage >= 80:
        return "EASY"
    if percentage >= 50:
        return "MEDIUM"
    return "HARD"


class ProgressService:
    """
    Read models for result screens.

    - aggregates only (Count / Avg / Max), no locks
    - weak areas are recomputed from stored AttemptAnswer rows every time
    """

    # ======================================================
    # student
    # ======================================================
    @staticmethod
    def get_progress_summary(*, student_id: int) -> Dict[str, Any]:
        student_id = int(student_id)
        recent_limit = int(getattr(settings, "RESULTS_PROGRESS_RECENT_LIMIT", 10))
        threshold = float(getattr(settings, "RESULTS_WEAK_AREA_THRESHOLD", 0.6))

        qs = Attempt.objects.filter(student_id=student_id)
        submitted = qs.filter(submitted_at__isnull=False)

        counts = qs.aggregate(
            attempts=Count("id"),
            submitted=Count("id", filter=Q(submitted_at__isnull=False)),
        )
        avg_percent = submitted.aggregate(v=Avg("score_percent"))["v"]

        active = (
            qs.filter(submitted_at__isnull=True)
            .order_by("-started_at", "-id")
            .values_list("id", flat=True)
            .first()
        )

        best_full = None
        for lis, rea in (
            submitted.filter(mode=Attempt.Mode.FULL_TEST)
            .exclude(score_listening__isnull=True)
            .exclude(score_reading__isnull=True)
            .values_list("score_listening", "score_reading")
        ):
            total = int(lis) + int(rea)
            best_full = total if best_full is None else max(best_full, total)

        recent = [
            {
                "attempt_id": a.id,
                "exam_id": a.exam_id,
                "exam_title": a.exam.title,
                "mode": a.mode,
                "part_selection": list(a.part_selection or []),
                "submitted_at": a.submitted_at,
                "score_percent": a.score_percent,
                "score_listening": a.score_listening,
                "score_reading": a.score_reading,
                "total_score": a.total_score,
            }
            for a in submitted.select_related("exam").order_by("-submitted_at", "-id")[:recent_limit]
        ]

        # weak areas over every graded answer of the student
        rows = (
            AttemptAnswer.objects
            .filter(attempt__student_id=student_id, attempt__submitted_at__isnull=False)
            .values_list(
                "question_id",
                "question__number",
                "question__skill",
                "question__section",
                "question__question_type",
                "choice_id",
                "is_correct",
            )
        )
        entries: List[AnswerBreakdown] = [
            AnswerBreakdown(
                question_id=int(qid),
                number=int(number),
                skill=str(skill),
                section=int(section),
                question_type=str(qtype or ""),
                chosen_choice_id=cid,
                correct_choice_id=None,
                is_correct=bool(ok),
            )
            for qid, number, skill, section, qtype, cid, ok in rows
        ]
        weak_areas = analyze_weak_areas(entries, dimension="section", threshold=threshold)

        return {
            "student_id": student_id,
            "attempts": int(counts["attempts"] or 0),
            "submitted_attempts": int(counts["submitted"] or 0),
            "active_attempt_id": active,
            "avg_score_percent": _avg(avg_percent),
            "best_full_test_total": best_full,
            "recent_attempts": recent,
            "weak_areas": [
                {
                    "section": w.key,
                    "correct": w.correct,
                    "total": w.total,
                    "accuracy": w.accuracy,
                }
                for w in weak_areas
            ],
        }

    # ======================================================
    # staff
    # ======================================================
    @staticmethod
    def get_exam_statistics(*, exam_id: int) -> Dict[str, Any]:
        exam = Exam.objects.filter(id=int(exam_id)).first()
        if exam is None:
            raise ExamNotFound(f"exam {exam_id} not found", exam_id=int(exam_id))

        sections = (
            ExamQuestion.objects
            .filter(exam=exam)
            .values("section")
            .annotate(questions=Count("id"))
            .order_by("section")
        )

        agg = Attempt.objects.filter(exam=exam).aggregate(
            attempts=Count("id"),
            submitted=Count("id", filter=Q(submitted_at__isnull=False)),
            avg_percent=Avg("score_percent", filter=Q(submitted_at__isnull=False)),
            max_percent=Max("score_percent", filter=Q(submitted_at__isnull=False)),
        )

        return {
            "exam_id": exam.id,
            "title": exam.title,
            "is_active": bool(exam.is_active),
            "questions_by_section": {int(r["section"]): int(r["questions"]) for r in sections},
            "total_attempts": int(agg["attempts"] or 0),
            "submitted_attempts": int(agg["submitted"] or 0),
            "avg_score_percent": _avg(agg["avg_percent"]),
            "max_score_percent": agg["max_percent"],
        }

    @staticmethod
    def get_question_statistics(*, question_id: int) -> Dict[str, Any]:
        """
        Per-question usage over submitted attempts.

        - correct_percentage: half-up 0..100 (0 when nobody answered yet)
        - difficulty: EASY >= 80, MEDIUM >= 50, else HARD
        - is_correct is the stored copy, so numbers follow the recalculation cascade
        """
        question = ExamQuestion.objects.filter(id=int(question_id)).first()
        if question is None:
            raise QuestionNotFound(f"question {question_id} not found", question_id=int(question_id))

        qs = AttemptAnswer.objects.filter(
            question=question,
            attempt__submitted_at__isnull=False,
        )
        agg = qs.aggregate(
            total=Count("id"),
            correct=Count("id", filter=Q(is_correct=True)),
            unanswered=Count("id", filter=Q(choice__isnull=True)),
        )
        total = int(agg["total"] or 0)
        correct = int(agg["correct"] or 0)
        percentage = score_percent(correct, total)

        picked = {
            int(r["choice_id"]): int(r["cnt"])
            for r in (
                qs.filter(choice__isnull=False)
                .values("choice_id")
                .annotate(cnt=Count("id"))
            )
        }

        return {
            "question_id": question.id,
            "exam_id": question.exam_id,
            "number": question.number,
            "skill": question.skill,
            "section": question.section,
            "total_attempts": total,
            "correct_attempts": correct,
            "unanswered": int(agg["unanswered"] or 0),
            "correct_percentage": percentage,
            "difficulty": _difficulty(percentage),
            "choices": [
                {
                    "choice_id": c.id,
                    "label": c.label,
                    "is_correct": c.is_correct,
                    "picked": picked.get(c.id, 0),
                }
                for c in question.choices.order_by("label")
            ],
        }
