# apps/domains/results/dto/grading.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class SubmittedAnswer:
    question_id: int
    choice_id: Optional[int] = None  # None = left blank


@dataclass(frozen=True)
class AnswerBreakdown:
    """
    One graded question as shown on the result screen
    (chosen vs. correct choice) and fed to the weak-area analyzer.
    """
    question_id: int
    number: int
    skill: str
    section: int
    question_type: str
    chosen_choice_id: Optional[int]
    correct_choice_id: Optional[int]
    is_correct: bool


@dataclass(frozen=True)
class WeakArea:
    dimension: str
    key: Any
    correct: int
    total: int
    accuracy: float


@dataclass(frozen=True)
class GradingResult:
    attempt_id: int
    mode: str
    total_correct: int
    total_questions: int
    listening_correct: int
    listening_total: int
    reading_correct: int
    reading_total: int
    score_percent: int
    score_listening: int
    score_reading: int
    breakdown: List[AnswerBreakdown] = field(default_factory=list)

    @property
    def total_score(self) -> int:
        return self.score_listening + self.score_reading

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["total_score"] = self.total_score
        return data


@dataclass(frozen=True)
class SubmissionOutcome:
    grading: GradingResult
    weak_areas: List[WeakArea]
