# ======================================================================
# PATH: apps/domains/results/exceptions.py
# ======================================================================
from __future__ import annotations

from typing import Optional


class GradingError(Exception):
    """
    Grading / attempt lifecycle failures are explicit & client-friendly.

    Every subclass fixes its own ``code`` and ``http_status`` so the API layer
    can turn it into ``{"code": ..., "detail": ...}`` without a lookup table,
    and the client can tell "time exceeded" from "already submitted".
    """

    code = "grading_error"
    http_status = 400

    def __init__(self, message: Optional[str] = None, **context):
        self.message = str(message or self.default_message())
        self.context = context
        super().__init__(self.message)

    def default_message(self) -> str:
        return self.code.replace("_", " ")


# ======================================================
# lookup failures
# ======================================================
class ExamNotFound(GradingError):
    code = "exam_not_found"
    http_status = 404


class QuestionNotFound(GradingError):
    code = "question_not_found"
    http_status = 404


class AttemptNotFound(GradingError):
    code = "attempt_not_found"
    http_status = 404


# ======================================================
# lifecycle rule violations
# ======================================================
class AlreadySubmitted(GradingError):
    code = "already_submitted"
    http_status = 409


class AttemptNotSubmitted(GradingError):
    code = "attempt_not_submitted"
    http_status = 409


class TimeExceeded(GradingError):
    code = "time_exceeded"
    http_status = 409


class InvalidAttemptMode(GradingError):
    code = "invalid_attempt_mode"


class InvalidPartSelection(GradingError):
    code = "invalid_part_selection"


# ======================================================
# submission content violations (whole submission rejected)
# ======================================================
class QuestionNotInExam(GradingError):
    code = "question_not_in_exam"


class DuplicateAnswer(GradingError):
    code = "duplicate_answer"


class ChoiceNotFound(GradingError):
    code = "choice_not_found"


# ======================================================
# cascade
# ======================================================
class RecalculationPartialFailure(GradingError):
    """
    One attempt could not be repaired by the recalculation cascade.

    Never raised out of the cascade: collected into the report so the other
    attempts still get repaired. The failed attempt keeps its stale scores
    until the cascade is re-run.
    """

    code = "recalculation_failed"
    http_status = 500

    def __init__(self, *, attempt_id: int, cause: BaseException):
        self.attempt_id = int(attempt_id)
        self.cause = cause
        super().__init__(
            f"attempt {attempt_id} recalculation failed: {cause!r}",
            attempt_id=int(attempt_id),
        )

    def as_dict(self) -> dict:
        return {
            "attempt_id": self.attempt_id,
            "code": self.code,
            "detail": str(self.cause),
        }
