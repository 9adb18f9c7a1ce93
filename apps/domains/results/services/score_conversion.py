# PATH: apps/domains/results/services/score_conversion.py
"""
Raw correct counts -> TOEIC display scores.

Pure functions only (no ORM, no settings): the grading engine and the
recalculation cascade must derive identical scores from identical tallies.

Two regimes, chosen by attempt mode:

- FULL_TEST        : fixed conversion tables, one per skill (0..100 raw -> 5..495)
- PRACTICE_BY_PART : linear, round_half_up(correct / total * 495)
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Tuple

MAX_SKILL_SCORE = 495
FULL_TEST_QUESTIONS_PER_SKILL = 100

FULL_TEST = "FULL_TEST"
PRACTICE_BY_PART = "PRACTICE_BY_PART"

# =========================================================
# conversion tables (index = raw correct count)
# =========================================================
# non-decreasing, [0] is the participation floor, [100] = 495

LISTENING_TABLE: Tuple[int, ...] = (
    5, 5, 5, 5, 5, 5, 5, 10, 15, 20,                        # 0-9
    25, 30, 35, 40, 45, 50, 55, 60, 65, 70,                 # 10-19
    75, 80, 85, 90, 95, 100, 110, 115, 120, 125,            # 20-29
    130, 135, 140, 145, 150, 160, 165, 170, 175, 180,       # 30-39
    185, 190, 195, 200, 210, 215, 220, 230, 240, 245,       # 40-49
    250, 255, 260, 270, 275, 280, 290, 295, 300, 310,       # 50-59
    315, 320, 325, 330, 340, 345, 350, 360, 365, 370,       # 60-69
    380, 385, 390, 395, 400, 405, 410, 420, 425, 430,       # 70-79
    440, 445, 450, 460, 465, 470, 475, 480, 485, 490,       # 80-89
    495, 495, 495, 495, 495, 495, 495, 495, 495, 495,       # 90-99
    495,                                                    # 100
)

READING_TABLE: Tuple[int, ...] = (
    5, 5, 5, 5, 5, 5, 5, 5, 5, 5,                           # 0-9
    5, 5, 5, 5, 5, 5, 10, 15, 20, 25,                       # 10-19
    30, 35, 40, 45, 50, 60, 65, 70, 80, 85,                 # 20-29
    90, 95, 100, 110, 115, 120, 125, 130, 140, 145,         # 30-39
    150, 160, 165, 170, 175, 180, 190, 195, 200, 210,       # 40-49
    215, 220, 225, 230, 235, 240, 250, 255, 260, 265,       # 50-59
    270, 280, 285, 290, 300, 305, 310, 320, 325, 330,       # 60-69
    335, 340, 350, 355, 360, 365, 370, 380, 385, 390,       # 70-79
    395, 400, 405, 410, 415, 420, 425, 430, 435, 445,       # 80-89
    450, 455, 465, 470, 480, 485, 485, 490, 495, 495,       # 90-99
    495,                                                    # 100
)


# =========================================================
# helpers
# =========================================================
def round_half_up(value) -> int:
    """
    0.5 always rounds away from zero (12.5 -> 13), unlike round() which
    rounds half to even.
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _ratio_scaled(correct: int, total: int, scale: int) -> int:
    correct = int(correct)
    total = int(total)
    if correct < 0 or total < 0:
        raise ValueError(f"counts must be >= 0 (correct={correct}, total={total})")
    if correct > total:
        raise ValueError(f"correct ({correct}) cannot exceed total ({total})")
    if total == 0:
        return 0
    # exact rational -> Decimal, no float drift before rounding
    return round_half_up(Decimal(correct) * Decimal(scale) / Decimal(total))


def _lookup(table: Tuple[int, ...], correct: int) -> int:
    correct = int(correct)
    if correct < 0:
        raise ValueError(f"correct count must be >= 0 (got {correct})")
    return table[min(correct, FULL_TEST_QUESTIONS_PER_SKILL)]


# =========================================================
# public API
# =========================================================
def convert_listening_score(correct: int) -> int:
    return _lookup(LISTENING_TABLE, correct)


def convert_reading_score(correct: int) -> int:
    return _lookup(READING_TABLE, correct)


def percentage_scaled_score(correct: int, total: int) -> int:
    """PRACTICE_BY_PART skill score, same 0..495 display range as full tests."""
    return _ratio_scaled(correct, total, MAX_SKILL_SCORE)


def score_percent(correct: int, total: int) -> int:
    """Overall raw accuracy 0..100, identical in every mode."""
    return _ratio_scaled(correct, total, 100)


@dataclass(frozen=True)
class SkillTally:
    listening_correct: int = 0
    listening_total: int = 0
    reading_correct: int = 0
    reading_total: int = 0

    @property
    def total_correct(self) -> int:
        return self.listening_correct + self.reading_correct

    @property
    def total_questions(self) -> int:
        return self.listening_total + self.reading_total


@dataclass(frozen=True)
class SkillScores:
    listening: int
    reading: int

    @property
    def total(self) -> int:
        return self.listening + self.reading


def compute_skill_scores(mode: str, tally: SkillTally) -> SkillScores:
    """
    Regime selection by attempt mode.
    """
    mode = str(mode)

    if mode == FULL_TEST:
        return SkillScores(
            listening=convert_listening_score(tally.listening_correct),
            reading=convert_reading_score(tally.reading_correct),
        )

    if mode == PRACTICE_BY_PART:
        return SkillScores(
            listening=percentage_scaled_score(tally.listening_correct, tally.listening_total),
            reading=percentage_scaled_score(tally.reading_correct, tally.reading_total),
        )

    raise ValueError(f"unknown attempt mode: {mode!r}")
