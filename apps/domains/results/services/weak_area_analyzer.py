# PATH: apps/domains/results/services/weak_area_analyzer.py
from __future__ import annotations

from collections import OrderedDict
from typing import Any, Dict, Iterable, List

from apps.domains.results.dto.grading import AnswerBreakdown, WeakArea

DEFAULT_WEAK_AREA_THRESHOLD = 0.60

# grouping dimensions available on AnswerBreakdown
DIMENSIONS = ("section", "question_type", "skill")


def _group_key(entry: AnswerBreakdown, dimension: str) -> Any:
    value = getattr(entry, dimension, None)
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def accuracy_by_group(
    entries: Iterable[AnswerBreakdown],
    *,
    dimension: str = "section",
) -> Dict[Any, Dict[str, int]]:
    """
    {group_key: {"correct": n, "total": m}} in first-seen order.
    Entries without a value for the dimension are left out.
    """
    if dimension not in DIMENSIONS:
        raise ValueError(f"unknown weak-area dimension: {dimension!r}")

    groups: Dict[Any, Dict[str, int]] = OrderedDict()
    for entry in entries:
        key = _group_key(entry, dimension)
        if key is None:
            continue
        bucket = groups.setdefault(key, {"correct": 0, "total": 0})
        bucket["total"] += 1
        if entry.is_correct:
            bucket["correct"] += 1
    return groups


def analyze_weak_areas(
    entries: Iterable[AnswerBreakdown],
    *,
    dimension: str = "section",
    threshold: float = DEFAULT_WEAK_AREA_THRESHOLD,
) -> List[WeakArea]:
    """
    Groups whose accuracy is strictly below threshold, worst first.

    Advisory only: nothing here is persisted or feeds back into scores.
    """
    threshold = float(threshold)
    weak: List[WeakArea] = []

    for key, counts in accuracy_by_group(entries, dimension=dimension).items():
        total = int(counts["total"])
        if total <= 0:
            continue
        correct = int(counts["correct"])
        accuracy = correct / total
        if accuracy < threshold:
            weak.append(
                WeakArea(
                    dimension=dimension,
                    key=key,
                    correct=correct,
                    total=total,
                    accuracy=round(accuracy, 4),
                )
            )

    weak.sort(key=lambda w: (w.accuracy, str(w.key)))
    return weak
