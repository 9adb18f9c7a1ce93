# apps/domains/results/models/__init__.py

from .attempt import Attempt
from .attempt_answer import AttemptAnswer

__all__ = [
    "Attempt",
    "AttemptAnswer",
]
