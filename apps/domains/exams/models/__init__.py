# apps/domains/exams/models/__init__.py
from .exam import Exam
from .question import ExamQuestion, Skill, SECTION_MIN, SECTION_MAX
from .choice import Choice

__all__ = [
    "Exam",
    "ExamQuestion",
    "Skill",
    "SECTION_MIN",
    "SECTION_MAX",
    "Choice",
]
