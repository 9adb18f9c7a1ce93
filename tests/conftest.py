# tests/conftest.py
import pytest
from rest_framework.test import APIClient

from apps.domains.exams.models import Choice, Exam, ExamQuestion, Skill
from apps.domains.results.dto.grading import SubmittedAnswer

# (skill, section, question_type, count)
DEFAULT_LAYOUT = [
    (Skill.LISTENING, 1, "photo", 2),
    (Skill.LISTENING, 2, "response", 3),
    (Skill.READING, 5, "grammar", 3),
    (Skill.READING, 7, "inference", 2),
]

LABELS = ["A", "B", "C", "D"]


def build_exam(*, title="Practice Test 1", layout=None, time_limit_minutes=120, is_active=True, correct_label="A"):
    """
    Exam + questions numbered 1..n in layout order, four choices each,
    correct_label marked correct.
    """
    exam = Exam.objects.create(
        title=title,
        time_limit_minutes=time_limit_minutes,
        is_active=is_active,
    )
    number = 0
    for skill, section, qtype, count in layout or DEFAULT_LAYOUT:
        for _ in range(count):
            number += 1
            q = ExamQuestion.objects.create(
                exam=exam,
                number=number,
                skill=skill,
                section=section,
                question_type=qtype,
            )
            Choice.objects.bulk_create([
                Choice(question=q, label=label, is_correct=(label == correct_label))
                for label in LABELS
            ])
    return exam


def choice_of(question, label):
    return Choice.objects.get(question=question, label=label)


def correct_answer(question):
    return SubmittedAnswer(
        question_id=question.id,
        choice_id=Choice.objects.get(question=question, is_correct=True).id,
    )


def wrong_answer(question):
    return SubmittedAnswer(
        question_id=question.id,
        choice_id=Choice.objects.filter(question=question, is_correct=False).order_by("label").first().id,
    )


@pytest.fixture
def exam(db):
    return build_exam()


@pytest.fixture
def questions(exam):
    return list(exam.questions.order_by("number"))


@pytest.fixture
def student(django_user_model):
    return django_user_model.objects.create_user(username="student1", password="pw")


@pytest.fixture
def other_student(django_user_model):
    return django_user_model.objects.create_user(username="student2", password="pw")


@pytest.fixture
def staff_user(django_user_model):
    return django_user_model.objects.create_user(username="staff1", password="pw", is_staff=True)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def student_client(api_client, student):
    api_client.force_authenticate(user=student)
    return api_client


@pytest.fixture
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client
