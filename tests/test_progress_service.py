import pytest

from apps.domains.results.dto.grading import SubmittedAnswer
from apps.domains.results.exceptions import QuestionNotFound
from apps.domains.results.services.attempt_session_service import AttemptSessionService
from apps.domains.results.services.progress_service import ProgressService
from apps.domains.results.services.recalculation_service import question_correct_answer_changed

from .conftest import choice_of

pytestmark = pytest.mark.django_db


def _submit(exam, student, answers):
    attempt = AttemptSessionService.start_attempt(exam_id=exam.id, mode="FULL_TEST", student_id=student.id)
    AttemptSessionService.submit_attempt(attempt_id=attempt.id, answers=answers)
    return attempt


def _pick(question, label):
    return SubmittedAnswer(question_id=question.id, choice_id=choice_of(question, label).id)


@pytest.fixture
def third_student(django_user_model):
    return django_user_model.objects.create_user(username="student3", password="pw")


class TestQuestionStatistics:
    def test_counts_and_difficulty(self, exam, questions, student, other_student, third_student):
        q1 = questions[0]
        _submit(exam, student, [_pick(q1, "B")])
        _submit(exam, other_student, [_pick(q1, "B")])
        _submit(exam, third_student, [])
        # in progress, not counted
        AttemptSessionService.start_attempt(exam_id=exam.id, mode="FULL_TEST", student_id=student.id)

        stats = ProgressService.get_question_statistics(question_id=q1.id)

        assert stats["exam_id"] == exam.id
        assert stats["section"] == 1
        assert stats["total_attempts"] == 3
        assert stats["correct_attempts"] == 0
        assert stats["unanswered"] == 1
        assert stats["correct_percentage"] == 0
        assert stats["difficulty"] == "HARD"
        assert {c["label"]: c["picked"] for c in stats["choices"]} == {"A": 0, "B": 2, "C": 0, "D": 0}

    def test_follows_the_cascade(self, exam, questions, student, other_student, third_student):
        q1 = questions[0]
        _submit(exam, student, [_pick(q1, "B")])
        _submit(exam, other_student, [_pick(q1, "B")])
        _submit(exam, third_student, [])
        q1.choices.update(is_correct=False)
        q1.choices.filter(label="B").update(is_correct=True)

        question_correct_answer_changed(q1.id)
        stats = ProgressService.get_question_statistics(question_id=q1.id)

        assert stats["correct_attempts"] == 2
        assert stats["correct_percentage"] == 67
        assert stats["difficulty"] == "MEDIUM"
        assert [c["label"] for c in stats["choices"] if c["is_correct"]] == ["B"]

    def test_easy_question(self, exam, questions, student):
        _submit(exam, student, [_pick(questions[0], "A")])

        stats = ProgressService.get_question_statistics(question_id=questions[0].id)

        assert stats["correct_percentage"] == 100
        assert stats["difficulty"] == "EASY"

    def test_never_answered(self, exam, questions):
        stats = ProgressService.get_question_statistics(question_id=questions[0].id)

        assert stats["total_attempts"] == 0
        assert stats["correct_percentage"] == 0
        assert stats["difficulty"] == "HARD"

    def test_unknown_question(self, db):
        with pytest.raises(QuestionNotFound):
            ProgressService.get_question_statistics(question_id=9999)
