import threading
from datetime import timedelta

import pytest
from django.db import IntegrityError, connection
from django.utils import timezone

from apps.domains.exams.models import Exam
from apps.domains.results.dto.grading import SubmittedAnswer
from apps.domains.results.exceptions import (
    AlreadySubmitted,
    AttemptNotFound,
    AttemptNotSubmitted,
    ChoiceNotFound,
    DuplicateAnswer,
    ExamNotFound,
    InvalidAttemptMode,
    InvalidPartSelection,
    QuestionNotInExam,
    TimeExceeded,
)
from apps.domains.results.models import Attempt, AttemptAnswer
from apps.domains.results.services.attempt_session_service import AttemptSessionService
from apps.domains.results.services.score_conversion import LISTENING_TABLE, READING_TABLE

from .conftest import build_exam, choice_of, correct_answer, wrong_answer

pytestmark = pytest.mark.django_db


def _start(exam, student, mode="FULL_TEST", part_selection=None):
    return AttemptSessionService.start_attempt(
        exam_id=exam.id,
        mode=mode,
        part_selection=part_selection,
        student_id=student.id,
    )


class TestStartAttempt:
    def test_full_test(self, exam, student):
        attempt = _start(exam, student, part_selection=[1, 2])

        assert attempt.mode == Attempt.Mode.FULL_TEST
        assert attempt.part_selection == []
        assert attempt.submitted_at is None
        assert attempt.started_at is not None
        assert attempt.score_percent is None

    def test_practice_keeps_sorted_parts(self, exam, student):
        attempt = _start(exam, student, mode="PRACTICE_BY_PART", part_selection=[5, 2, 5])

        assert attempt.part_selection == [2, 5]

    @pytest.mark.parametrize("parts", [None, [], [8], [0], [3]])
    def test_invalid_part_selection(self, exam, student, parts):
        # the default exam has no questions in part 3
        with pytest.raises(InvalidPartSelection):
            _start(exam, student, mode="PRACTICE_BY_PART", part_selection=parts)

        assert Attempt.objects.count() == 0

    def test_unknown_mode(self, exam, student):
        with pytest.raises(InvalidAttemptMode):
            _start(exam, student, mode="MOCK_EXAM")

    def test_missing_exam(self, db, student):
        with pytest.raises(ExamNotFound):
            AttemptSessionService.start_attempt(exam_id=9999, mode="FULL_TEST", student_id=student.id)

    def test_inactive_exam(self, student):
        exam = build_exam(is_active=False)

        with pytest.raises(ExamNotFound):
            _start(exam, student)


class TestActiveAttempt:
    def test_none_without_attempts(self, student):
        assert AttemptSessionService.get_active_attempt(student_id=student.id) is None

    def test_latest_unsubmitted_attempt_wins(self, exam, student):
        older = _start(exam, student)
        newer = _start(exam, student, mode="PRACTICE_BY_PART", part_selection=[1])
        Attempt.objects.filter(id=older.id).update(started_at=timezone.now() - timedelta(minutes=10))

        active = AttemptSessionService.get_active_attempt(student_id=student.id)

        assert active.id == newer.id
        # starting a new attempt does not close the old one
        assert Attempt.objects.get(id=older.id).submitted_at is None

    def test_submitted_attempts_are_not_active(self, exam, student):
        attempt = _start(exam, student)
        AttemptSessionService.submit_attempt(attempt_id=attempt.id, answers=[])

        assert AttemptSessionService.get_active_attempt(student_id=student.id) is None

    def test_other_students_are_ignored(self, exam, student, other_student):
        _start(exam, other_student)

        assert AttemptSessionService.get_active_attempt(student_id=student.id) is None


class TestSubmitAttempt:
    def test_full_test_grading(self, exam, questions, student):
        attempt = _start(exam, student)
        q = questions
        answers = [
            correct_answer(q[0]),
            wrong_answer(q[1]),
            correct_answer(q[2]),
            correct_answer(q[5]),
            wrong_answer(q[8]),
        ]

        outcome = AttemptSessionService.submit_attempt(attempt_id=attempt.id, answers=answers)
        grading = outcome.grading

        assert (grading.listening_correct, grading.listening_total) == (2, 5)
        assert (grading.reading_correct, grading.reading_total) == (1, 5)
        assert grading.total_correct == 3
        assert grading.total_questions == 10
        assert grading.score_percent == 30
        assert grading.score_listening == LISTENING_TABLE[2]
        assert grading.score_reading == READING_TABLE[1]

        attempt.refresh_from_db()
        assert attempt.submitted_at is not None
        assert attempt.score_percent == 30
        assert attempt.total_score == grading.total_score

    def test_unanswered_questions_are_stored_as_incorrect(self, exam, questions, student):
        attempt = _start(exam, student)

        AttemptSessionService.submit_attempt(attempt_id=attempt.id, answers=[correct_answer(questions[0])])

        rows = AttemptAnswer.objects.filter(attempt=attempt)
        assert rows.count() == 10
        blank = rows.filter(choice__isnull=True)
        assert blank.count() == 9
        assert not blank.filter(is_correct=True).exists()

    def test_explicit_blank_answer(self, exam, questions, student):
        attempt = _start(exam, student)

        outcome = AttemptSessionService.submit_attempt(
            attempt_id=attempt.id,
            answers=[{"question_id": questions[0].id, "choice_id": None}],
        )

        assert outcome.grading.total_correct == 0
        assert outcome.grading.breakdown[0].chosen_choice_id is None

    def test_practice_by_part_grading(self, exam, questions, student):
        attempt = _start(exam, student, mode="PRACTICE_BY_PART", part_selection=[2, 5])
        q = questions

        outcome = AttemptSessionService.submit_attempt(
            attempt_id=attempt.id,
            answers=[correct_answer(q[2]), correct_answer(q[3]), wrong_answer(q[4]), correct_answer(q[5])],
        )
        grading = outcome.grading

        # part 2 = Q3..Q5 (listening), part 5 = Q6..Q8 (reading)
        assert grading.total_questions == 6
        assert grading.score_listening == 330
        assert grading.score_reading == 165
        assert grading.score_percent == 50
        assert AttemptAnswer.objects.filter(attempt=attempt).count() == 6

    def test_breakdown_and_weak_areas(self, exam, questions, student):
        attempt = _start(exam, student)
        # part 1 fully right, everything else blank
        outcome = AttemptSessionService.submit_attempt(
            attempt_id=attempt.id,
            answers=[correct_answer(questions[0]), correct_answer(questions[1])],
        )

        first = outcome.grading.breakdown[0]
        assert first.number == 1
        assert first.section == 1
        assert first.chosen_choice_id == first.correct_choice_id
        assert [w.key for w in outcome.weak_areas] == [2, 5, 7]

    def test_time_exceeded_is_not_graded(self, exam, student):
        attempt = _start(exam, student)
        Attempt.objects.filter(id=attempt.id).update(started_at=timezone.now() - timedelta(minutes=121))

        with pytest.raises(TimeExceeded):
            AttemptSessionService.submit_attempt(attempt_id=attempt.id, answers=[])

        attempt.refresh_from_db()
        assert attempt.submitted_at is None
        assert attempt.score_percent is None
        assert not AttemptAnswer.objects.filter(attempt=attempt).exists()

    def test_exactly_at_limit_is_accepted(self, exam, student):
        attempt = _start(exam, student)

        AttemptSessionService.submit_attempt(
            attempt_id=attempt.id,
            answers=[],
            now=attempt.started_at + timedelta(minutes=exam.time_limit_minutes),
        )

        attempt.refresh_from_db()
        assert attempt.submitted_at is not None

    def test_second_submit_is_rejected(self, exam, questions, student):
        attempt = _start(exam, student)
        AttemptSessionService.submit_attempt(attempt_id=attempt.id, answers=[correct_answer(questions[0])])
        attempt.refresh_from_db()
        first_submitted_at = attempt.submitted_at

        with pytest.raises(AlreadySubmitted):
            AttemptSessionService.submit_attempt(
                attempt_id=attempt.id,
                answers=[correct_answer(q) for q in questions],
            )

        attempt.refresh_from_db()
        assert attempt.submitted_at == first_submitted_at
        assert attempt.total_correct == 1

    def test_lost_race_surfaces_already_submitted(self, exam, questions, student, monkeypatch):
        attempt = _start(exam, student)
        # read before the concurrent winner committed its answers and submitted_at
        stale = Attempt.objects.get(id=attempt.id)
        AttemptAnswer.objects.create(attempt=attempt, question=questions[0], choice=None, is_correct=False)
        Attempt.objects.filter(id=attempt.id).update(submitted_at=timezone.now())
        monkeypatch.setattr(
            AttemptSessionService,
            "_lock_attempt",
            staticmethod(lambda attempt_id, student_id: stale),
        )

        with pytest.raises(AlreadySubmitted):
            AttemptSessionService.submit_attempt(attempt_id=attempt.id, answers=[])

        assert AttemptAnswer.objects.filter(attempt=attempt).count() == 1

    def test_integrity_error_without_a_winner_propagates(self, exam, questions, student):
        attempt = _start(exam, student)
        AttemptAnswer.objects.create(attempt=attempt, question=questions[0], choice=None, is_correct=False)

        with pytest.raises(IntegrityError):
            AttemptSessionService.submit_attempt(attempt_id=attempt.id, answers=[])

        attempt.refresh_from_db()
        assert attempt.submitted_at is None
        assert AttemptAnswer.objects.filter(attempt=attempt).count() == 1

    def test_question_outside_part_selection(self, exam, questions, student):
        attempt = _start(exam, student, mode="PRACTICE_BY_PART", part_selection=[5])

        with pytest.raises(QuestionNotInExam):
            AttemptSessionService.submit_attempt(
                attempt_id=attempt.id,
                answers=[correct_answer(questions[5]), correct_answer(questions[0])],
            )

        attempt.refresh_from_db()
        assert attempt.submitted_at is None
        assert not AttemptAnswer.objects.filter(attempt=attempt).exists()

    def test_question_of_another_exam(self, exam, student):
        other = build_exam(title="Other")
        attempt = _start(exam, student)

        with pytest.raises(QuestionNotInExam):
            AttemptSessionService.submit_attempt(
                attempt_id=attempt.id,
                answers=[correct_answer(other.questions.first())],
            )

    def test_duplicate_answer(self, exam, questions, student):
        attempt = _start(exam, student)

        with pytest.raises(DuplicateAnswer):
            AttemptSessionService.submit_attempt(
                attempt_id=attempt.id,
                answers=[correct_answer(questions[0]), wrong_answer(questions[0])],
            )

    def test_choice_of_another_question(self, exam, questions, student):
        attempt = _start(exam, student)

        with pytest.raises(ChoiceNotFound):
            AttemptSessionService.submit_attempt(
                attempt_id=attempt.id,
                answers=[SubmittedAnswer(question_id=questions[0].id, choice_id=choice_of(questions[1], "A").id)],
            )

        assert not AttemptAnswer.objects.filter(attempt=attempt).exists()

    def test_missing_attempt(self, db):
        with pytest.raises(AttemptNotFound):
            AttemptSessionService.submit_attempt(attempt_id=12345, answers=[])

    def test_attempt_of_another_student(self, exam, student, other_student):
        attempt = _start(exam, student)

        with pytest.raises(AttemptNotFound):
            AttemptSessionService.submit_attempt(attempt_id=attempt.id, answers=[], student_id=other_student.id)

    def test_retired_exam_can_still_be_submitted(self, exam, student):
        attempt = _start(exam, student)
        Exam.objects.filter(id=exam.id).update(is_active=False)

        AttemptSessionService.submit_attempt(attempt_id=attempt.id, answers=[])

        attempt.refresh_from_db()
        assert attempt.submitted_at is not None


class TestGetResults:
    def test_in_progress_attempt(self, exam, student):
        attempt = _start(exam, student)

        with pytest.raises(AttemptNotSubmitted):
            AttemptSessionService.get_results(attempt_id=attempt.id)

    def test_results_from_stored_rows(self, exam, questions, student):
        attempt = _start(exam, student)
        AttemptSessionService.submit_attempt(
            attempt_id=attempt.id,
            answers=[correct_answer(q) for q in questions[:5]],
        )

        result = AttemptSessionService.get_results(attempt_id=attempt.id, student_id=student.id)

        assert result.attempt.id == attempt.id
        assert [b.number for b in result.breakdown] == list(range(1, 11))
        assert all(b.is_correct for b in result.breakdown[:5])
        assert [w.key for w in result.weak_areas] == [5, 7]

    def test_results_by_skill(self, exam, questions, student):
        attempt = _start(exam, student)
        AttemptSessionService.submit_attempt(
            attempt_id=attempt.id,
            answers=[correct_answer(q) for q in questions[:5]],
        )

        result = AttemptSessionService.get_results(attempt_id=attempt.id, dimension="skill")

        assert [w.key for w in result.weak_areas] == ["READING"]

    def test_hidden_from_other_students(self, exam, student, other_student):
        attempt = _start(exam, student)
        AttemptSessionService.submit_attempt(attempt_id=attempt.id, answers=[])

        with pytest.raises(AttemptNotFound):
            AttemptSessionService.get_results(attempt_id=attempt.id, student_id=other_student.id)


@pytest.mark.django_db(transaction=True)
class TestConcurrentSubmit:
    def test_exactly_one_of_two_concurrent_submits_wins(self, exam, questions, student):
        attempt = _start(exam, student)
        answer_sets = {
            "all_correct": [correct_answer(q) for q in questions],
            "all_wrong": [wrong_answer(q) for q in questions],
        }
        barrier = threading.Barrier(len(answer_sets))
        outcomes = {}
        rejected = []
        unexpected = []

        def submit(label, answers):
            try:
                barrier.wait(timeout=10)
                outcomes[label] = AttemptSessionService.submit_attempt(
                    attempt_id=attempt.id,
                    answers=answers,
                )
            except AlreadySubmitted:
                rejected.append(label)
            except Exception as e:
                unexpected.append(e)
            finally:
                connection.close()

        threads = [threading.Thread(target=submit, args=item) for item in answer_sets.items()]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        assert unexpected == []
        assert len(outcomes) == 1
        assert len(rejected) == 1

        (winner, outcome), = outcomes.items()
        attempt.refresh_from_db()
        assert attempt.submitted_at is not None
        assert attempt.total_correct == outcome.grading.total_correct
        assert attempt.total_correct == (len(questions) if winner == "all_correct" else 0)
        assert AttemptAnswer.objects.filter(attempt=attempt).count() == len(questions)
