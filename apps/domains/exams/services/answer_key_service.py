# apps/domains/exams/services/answer_key_service.py
from __future__ import annotations

import logging
from typing import Any, Optional

from django.db import transaction

from apps.domains.exams.models import Choice, ExamQuestion
from apps.domains.exams.signals import question_correct_answer_changed
from apps.domains.results.exceptions import ChoiceNotFound, QuestionNotFound

logger = logging.getLogger(__name__)


class AnswerKeyService:
    """
    Changing which choice of a question is correct.

    The only question-bank write this project owns: every graded attempt keeps
    a copy of the correctness flag, so the change is announced with
    question_correct_answer_changed once the edit is committed.
    """

    @staticmethod
    @transaction.atomic
    def change_correct_choice(
        *,
        question_id: int,
        choice_id: int,
        triggered_by: Optional[Any] = None,
    ) -> bool:
        """
        Mark choice_id correct and every sibling incorrect.
        returns True when the correct choice actually changed.
        """
        question = (
            ExamQuestion.objects
            .select_for_update()
            .filter(id=int(question_id))
            .first()
        )
        if question is None:
            raise QuestionNotFound(f"question {question_id} not found", question_id=int(question_id))

        choices = list(Choice.objects.select_for_update().filter(question=question))
        target = next((c for c in choices if c.id == int(choice_id)), None)
        if target is None:
            raise ChoiceNotFound(
                f"choice {choice_id} does not belong to question {question_id}",
                question_id=int(question_id),
                choice_id=int(choice_id),
            )

        before = {c.id for c in choices if c.is_correct}
        if before == {target.id}:
            return False

        Choice.objects.filter(question=question).exclude(id=target.id).update(is_correct=False)
        Choice.objects.filter(id=target.id).update(is_correct=True)

        logger.info(
            "correct choice changed: question=%s %s -> %s",
            question.id,
            sorted(before),
            target.id,
        )

        qid = int(question.id)
        transaction.on_commit(
            lambda: question_correct_answer_changed.send(
                sender=AnswerKeyService,
                question_id=qid,
                triggered_by=triggered_by,
            )
        )
        return True
