# apps/domains/exams/signals.py
"""
Question-bank events consumed by other domains.

question_correct_answer_changed(sender, question_id, triggered_by)
  - sent after commit, once the marked-correct choice of a question changed
  - results domain repairs every graded attempt that referenced the question
"""
from django.dispatch import Signal

question_correct_answer_changed = Signal()
