# apps/domains/exams/urls.py
from django.urls import path

from .views.answer_key_view import QuestionCorrectChoiceView

urlpatterns = [
    path(
        "questions/<int:question_id>/correct-choice/",
        QuestionCorrectChoiceView.as_view(),
        name="exams-question-correct-choice",
    ),
]
