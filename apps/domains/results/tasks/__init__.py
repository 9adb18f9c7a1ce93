from .recalculation_tasks import recalculate_question_scores_task

__all__ = ["recalculate_question_scores_task"]
