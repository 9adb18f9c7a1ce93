# PATH: apps/domains/results/serializers/attempt.py
from rest_framework import serializers

from apps.domains.results.models import Attempt


# ======================================================
# input
# ======================================================
class StartAttemptSerializer(serializers.Serializer):
    exam_id = serializers.IntegerField(min_value=1)
    mode = serializers.CharField()
    part_selection = serializers.ListField(
        child=serializers.IntegerField(),
        required=False,
        allow_empty=True,
    )


class SubmittedAnswerSerializer(serializers.Serializer):
    question_id = serializers.IntegerField(min_value=1)
    choice_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class SubmitAttemptSerializer(serializers.Serializer):
    answers = SubmittedAnswerSerializer(many=True, allow_empty=True)


# ======================================================
# output
# ======================================================
class AttemptSerializer(serializers.ModelSerializer):
    exam_title = serializers.CharField(source="exam.title", read_only=True)
    time_limit_minutes = serializers.IntegerField(source="exam.time_limit_minutes", read_only=True)
    total_score = serializers.IntegerField(read_only=True, allow_null=True)
    is_submitted = serializers.BooleanField(read_only=True)

    class Meta:
        model = Attempt
        fields = [
            "id",
            "student_id",
            "exam",
            "exam_title",
            "time_limit_minutes",
            "mode",
            "part_selection",
            "started_at",
            "submitted_at",
            "is_submitted",
            "score_percent",
            "score_listening",
            "score_reading",
            "total_score",
            "total_correct",
            "total_questions",
            "listening_correct",
            "listening_total",
            "reading_correct",
            "reading_total",
            "recalculated_at",
        ]
        read_only_fields = fields
