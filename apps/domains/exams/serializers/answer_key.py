# PATH: apps/domains/exams/serializers/answer_key.py
from rest_framework import serializers

from apps.domains.exams.models import Choice


class CorrectChoiceUpdateSerializer(serializers.Serializer):
    choice_id = serializers.IntegerField(min_value=1)


class ChoiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Choice
        fields = ["id", "label", "content", "is_correct"]
        read_only_fields = fields
