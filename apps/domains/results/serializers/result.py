# PATH: apps/domains/results/serializers/result.py
from rest_framework import serializers


class AnswerBreakdownSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    number = serializers.IntegerField()
    skill = serializers.CharField()
    section = serializers.IntegerField()
    question_type = serializers.CharField(allow_blank=True)
    chosen_choice_id = serializers.IntegerField(allow_null=True)
    correct_choice_id = serializers.IntegerField(allow_null=True)
    is_correct = serializers.BooleanField()


class WeakAreaSerializer(serializers.Serializer):
    dimension = serializers.CharField()
    key = serializers.JSONField()  # section number, question type or skill
    correct = serializers.IntegerField()
    total = serializers.IntegerField()
    accuracy = serializers.FloatField()
