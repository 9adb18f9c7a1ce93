import django_filters
from .models import Attempt


class AttemptFilter(django_filters.FilterSet):
    """
    Staff attempt list filters
    - student / mode
    - submitted=true|false (in progress vs graded)
    """

    student = django_filters.NumberFilter(field_name="student_id")
    mode = django_filters.ChoiceFilter(choices=Attempt.Mode.choices)
    submitted = django_filters.BooleanFilter(field_name="submitted_at", lookup_expr="isnull", exclude=True)

    class Meta:
        model = Attempt
        fields = [
            "student",
            "mode",
            "submitted",
        ]
