from rest_framework import serializers
from accounts.serializers import UserSerializer
from .hours import DayEntry, LEAVE_TYPES
from .models import Timesheet, TimesheetDay, TimesheetExpense
from .rules import DAY_NAMES


class TimesheetDaySerializer(serializers.ModelSerializer):
    class Meta:
        model = TimesheetDay
        exclude = ['timesheet']


class TimesheetExpenseSerializer(serializers.ModelSerializer):
    class Meta:
        model = TimesheetExpense
        fields = ['id', 'description', 'amount']


class TimesheetSerializer(serializers.ModelSerializer):
    employee_detail = UserSerializer(source='employee', read_only=True)
    approved_by_detail = UserSerializer(source='approved_by', read_only=True)
    days = TimesheetDaySerializer(many=True, read_only=True)
    expenses = TimesheetExpenseSerializer(many=True, read_only=True)
    total_hours = serializers.DecimalField(max_digits=7, decimal_places=2, read_only=True)
    allowed_actions = serializers.SerializerMethodField()

    class Meta:
        model = Timesheet
        fields = '__all__'

    def get_allowed_actions(self, obj):
        lifecycle = self.context.get('lifecycle')
        actor = self.context.get('actor')
        if lifecycle is None or actor is None:
            return []
        return lifecycle.allowed_actions(obj, actor)


class DayEntrySerializer(serializers.Serializer):
    """One day as entered by the employee."""
    day = serializers.ChoiceField(choices=DAY_NAMES)
    worked = serializers.BooleanField(default=False)
    time_in = serializers.TimeField(required=False, allow_null=True)
    time_out = serializers.TimeField(required=False, allow_null=True)
    meal_start = serializers.TimeField(required=False, allow_null=True)
    meal_end = serializers.TimeField(required=False, allow_null=True)
    am_break_start = serializers.TimeField(required=False, allow_null=True)
    am_break_end = serializers.TimeField(required=False, allow_null=True)
    pm_break_start = serializers.TimeField(required=False, allow_null=True)
    pm_break_end = serializers.TimeField(required=False, allow_null=True)
    out_of_town_minutes = serializers.IntegerField(min_value=0, default=0)
    leave_type = serializers.ChoiceField(choices=LEAVE_TYPES, default='none')
    leave_hours = serializers.DecimalField(
        max_digits=4, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    reason = serializers.CharField(allow_blank=True, default='')


def day_entries(validated_days):
    """``DayEntry`` values from validated ``DayEntrySerializer`` data."""
    if validated_days is None:
        return None
    return [DayEntry(**day) for day in validated_days]


class ExpenseInputSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)


class TimesheetContentSerializer(serializers.Serializer):
    days = DayEntrySerializer(many=True, required=False)
    expenses = ExpenseInputSerializer(many=True, required=False)

    def validate_days(self, value):
        names = [day['day'] for day in value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise serializers.ValidationError(f"Duplicate days: {', '.join(duplicates)}")
        return value


class TimesheetCreateSerializer(TimesheetContentSerializer):
    employee = serializers.IntegerField(required=False)
    week_start = serializers.DateField()


class TimesheetUpdateSerializer(TimesheetContentSerializer):
    certified = serializers.BooleanField(required=False)


class TimesheetCorrectionSerializer(TimesheetContentSerializer):
    admin_notes = serializers.CharField(required=False, allow_blank=True)


class WeekPreviewSerializer(serializers.Serializer):
    days = DayEntrySerializer(many=True)
    week_start = serializers.DateField(required=False)
    employee = serializers.IntegerField(required=False)
