from rest_framework import serializers

from .models import BranchPolicy


class BranchPolicySerializer(serializers.ModelSerializer):
    class Meta:
        model = BranchPolicy
        fields = [
            'branch',
            'reschedule_time_limit_hours',
            'cancellation_hours',
            'max_advance_booking_days',
            'max_reschedules',
            'reminders_enabled',
            'reminder_hours',
            'version',
            'updated_at',
        ]
        read_only_fields = ['branch', 'version', 'updated_at']
