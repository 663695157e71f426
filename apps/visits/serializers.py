# apps/visits/serializers.py
from rest_framework import serializers

from core.constants import QueueStatus
from .models import Appointment, AppointmentReschedule, QueueEntry


class AppointmentSerializer(serializers.ModelSerializer):
    """Serializer for Appointment model"""

    service_name = serializers.CharField(source='service.name', read_only=True)
    branch_name = serializers.CharField(source='branch.name', read_only=True)
    reschedule_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Appointment
        fields = [
            'id', 'confirmation_code', 'user', 'service', 'service_name',
            'branch', 'branch_name', 'service_point', 'status',
            'patient_name', 'patient_email', 'patient_phone', 'notes',
            'scheduled_at', 'attended_at', 'original_scheduled_at',
            'rescheduled_at', 'rescheduled_by', 'rescheduled_reason',
            'reschedule_count', 'cancelled_at', 'cancellation_reason',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class AppointmentRescheduleSerializer(serializers.ModelSerializer):
    rescheduled_by_name = serializers.SerializerMethodField()

    class Meta:
        model = AppointmentReschedule
        fields = [
            'id', 'appointment', 'original_scheduled_at', 'new_scheduled_at',
            'rescheduled_by', 'rescheduled_by_name', 'reason', 'created_at',
        ]
        read_only_fields = fields

    def get_rescheduled_by_name(self, obj):
        if obj.rescheduled_by:
            return obj.rescheduled_by.full_name or obj.rescheduled_by.email
        return None


class RescheduleSerializer(serializers.Serializer):
    """
    Date and time are optional here so that missing values are reported
    with the same error codes as the other reschedule rejections.
    """

    date = serializers.DateField(required=False, allow_null=True, input_formats=['%Y-%m-%d'])
    time = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=5)
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class CancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class QueueEntrySerializer(serializers.ModelSerializer):
    """Serializer for QueueEntry model"""

    confirmation_code = serializers.CharField(source='appointment.confirmation_code', read_only=True)
    patient_name = serializers.CharField(source='appointment.patient_name', read_only=True)
    service = serializers.IntegerField(source='appointment.service_id', read_only=True)
    service_point_name = serializers.CharField(source='service_point.name', read_only=True)
    wait_time = serializers.DurationField(read_only=True)

    class Meta:
        model = QueueEntry
        fields = [
            'id', 'appointment', 'confirmation_code', 'patient_name', 'service',
            'branch', 'service_point', 'service_point_name', 'status', 'counter',
            'is_active', 'transferred_from', 'joined_at', 'called_at',
            'completed_at', 'closed_at', 'wait_time',
        ]
        read_only_fields = fields


class QueueAddSerializer(serializers.Serializer):
    appointment = serializers.IntegerField()
    service_point = serializers.IntegerField()


class QueueTransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=QueueStatus.choices)


class QueueTransferSerializer(serializers.Serializer):
    service_point = serializers.IntegerField()
