from rest_framework import serializers

from apps.clinics.models import ServiceSchedule


class ServiceScheduleSerializer(serializers.ModelSerializer):
    service_name = serializers.CharField(source="service.name", read_only=True)
    day_name = serializers.CharField(source="get_day_of_week_display", read_only=True)
    start_time = serializers.TimeField(format="%H:%M")
    end_time = serializers.TimeField(format="%H:%M")

    class Meta:
        model = ServiceSchedule
        fields = [
            "id",
            "service",
            "service_name",
            "day_of_week",
            "day_name",
            "start_time",
            "end_time",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate(self, data):
        start = data.get("start_time", getattr(self.instance, "start_time", None))
        end = data.get("end_time", getattr(self.instance, "end_time", None))

        if start and end and end <= start:
            raise serializers.ValidationError(
                {"end_time": "End time must be after start time"}
            )
        return data


class AvailableSlotsQuerySerializer(serializers.Serializer):
    service = serializers.IntegerField()
    date = serializers.DateField(input_formats=["%Y-%m-%d"])
