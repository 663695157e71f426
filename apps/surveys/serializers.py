from rest_framework import serializers

from .models import Survey
from .services import SurveyQRService


class SurveySerializer(serializers.ModelSerializer):
    survey_url = serializers.SerializerMethodField()

    class Meta:
        model = Survey
        fields = [
            'id',
            'appointment',
            'queue_entry',
            'branch',
            'service',
            'token',
            'survey_url',
            'qr_code',
            'patient_name',
            'is_completed',
            'completed_at',
            'created_at',
        ]
        read_only_fields = fields

    def get_survey_url(self, obj):
        return SurveyQRService().survey_url(obj.token)
