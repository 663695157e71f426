# apps/surveys/views.py
from django.shortcuts import get_object_or_404
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsStaff
from .models import Survey
from .serializers import SurveySerializer


class QueueEntrySurveyView(APIView):
    """Survey of a queue entry, shown to the patient by front desk staff"""
    permission_classes = [IsAuthenticated, IsStaff]

    def get(self, request, queue_entry_id):
        survey = get_object_or_404(Survey, queue_entry_id=queue_entry_id)
        return Response(SurveySerializer(survey).data)


class SurveyByTokenView(APIView):
    """Public lookup used by the page the QR code points at"""
    permission_classes = [AllowAny]

    def get(self, request, token):
        survey = get_object_or_404(Survey, token=token)
        return Response({
            'id': survey.id,
            'branch': survey.branch_id,
            'service': survey.service_id,
            'patient_name': survey.patient_name,
            'is_completed': survey.is_completed,
        })
