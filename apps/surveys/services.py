# apps/surveys/services.py
import base64
import logging
import secrets
from io import BytesIO

import qrcode
from django.conf import settings
from django.db import transaction

from apps.visits.models import QueueEntry
from core.exceptions import EntryNotFound
from .models import Survey

logger = logging.getLogger(__name__)


class SurveyQRService:
    """Renders survey links as PNG QR codes"""

    def __init__(self):
        self.qr_version = 1
        self.box_size = 10
        self.border = 4

    def survey_url(self, token):
        base_url = settings.SURVEYS.get('BASE_URL', '').rstrip('/')
        return f"{base_url}/survey/{token}"

    def generate(self, token):
        qr = qrcode.QRCode(
            version=self.qr_version,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=self.box_size,
            border=self.border,
        )

        qr.add_data(self.survey_url(token))
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = BytesIO()
        img.save(buffer, format="PNG")

        img_base64 = base64.b64encode(buffer.getvalue()).decode()
        return f"data:image/png;base64,{img_base64}"


class SurveyService:

    @staticmethod
    def create_for_queue_entry(queue_entry_id, appointment_id=None, qr_service=None):
        """
        Survey of a completed queue entry. Creating it twice returns the
        existing survey.
        """
        entry = (
            QueueEntry.objects.select_related('appointment')
            .filter(pk=queue_entry_id)
            .first()
        )
        if entry is None:
            raise EntryNotFound()

        appointment = entry.appointment
        if appointment_id is not None and appointment.id != appointment_id:
            raise EntryNotFound()

        existing = Survey.objects.filter(queue_entry=entry).first()
        if existing:
            return existing

        qr_service = qr_service or SurveyQRService()
        token = secrets.token_hex(32)

        with transaction.atomic():
            survey = Survey.objects.create(
                appointment=appointment,
                queue_entry=entry,
                branch_id=appointment.branch_id,
                service_id=appointment.service_id,
                token=token,
                qr_code=qr_service.generate(token),
                patient_name=appointment.patient_name,
            )

        logger.info(f"Survey {survey.id} created for queue entry {entry.id}")
        return survey


def trigger_survey_generation(queue_entry_id, appointment_id):
    """
    Fire-and-forget hook run after a queue entry completes.
    Failures are logged and never reach the caller.
    """
    try:
        SurveyService.create_for_queue_entry(queue_entry_id, appointment_id)
    except Exception:
        logger.exception(
            f"Survey generation failed for queue entry {queue_entry_id} "
            f"(appointment {appointment_id})"
        )
