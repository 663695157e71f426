# apps/surveys/models.py
from django.db import models


class Survey(models.Model):
    """Satisfaction survey handed to a patient once their visit is complete"""

    appointment = models.ForeignKey(
        'visits.Appointment',
        on_delete=models.CASCADE,
        related_name='surveys'
    )
    queue_entry = models.OneToOneField(
        'visits.QueueEntry',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='survey'
    )
    branch = models.ForeignKey(
        'clinics.Branch',
        on_delete=models.CASCADE,
        related_name='surveys'
    )
    service = models.ForeignKey(
        'clinics.Service',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='surveys'
    )

    token = models.CharField(max_length=64, unique=True)
    # data:image/png;base64 URI pointing at the survey URL
    qr_code = models.TextField(blank=True)
    patient_name = models.CharField(max_length=200, blank=True)

    is_completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'surveys'
        ordering = ['-created_at']

    def __str__(self):
        return f"Survey {self.token[:8]} for appointment {self.appointment_id}"
