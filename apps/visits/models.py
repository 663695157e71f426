# apps/visits/models.py

from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.constants import AppointmentStatus, QueueStatus


class Appointment(models.Model):
    """Booked visit of a patient to a branch for one service"""

    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='appointments'
    )
    service = models.ForeignKey(
        'clinics.Service',
        on_delete=models.PROTECT,
        related_name='appointments'
    )
    branch = models.ForeignKey(
        'clinics.Branch',
        on_delete=models.PROTECT,
        related_name='appointments'
    )
    # Current service point; set when queued, moved on transfer
    service_point = models.ForeignKey(
        'clinics.ServicePoint',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='appointments'
    )

    confirmation_code = models.CharField(max_length=50, unique=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=AppointmentStatus.choices,
        default=AppointmentStatus.SCHEDULED
    )

    patient_name = models.CharField(max_length=200, blank=True)
    patient_email = models.EmailField(blank=True)
    patient_phone = models.CharField(max_length=20, blank=True)
    notes = models.TextField(blank=True)

    # Timing
    scheduled_at = models.DateTimeField()
    attended_at = models.DateTimeField(null=True, blank=True)

    # Rescheduling
    original_scheduled_at = models.DateTimeField(null=True, blank=True)
    rescheduled_at = models.DateTimeField(null=True, blank=True)
    rescheduled_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='rescheduled_appointments'
    )
    rescheduled_reason = models.TextField(blank=True)

    # Cancellation
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'appointments'
        ordering = ['scheduled_at']
        indexes = [
            models.Index(fields=['confirmation_code'], name='appt_code_idx'),
            models.Index(fields=['branch', 'status', 'scheduled_at'], name='appt_branch_status_at_idx'),
            models.Index(fields=['service', 'branch', 'scheduled_at'], name='appt_service_branch_at_idx'),
            models.Index(fields=['user', 'scheduled_at'], name='appt_user_at_idx'),
        ]

    def __str__(self):
        return f"Appt {self.confirmation_code} ({self.get_status_display()})"

    def save(self, *args, **kwargs):
        if not self.confirmation_code:
            self.confirmation_code = self._generate_confirmation_code()
        super().save(*args, **kwargs)

    def _generate_confirmation_code(self):
        """Generate APPT-YYYYMMDD-XXXX format code"""
        date_str = timezone.localdate().strftime('%Y%m%d')

        last_appt = Appointment.objects.filter(
            confirmation_code__startswith=f'APPT-{date_str}-'
        ).order_by('confirmation_code').last()

        if last_appt:
            new_num = int(last_appt.confirmation_code.split('-')[-1]) + 1
        else:
            new_num = 1

        return f'APPT-{date_str}-{new_num:04d}'

    @property
    def reschedule_count(self):
        return self.reschedules.count()


class AppointmentReschedule(models.Model):
    """History row written on every successful reschedule"""

    appointment = models.ForeignKey(
        Appointment,
        on_delete=models.CASCADE,
        related_name='reschedules'
    )
    original_scheduled_at = models.DateTimeField()
    new_scheduled_at = models.DateTimeField()
    rescheduled_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='appointment_reschedules'
    )
    reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'appointment_reschedules'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.appointment_id}: {self.original_scheduled_at} -> {self.new_scheduled_at}"


class QueueEntry(models.Model):
    """
    Place of a checked-in appointment at a service point.

    Only one entry per appointment is active. A transfer closes the active
    entry and opens a new one at the destination, keeping ``joined_at`` and
    ``counter`` so the patient does not lose their place in line.
    """

    appointment = models.ForeignKey(
        Appointment,
        on_delete=models.CASCADE,
        related_name='queue_entries'
    )
    service_point = models.ForeignKey(
        'clinics.ServicePoint',
        on_delete=models.PROTECT,
        related_name='queue_entries'
    )
    branch = models.ForeignKey(
        'clinics.Branch',
        on_delete=models.PROTECT,
        related_name='queue_entries'
    )

    status = models.CharField(
        max_length=20,
        choices=QueueStatus.choices,
        default=QueueStatus.WAITING
    )
    # Ticket number, restarts at 1 every day per branch
    counter = models.PositiveIntegerField()
    is_active = models.BooleanField(default=True)

    transferred_from = models.OneToOneField(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transferred_to'
    )

    joined_at = models.DateTimeField(default=timezone.now)
    called_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    closed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'queue_entries'
        ordering = ['joined_at', 'id']
        verbose_name_plural = 'Queue entries'
        constraints = [
            models.UniqueConstraint(
                fields=['appointment'],
                condition=Q(is_active=True),
                name='one_active_queue_entry_per_appointment',
            )
        ]
        indexes = [
            models.Index(fields=['branch', 'is_active', 'status'], name='queue_branch_active_status_idx'),
            models.Index(fields=['service_point', 'is_active', 'status'], name='queue_sp_active_status_idx'),
        ]

    def __str__(self):
        return f"#{self.counter} {self.appointment} @ {self.service_point} ({self.status})"

    @property
    def wait_time(self):
        if self.called_at:
            return self.called_at - self.joined_at
        return None
