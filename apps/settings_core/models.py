# apps/settings_core/models.py
from django.db import models
from django.core.validators import MaxValueValidator

from core.mixins.audit_fields import AuditFieldsMixin


class BranchPolicy(AuditFieldsMixin, models.Model):
    """
    Appointment policy of a branch. One row per branch; a branch without a
    row uses the defaults below.
    """

    DEFAULT_RESCHEDULE_TIME_LIMIT_HOURS = 24
    DEFAULT_CANCELLATION_HOURS = 24
    DEFAULT_MAX_ADVANCE_BOOKING_DAYS = 30
    DEFAULT_MAX_RESCHEDULES = 3
    DEFAULT_REMINDER_HOURS = 24

    branch = models.OneToOneField(
        'clinics.Branch',
        on_delete=models.CASCADE,
        related_name='policy',
    )

    # Minimum notice, in hours, between now and a rescheduled appointment
    reschedule_time_limit_hours = models.PositiveIntegerField(
        null=True,
        blank=True,
        default=DEFAULT_RESCHEDULE_TIME_LIMIT_HOURS,
        validators=[MaxValueValidator(24 * 30)],
    )
    cancellation_hours = models.PositiveIntegerField(default=DEFAULT_CANCELLATION_HOURS)
    max_advance_booking_days = models.PositiveIntegerField(default=DEFAULT_MAX_ADVANCE_BOOKING_DAYS)
    max_reschedules = models.PositiveIntegerField(default=DEFAULT_MAX_RESCHEDULES)

    reminders_enabled = models.BooleanField(default=True)
    reminder_hours = models.PositiveIntegerField(default=DEFAULT_REMINDER_HOURS)

    version = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = 'branch_policies'
        verbose_name = 'Branch Policy'
        verbose_name_plural = 'Branch Policies'

    def __str__(self):
        return f"Policy for {self.branch}"
