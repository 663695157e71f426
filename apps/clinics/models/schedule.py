# apps/clinics/models/schedule.py
from django.db import models
from django.core.exceptions import ValidationError

from core.constants import DayOfWeek
from core.mixins.audit_fields import AuditFieldsMixin
from core.mixins.soft_delete import SoftDeleteMixin


class ServiceSchedule(AuditFieldsMixin, SoftDeleteMixin, models.Model):
    """
    Weekly opening window of a service.
    Several windows may exist for the same day (morning / afternoon).
    """

    service = models.ForeignKey(
        "clinics.Service",
        on_delete=models.CASCADE,
        related_name="schedules",
    )

    day_of_week = models.PositiveSmallIntegerField(choices=DayOfWeek.choices)

    start_time = models.TimeField()
    end_time = models.TimeField()

    class Meta:
        db_table = "service_schedules"
        ordering = ["service", "day_of_week", "start_time"]
        indexes = [
            models.Index(fields=["service", "day_of_week", "is_active"], name="sched_service_day_active_idx"),
        ]

    def clean(self):
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError("End time must be after start time")

    def __str__(self):
        return (
            f"{self.service} {self.get_day_of_week_display()} "
            f"{self.start_time:%H:%M}-{self.end_time:%H:%M}"
        )
