# apps/clinics/models/service.py
from django.db import models

from core.mixins.audit_fields import AuditFieldsMixin
from core.mixins.soft_delete import SoftDeleteMixin


class Service(AuditFieldsMixin, SoftDeleteMixin, models.Model):
    """
    Bookable service type (consultation, lab test, ...)
    """

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    duration_minutes = models.PositiveIntegerField(default=30)

    class Meta:
        db_table = "services"
        ordering = ["name"]

    def __str__(self):
        return self.name
