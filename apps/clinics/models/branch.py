# apps/clinics/models/branch.py
from django.db import models

from core.mixins.audit_fields import AuditFieldsMixin
from core.mixins.soft_delete import SoftDeleteMixin


class Branch(AuditFieldsMixin, SoftDeleteMixin, models.Model):
    """
    Physical clinic branch/location
    """

    name = models.CharField(max_length=200)
    code = models.CharField(max_length=20, unique=True)

    address = models.TextField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)

    class Meta:
        db_table = "branches"
        verbose_name_plural = "Branches"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["code"], name="branches_code_idx"),
            models.Index(fields=["is_active"], name="branches_is_active_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"
