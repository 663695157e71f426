# apps/clinics/models/service_point.py
from django.db import models

from core.mixins.audit_fields import AuditFieldsMixin
from core.mixins.soft_delete import SoftDeleteMixin


class ServicePoint(AuditFieldsMixin, SoftDeleteMixin, models.Model):
    """
    Attending station (desk, room, window) of a branch
    """

    branch = models.ForeignKey(
        "clinics.Branch",
        on_delete=models.CASCADE,
        related_name="service_points",
    )

    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)

    services = models.ManyToManyField(
        "clinics.Service",
        through="clinics.ServicePointService",
        related_name="service_points",
        blank=True,
    )

    class Meta:
        db_table = "service_points"
        ordering = ["branch", "name"]
        indexes = [
            models.Index(fields=["branch", "is_active"], name="sp_branch_active_idx"),
        ]

    def __str__(self):
        return f"{self.branch.code}-{self.name}"

    # Served from the prefetch cache when service_links was prefetched
    def supports_service(self, service_id):
        return service_id in self.supported_service_ids()

    def supported_service_ids(self):
        return {link.service_id for link in self.service_links.all() if link.is_active}


class ServicePointService(models.Model):
    """Eligibility link: a service point can attend a service while the link is active."""

    service_point = models.ForeignKey(
        ServicePoint,
        on_delete=models.CASCADE,
        related_name="service_links",
    )
    service = models.ForeignKey(
        "clinics.Service",
        on_delete=models.CASCADE,
        related_name="service_point_links",
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "service_point_services"
        constraints = [
            models.UniqueConstraint(
                fields=["service_point", "service"],
                name="unique_service_per_service_point",
            )
        ]

    def __str__(self):
        return f"{self.service_point} -> {self.service}"
