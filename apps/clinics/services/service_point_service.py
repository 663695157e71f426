import logging

from django.db import DatabaseError

from apps.clinics.models import ServicePoint
from core.exceptions import (
    InfrastructureError,
    ServicePointInactive,
    ServicePointIneligible,
    ServicePointNotFound,
)

logger = logging.getLogger(__name__)


def get_service_points(branch_id):
    """Service points of a branch with their active service links prefetched."""
    try:
        return list(
            ServicePoint.objects.filter(branch_id=branch_id, deleted_at__isnull=True)
            .prefetch_related("service_links")
            .order_by("name")
        )
    except DatabaseError as exc:
        logger.exception(f"Could not load service points for branch {branch_id}")
        raise InfrastructureError() from exc


def get_service_point(service_point_id):
    try:
        return ServicePoint.objects.get(pk=service_point_id, deleted_at__isnull=True)
    except ServicePoint.DoesNotExist:
        raise ServicePointNotFound()


def ensure_can_serve(service_point, appointment):
    """
    A point may take an appointment when it is active, belongs to the
    appointment's branch and has an active link to the appointment's service.
    """
    if not service_point.is_active:
        raise ServicePointInactive()

    if service_point.branch_id != appointment.branch_id:
        raise ServicePointIneligible()

    if not service_point.supports_service(appointment.service_id):
        raise ServicePointIneligible()
