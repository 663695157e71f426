# apps/visits/services/appointment_service.py

import logging
from datetime import datetime, timedelta

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied

from apps.clinics.services.availability_service import get_service_schedules
from apps.settings_core.services import SettingsService
from apps.visits.models import Appointment, AppointmentReschedule
from core.constants import AppointmentStatus, NON_RESCHEDULABLE_STATUSES, UserRoles
from core.exceptions import (
    AppointmentNotFound,
    AppointmentNotReschedulable,
    ExceedsMaxAdvance,
    InfrastructureError,
    InvalidAppointmentStatus,
    MaxReschedulesExceeded,
    SlotTaken,
)
from core.permissions import can_manage_appointment
from .reschedule_validation import (
    parse_slot,
    validate_cancellation,
    validate_current_appointment,
    validate_reschedule,
)

logger = logging.getLogger(__name__)


class AppointmentService:
    """Reschedule, cancel and check in appointments"""

    @staticmethod
    def _lock(appointment_id):
        try:
            return Appointment.objects.select_for_update().get(pk=appointment_id)
        except Appointment.DoesNotExist:
            raise AppointmentNotFound()
        except DatabaseError as exc:
            logger.exception(f"Could not load appointment {appointment_id}")
            raise InfrastructureError() from exc

    @staticmethod
    def _ensure_can_manage(user, appointment):
        if not can_manage_appointment(user, appointment):
            raise PermissionDenied("You cannot manage this appointment")

    # =========================
    # Reschedule
    # =========================

    @classmethod
    def reschedule(cls, appointment_id, user, date, time, reason="", now=None):
        now = timezone.localtime(now or timezone.now())

        with transaction.atomic():
            appointment = cls._lock(appointment_id)
            cls._ensure_can_manage(user, appointment)

            if appointment.status in NON_RESCHEDULABLE_STATUSES:
                raise AppointmentNotReschedulable(status=appointment.status)

            policy = SettingsService.get_branch_policy(appointment.branch_id)
            validate_current_appointment(appointment.scheduled_at, user.role, policy, now)

            if user.role != UserRoles.ADMIN:
                done = appointment.reschedules.count()
                if done >= policy.max_reschedules:
                    raise MaxReschedulesExceeded(max_reschedules=policy.max_reschedules)

            result = validate_reschedule(
                date,
                time,
                user.role,
                policy,
                get_service_schedules(appointment.service_id),
                now,
            )
            if not result.ok:
                logger.info(
                    f"Reschedule of appointment {appointment.id} rejected: {result.error.code}"
                )
            result.raise_for_error()

            new_scheduled_at = datetime.combine(date, parse_slot(time), tzinfo=now.tzinfo)

            if new_scheduled_at > now + timedelta(days=policy.max_advance_booking_days):
                raise ExceedsMaxAdvance(days=policy.max_advance_booking_days)

            taken = (
                Appointment.objects.filter(
                    service_id=appointment.service_id,
                    branch_id=appointment.branch_id,
                    scheduled_at=new_scheduled_at,
                )
                .exclude(pk=appointment.pk)
                .exclude(status=AppointmentStatus.CANCELLED)
                .exists()
            )
            if taken:
                raise SlotTaken()

            previous = appointment.scheduled_at
            if appointment.original_scheduled_at is None:
                appointment.original_scheduled_at = previous

            appointment.scheduled_at = new_scheduled_at
            appointment.rescheduled_at = now
            appointment.rescheduled_by = user
            appointment.rescheduled_reason = reason or ""
            appointment.save(update_fields=[
                "scheduled_at",
                "original_scheduled_at",
                "rescheduled_at",
                "rescheduled_by",
                "rescheduled_reason",
                "updated_at",
            ])

            AppointmentReschedule.objects.create(
                appointment=appointment,
                original_scheduled_at=previous,
                new_scheduled_at=new_scheduled_at,
                rescheduled_by=user,
                reason=reason or "",
            )

        logger.info(
            f"Appointment {appointment.id} rescheduled from {previous:%Y-%m-%d %H:%M} "
            f"to {new_scheduled_at:%Y-%m-%d %H:%M} by {user}"
        )
        return appointment

    @staticmethod
    def history(appointment_id, user):
        appointment = Appointment.objects.filter(pk=appointment_id).first()
        if appointment is None:
            raise AppointmentNotFound()
        AppointmentService._ensure_can_manage(user, appointment)

        return list(
            appointment.reschedules.select_related("rescheduled_by").order_by("-created_at", "-id")
        )

    # =========================
    # Cancel / check-in
    # =========================

    @classmethod
    def cancel(cls, appointment_id, user, reason="", now=None):
        now = timezone.localtime(now or timezone.now())

        with transaction.atomic():
            appointment = cls._lock(appointment_id)
            cls._ensure_can_manage(user, appointment)

            if appointment.status not in (AppointmentStatus.SCHEDULED, AppointmentStatus.CHECKED_IN):
                raise InvalidAppointmentStatus(status=appointment.status)

            policy = SettingsService.get_branch_policy(appointment.branch_id)
            validate_cancellation(appointment.scheduled_at, user.role, policy, now)

            appointment.status = AppointmentStatus.CANCELLED
            appointment.cancelled_at = now
            appointment.cancellation_reason = reason or ""
            appointment.save(update_fields=[
                "status", "cancelled_at", "cancellation_reason", "updated_at",
            ])

        logger.info(f"Appointment {appointment.id} cancelled by {user}")
        return appointment

    @classmethod
    def check_in(cls, appointment_id, user, now=None):
        with transaction.atomic():
            appointment = cls._lock(appointment_id)
            cls._ensure_can_manage(user, appointment)

            if appointment.status != AppointmentStatus.SCHEDULED:
                raise InvalidAppointmentStatus(status=appointment.status)

            appointment.status = AppointmentStatus.CHECKED_IN
            appointment.attended_at = now or timezone.now()
            appointment.save(update_fields=["status", "attended_at", "updated_at"])

        logger.info(f"Appointment {appointment.id} checked in")
        return appointment

    # =========================
    # No-show marking
    # =========================

    @staticmethod
    def mark_no_shows(now=None, grace_minutes=None):
        """
        Mark scheduled appointments whose start is more than ``grace_minutes``
        in the past as no-shows. Returns how many were marked.
        """
        now = now or timezone.now()
        if grace_minutes is None:
            grace_minutes = settings.SCHEDULING.get("NO_SHOW_GRACE_MINUTES", 60)
        cutoff = now - timedelta(minutes=grace_minutes)

        try:
            marked = Appointment.objects.filter(
                status=AppointmentStatus.SCHEDULED,
                scheduled_at__lt=cutoff,
            ).update(status=AppointmentStatus.NO_SHOW, updated_at=now)
        except DatabaseError as exc:
            logger.exception("Could not mark no-show appointments")
            raise InfrastructureError() from exc

        logger.info(f"Marked {marked} appointment(s) scheduled before {cutoff:%Y-%m-%d %H:%M} as no-show")
        return marked
