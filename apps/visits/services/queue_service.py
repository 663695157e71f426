# apps/visits/services/queue_service.py

import logging
from functools import partial

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Max
from django.utils import timezone

from apps.clinics.models import Branch
from apps.clinics.services.service_point_service import ensure_can_serve, get_service_point
from apps.surveys.services import trigger_survey_generation
from apps.visits.models import Appointment, QueueEntry
from core.constants import (
    AppointmentStatus,
    QueueStatus,
    QUEUE_TRANSITIONS,
    TRANSFERABLE_QUEUE_STATUSES,
)
from core.exceptions import (
    AlreadyQueued,
    AppointmentNotCheckedIn,
    AppointmentNotFound,
    EntryNotFound,
    InfrastructureError,
    InvalidStateTransition,
    NoopTransfer,
)
from core.utils.announcer import default_announcer

logger = logging.getLogger(__name__)


class QueueService:
    """
    Queue state machine: waiting -> serving -> complete, plus transfer
    between service points.

    Every operation locks the appointment row for the length of its
    transaction, so operations on one appointment run one at a time. Status
    writes are additionally conditioned on the status that was read.
    Survey generation and call-out announcements run after commit and
    cannot fail a transition.
    """

    def __init__(self, announcer=None, survey_trigger=None):
        self.announcer = announcer or default_announcer()
        self.survey_trigger = survey_trigger or trigger_survey_generation

    # =========================
    # Locking helpers
    # =========================

    def _lock_appointment(self, appointment_id):
        try:
            return Appointment.objects.select_for_update().get(pk=appointment_id)
        except Appointment.DoesNotExist:
            raise AppointmentNotFound()
        except DatabaseError as exc:
            logger.exception(f"Could not lock appointment {appointment_id}")
            raise InfrastructureError() from exc

    def _lock_entry(self, entry_id):
        """Lock the owning appointment, then read the entry under that lock."""
        appointment_id = (
            QueueEntry.objects.filter(pk=entry_id, is_active=True)
            .values_list("appointment_id", flat=True)
            .first()
        )
        if appointment_id is None:
            raise EntryNotFound()

        appointment = self._lock_appointment(appointment_id)

        entry = (
            QueueEntry.objects.select_for_update()
            .filter(pk=entry_id, is_active=True)
            .first()
        )
        if entry is None:
            raise EntryNotFound()
        return appointment, entry

    def _next_counter(self, branch_id):
        # Serializes ticket numbering within the branch
        Branch.objects.select_for_update().filter(pk=branch_id).first()

        last = QueueEntry.objects.filter(
            branch_id=branch_id,
            joined_at__date=timezone.localdate(),
        ).aggregate(last=Max("counter"))["last"]
        return (last or 0) + 1

    @staticmethod
    def _compare_and_set(entry_id, expected_status, **changes):
        """
        Apply ``changes`` only if the entry is still active and in
        ``expected_status``. Returns whether a row was updated.
        """
        updated = QueueEntry.objects.filter(
            pk=entry_id,
            status=expected_status,
            is_active=True,
        ).update(**changes)
        return updated == 1

    # =========================
    # Transitions
    # =========================

    def add_to_queue(self, appointment_id, service_point_id, user=None):
        with transaction.atomic():
            appointment = self._lock_appointment(appointment_id)

            if appointment.status != AppointmentStatus.CHECKED_IN:
                raise AppointmentNotCheckedIn()

            if appointment.queue_entries.filter(is_active=True).exists():
                raise AlreadyQueued()

            service_point = get_service_point(service_point_id)
            ensure_can_serve(service_point, appointment)

            entry = QueueEntry(
                appointment=appointment,
                service_point=service_point,
                branch_id=appointment.branch_id,
                status=QueueStatus.WAITING,
                counter=self._next_counter(appointment.branch_id),
            )
            try:
                with transaction.atomic():
                    entry.save()
            except IntegrityError:
                raise AlreadyQueued()

            appointment.service_point = service_point
            appointment.save(update_fields=["service_point", "updated_at"])

        logger.info(
            f"Appointment {appointment.id} queued as #{entry.counter} at service point {service_point.id}"
        )
        return entry

    def change_status(self, entry_id, target, user=None):
        target = QueueStatus(target)

        with transaction.atomic():
            appointment, entry = self._lock_entry(entry_id)
            current = entry.status

            if target not in QUEUE_TRANSITIONS[QueueStatus(current)]:
                raise InvalidStateTransition(current=current, target=target.value)

            now = timezone.now()
            changes = {"status": target}
            if target == QueueStatus.SERVING:
                changes["called_at"] = now
            elif target == QueueStatus.COMPLETE:
                changes["completed_at"] = now

            if not self._compare_and_set(entry.id, current, **changes):
                raise InvalidStateTransition(current=current, target=target.value)

            if target == QueueStatus.COMPLETE:
                Appointment.objects.filter(pk=appointment.pk).update(
                    status=AppointmentStatus.COMPLETED,
                    updated_at=now,
                )
                transaction.on_commit(
                    partial(self._generate_survey, entry.id, appointment.id)
                )
            elif target == QueueStatus.SERVING:
                transaction.on_commit(partial(self._announce, entry.id))

        entry.refresh_from_db()
        logger.info(f"Queue entry {entry.id} moved from {current} to {target.value}")
        return entry

    def start_serving(self, entry_id, user=None):
        return self.change_status(entry_id, QueueStatus.SERVING, user=user)

    def complete(self, entry_id, user=None):
        return self.change_status(entry_id, QueueStatus.COMPLETE, user=user)

    def transfer(self, entry_id, service_point_id, user=None):
        with transaction.atomic():
            appointment, entry = self._lock_entry(entry_id)
            current = entry.status

            if current not in TRANSFERABLE_QUEUE_STATUSES:
                raise InvalidStateTransition(current=current, target="transfer")

            if entry.service_point_id == int(service_point_id):
                raise NoopTransfer()

            service_point = get_service_point(service_point_id)
            ensure_can_serve(service_point, appointment)

            now = timezone.now()
            if not self._compare_and_set(entry.id, current, is_active=False, closed_at=now):
                raise InvalidStateTransition(current=current, target="transfer")

            new_entry = QueueEntry.objects.create(
                appointment=appointment,
                service_point=service_point,
                branch_id=entry.branch_id,
                status=QueueStatus.WAITING,
                counter=entry.counter,
                joined_at=entry.joined_at,
                transferred_from=entry,
            )

            appointment.service_point = service_point
            appointment.save(update_fields=["service_point", "updated_at"])

        logger.info(
            f"Queue entry {entry.id} transferred from service point {entry.service_point_id} "
            f"to {service_point.id} as entry {new_entry.id}"
        )
        return new_entry

    # =========================
    # After-commit side effects
    # =========================

    def _generate_survey(self, entry_id, appointment_id):
        try:
            self.survey_trigger(entry_id, appointment_id)
        except Exception:
            logger.exception(f"Survey trigger failed for queue entry {entry_id}")

    def _announce(self, entry_id):
        try:
            entry = QueueEntry.objects.select_related("service_point").get(pk=entry_id)
            self.announcer.announce(
                f"Ticket {entry.counter}, please go to {entry.service_point.name}"
            )
        except Exception:
            logger.exception(f"Announcement failed for queue entry {entry_id}")
