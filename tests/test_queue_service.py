"""Queue state machine: add, serve, complete and transfer."""
import pytest
from django.db import IntegrityError, transaction

from apps.visits.models import QueueEntry
from apps.visits.services.queue_service import QueueService
from core.constants import AppointmentStatus, QueueStatus
from core.exceptions import (
    AlreadyQueued,
    AppointmentNotCheckedIn,
    EntryNotFound,
    InvalidStateTransition,
    NoopTransfer,
    ServicePointInactive,
    ServicePointIneligible,
    ServicePointNotFound,
)

pytestmark = pytest.mark.django_db


@pytest.fixture
def queued(queue_service, checked_in_appointment, service_point):
    return queue_service.add_to_queue(checked_in_appointment.id, service_point.id)


# =========================
# add_to_queue
# =========================

def test_add_creates_waiting_entry(queued, checked_in_appointment, service_point):
    assert queued.status == QueueStatus.WAITING
    assert queued.is_active
    assert queued.counter == 1
    assert queued.service_point == service_point
    assert queued.branch_id == checked_in_appointment.branch_id

    checked_in_appointment.refresh_from_db()
    assert checked_in_appointment.service_point == service_point


def test_adding_twice_is_rejected(queue_service, queued, checked_in_appointment, second_service_point):
    with pytest.raises(AlreadyQueued):
        queue_service.add_to_queue(checked_in_appointment.id, second_service_point.id)

    assert QueueEntry.objects.filter(appointment=checked_in_appointment).count() == 1


def test_appointment_must_be_checked_in(queue_service, make_appointment, service_point):
    appointment = make_appointment(status=AppointmentStatus.SCHEDULED)

    with pytest.raises(AppointmentNotCheckedIn):
        queue_service.add_to_queue(appointment.id, service_point.id)

    assert not QueueEntry.objects.exists()


def test_point_must_attend_the_service(queue_service, checked_in_appointment, lab_point):
    with pytest.raises(ServicePointIneligible):
        queue_service.add_to_queue(checked_in_appointment.id, lab_point.id)


def test_point_must_be_active(queue_service, checked_in_appointment, inactive_point):
    with pytest.raises(ServicePointInactive):
        queue_service.add_to_queue(checked_in_appointment.id, inactive_point.id)


def test_point_must_belong_to_the_branch(queue_service, checked_in_appointment, foreign_point):
    with pytest.raises(ServicePointIneligible):
        queue_service.add_to_queue(checked_in_appointment.id, foreign_point.id)


def test_unknown_point(queue_service, checked_in_appointment):
    with pytest.raises(ServicePointNotFound):
        queue_service.add_to_queue(checked_in_appointment.id, 999999)


def test_deactivated_link_makes_point_ineligible(queue_service, checked_in_appointment, service_point):
    service_point.service_links.update(is_active=False)

    with pytest.raises(ServicePointIneligible):
        queue_service.add_to_queue(checked_in_appointment.id, service_point.id)


def test_ticket_numbers_increase_within_the_day(queue_service, make_appointment, service_point):
    first = make_appointment(status=AppointmentStatus.CHECKED_IN)
    second = make_appointment(status=AppointmentStatus.CHECKED_IN)

    assert queue_service.add_to_queue(first.id, service_point.id).counter == 1
    assert queue_service.add_to_queue(second.id, service_point.id).counter == 2


def test_database_allows_one_active_entry_per_appointment(queued):
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            QueueEntry.objects.create(
                appointment=queued.appointment,
                service_point=queued.service_point,
                branch=queued.branch,
                counter=99,
            )


# =========================
# Status transitions
# =========================

def test_start_serving(queue_service, queued, announcer, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        entry = queue_service.start_serving(queued.id)

    assert entry.status == QueueStatus.SERVING
    assert entry.called_at is not None
    assert announcer.tones == ["call"]
    assert announcer.messages == ["Ticket 1, please go to Desk 1"]


def test_cannot_skip_serving(queue_service, queued):
    with pytest.raises(InvalidStateTransition) as exc_info:
        queue_service.complete(queued.id)

    assert exc_info.value.params == {"current": "waiting", "target": "complete"}
    queued.refresh_from_db()
    assert queued.status == QueueStatus.WAITING


def test_cannot_go_back_to_waiting(queue_service, queued):
    queue_service.start_serving(queued.id)

    with pytest.raises(InvalidStateTransition):
        queue_service.change_status(queued.id, QueueStatus.WAITING)


def test_complete_closes_the_appointment_and_requests_a_survey(
    queue_service, queued, survey_calls, django_capture_on_commit_callbacks
):
    queue_service.start_serving(queued.id)

    with django_capture_on_commit_callbacks(execute=True):
        entry = queue_service.complete(queued.id)

    assert entry.status == QueueStatus.COMPLETE
    assert entry.completed_at is not None
    assert entry.appointment.status == AppointmentStatus.COMPLETED
    assert survey_calls == [(entry.id, entry.appointment_id)]


def test_survey_is_requested_only_after_commit(queue_service, queued, survey_calls, django_capture_on_commit_callbacks):
    queue_service.start_serving(queued.id)

    with django_capture_on_commit_callbacks(execute=False) as callbacks:
        queue_service.complete(queued.id)

    assert survey_calls == []
    assert len(callbacks) == 1


def test_complete_is_terminal(queue_service, queued):
    queue_service.start_serving(queued.id)
    queue_service.complete(queued.id)

    with pytest.raises(InvalidStateTransition):
        queue_service.complete(queued.id)
    with pytest.raises(InvalidStateTransition):
        queue_service.start_serving(queued.id)


def test_double_complete_has_one_winner(queue_service, queued):
    """The second of two completions observes the first one's write."""
    queue_service.start_serving(queued.id)

    results = []
    for _ in range(2):
        try:
            queue_service.complete(queued.id)
            results.append("ok")
        except InvalidStateTransition:
            results.append("rejected")

    assert sorted(results) == ["ok", "rejected"]


def test_stale_status_write_is_refused(queued):
    """A write conditioned on an outdated status updates nothing."""
    updated = QueueService._compare_and_set(
        queued.id, QueueStatus.SERVING, status=QueueStatus.COMPLETE
    )

    assert updated is False
    queued.refresh_from_db()
    assert queued.status == QueueStatus.WAITING

    assert QueueService._compare_and_set(queued.id, QueueStatus.WAITING, status=QueueStatus.SERVING)


def test_survey_failure_does_not_undo_completion(
    announcer, queued, caplog, django_capture_on_commit_callbacks
):
    def broken_trigger(queue_entry_id, appointment_id):
        raise RuntimeError("survey backend down")

    service = QueueService(announcer=announcer, survey_trigger=broken_trigger)
    service.start_serving(queued.id)

    with django_capture_on_commit_callbacks(execute=True):
        entry = service.complete(queued.id)

    entry.refresh_from_db()
    assert entry.status == QueueStatus.COMPLETE
    assert "Survey trigger failed" in caplog.text


def test_announcer_failure_does_not_undo_serving(queued, django_capture_on_commit_callbacks):
    class BrokenAnnouncer:
        def announce(self, text, tone="call"):
            raise OSError("speaker unplugged")

    service = QueueService(announcer=BrokenAnnouncer(), survey_trigger=lambda *args: None)

    with django_capture_on_commit_callbacks(execute=True):
        entry = service.start_serving(queued.id)

    entry.refresh_from_db()
    assert entry.status == QueueStatus.SERVING


def test_unknown_entry(queue_service):
    with pytest.raises(EntryNotFound):
        queue_service.start_serving(999999)


# =========================
# Transfer
# =========================

def test_transfer_to_same_point_is_a_noop(queue_service, queued, service_point):
    with pytest.raises(NoopTransfer):
        queue_service.transfer(queued.id, service_point.id)


def test_transfer_to_ineligible_point(queue_service, queued, lab_point):
    with pytest.raises(ServicePointIneligible):
        queue_service.transfer(queued.id, lab_point.id)

    queued.refresh_from_db()
    assert queued.is_active


def test_transfer_to_inactive_point(queue_service, queued, inactive_point):
    with pytest.raises(ServicePointInactive):
        queue_service.transfer(queued.id, inactive_point.id)


def test_transfer_leaves_one_active_entry(queue_service, queued, second_service_point):
    new_entry = queue_service.transfer(queued.id, second_service_point.id)

    active = QueueEntry.objects.filter(appointment=queued.appointment, is_active=True)
    assert list(active) == [new_entry]
    assert new_entry.service_point == second_service_point
    assert new_entry.status == QueueStatus.WAITING
    assert new_entry.transferred_from_id == queued.id

    queued.refresh_from_db()
    assert not queued.is_active
    assert queued.closed_at is not None


def test_transfer_keeps_place_in_line(queue_service, queued, second_service_point):
    new_entry = queue_service.transfer(queued.id, second_service_point.id)

    assert new_entry.counter == queued.counter
    assert new_entry.joined_at == queued.joined_at

    new_entry.appointment.refresh_from_db()
    assert new_entry.appointment.service_point == second_service_point


def test_transfer_while_serving_returns_to_waiting(queue_service, queued, second_service_point):
    queue_service.start_serving(queued.id)

    new_entry = queue_service.transfer(queued.id, second_service_point.id)

    assert new_entry.status == QueueStatus.WAITING


def test_completed_entry_cannot_be_transferred(queue_service, queued, second_service_point):
    queue_service.start_serving(queued.id)
    queue_service.complete(queued.id)

    with pytest.raises(InvalidStateTransition):
        queue_service.transfer(queued.id, second_service_point.id)


def test_superseded_entry_is_gone(queue_service, queued, second_service_point, service_point):
    queue_service.transfer(queued.id, second_service_point.id)

    with pytest.raises(EntryNotFound):
        queue_service.start_serving(queued.id)
    with pytest.raises(EntryNotFound):
        queue_service.transfer(queued.id, service_point.id)


def test_transferred_entry_can_be_transferred_back(queue_service, queued, second_service_point, service_point):
    moved = queue_service.transfer(queued.id, second_service_point.id)

    back = queue_service.transfer(moved.id, service_point.id)

    assert back.service_point == service_point
    assert QueueEntry.objects.filter(appointment=queued.appointment, is_active=True).count() == 1
