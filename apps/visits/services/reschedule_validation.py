"""
Reschedule and cancellation rules.

Everything here is pure: callers load the appointment, the branch policy and
the service schedules, pass them in together with ``now`` and persist the
outcome themselves.
"""

from datetime import datetime, time, timedelta

from django.conf import settings

from apps.clinics.services.availability_service import compute_slots, slot_minutes
from core.constants import DayOfWeek, UserRoles
from core.exceptions import (
    InsufficientCancellationNotice,
    InsufficientNotice,
    MissingDate,
    MissingTime,
    NoSlotsForDay,
    PastAppointment,
    PastDate,
    TimeNotAvailable,
    TodayTooSoon,
    TooLateToReschedule,
)

END_OF_DAY = time(23, 59, 59, 999000)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def min_notice_hours(role, branch_policy):
    """Administrators get a fixed floor; everyone else follows the branch policy."""
    conf = settings.SCHEDULING
    if role == UserRoles.ADMIN:
        return conf.get("ADMIN_MIN_NOTICE_HOURS", 2)

    hours = getattr(branch_policy, "reschedule_time_limit_hours", None)
    # 0 means no notice at all; only a missing value takes the default
    if _is_number(hours):
        return hours
    return conf.get("DEFAULT_MIN_NOTICE_HOURS", 24)


def parse_slot(value):
    """``time`` for an "HH:MM" string or a ``time``; None when unparseable."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    try:
        return datetime.strptime(str(value).strip(), "%H:%M").time()
    except ValueError:
        return None


class RescheduleValidation:
    """
    Outcome of :func:`validate_reschedule`.

    ``date_error`` and ``time_error`` are tracked separately so a form can
    flag both fields; ``error`` is the one shown when only one message fits,
    and the day-level problem wins.
    """

    def __init__(self, date_error=None, time_error=None, minimum_allowed=None, slots=None):
        self.date_error = date_error
        self.time_error = time_error
        self.minimum_allowed = minimum_allowed
        self.slots = slots or []

    @property
    def ok(self):
        return self.date_error is None and self.time_error is None

    @property
    def error(self):
        return self.date_error or self.time_error

    @property
    def errors(self):
        errors = {}
        if self.date_error is not None:
            errors["date"] = self.date_error
        if self.time_error is not None:
            errors["time"] = self.time_error
        return errors

    def raise_for_error(self):
        if self.ok:
            return
        error = self.error
        error.errors = self.errors
        raise error


def validate_reschedule(candidate_date, candidate_time, role, branch_policy, schedules, now):
    """
    Decide whether an appointment may move to ``candidate_date`` at
    ``candidate_time``.

    ``now`` must be an aware datetime in the branch's local time; the
    candidate is interpreted in the same zone.
    """
    hours = min_notice_hours(role, branch_policy)
    minimum_allowed = now + timedelta(hours=hours)
    minimum = {
        "minimum_date": minimum_allowed.date().isoformat(),
        "minimum_time": minimum_allowed.strftime("%H:%M"),
    }

    if not candidate_date:
        return RescheduleValidation(
            date_error=MissingDate(),
            time_error=None if candidate_time else MissingTime(),
            minimum_allowed=minimum_allowed,
        )

    chosen = parse_slot(candidate_time) if candidate_time else None

    # Without a usable time the day is judged by its last instant
    candidate_instant = datetime.combine(
        candidate_date, chosen or END_OF_DAY, tzinfo=now.tzinfo
    )

    date_error = None
    today = now.date()
    if candidate_date < today:
        date_error = PastDate(**minimum)
    elif candidate_date == today and candidate_instant < minimum_allowed:
        date_error = TodayTooSoon(**minimum)
    elif candidate_instant < minimum_allowed:
        date_error = InsufficientNotice(
            hours=hours,
            current_date=today.isoformat(),
            current_time=now.strftime("%H:%M"),
            **minimum,
        )

    slots = compute_slots(schedules, candidate_date, slot_minutes())

    time_error = None
    if not candidate_time:
        time_error = MissingTime()
    elif slots and (chosen is None or chosen.strftime("%H:%M") not in slots):
        time_error = TimeNotAvailable()

    # A closed weekday overrides any notice problem
    if not slots:
        date_error = NoSlotsForDay(day=DayOfWeek.for_date(candidate_date).label)

    return RescheduleValidation(
        date_error=date_error,
        time_error=time_error,
        minimum_allowed=minimum_allowed,
        slots=slots,
    )


def validate_current_appointment(scheduled_at, role, branch_policy, now):
    """
    The appointment being moved must itself still be far enough away.
    Administrators may move any appointment, past ones included.
    """
    if role == UserRoles.ADMIN:
        return

    if scheduled_at <= now:
        raise PastAppointment()

    hours = min_notice_hours(role, branch_policy)
    if scheduled_at - now < timedelta(hours=hours):
        raise TooLateToReschedule(hours=hours)


def validate_cancellation(scheduled_at, role, branch_policy, now):
    """Administrators may always cancel; others need ``cancellation_hours`` of notice."""
    if role == UserRoles.ADMIN:
        return

    if scheduled_at < now:
        raise PastAppointment()

    hours = getattr(branch_policy, "cancellation_hours", None)
    if not _is_number(hours):
        hours = 24

    if scheduled_at - now < timedelta(hours=hours):
        raise InsufficientCancellationNotice(hours=hours)
