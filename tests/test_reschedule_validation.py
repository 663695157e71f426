"""Reschedule and cancellation rules."""
from datetime import date, datetime, time, timezone as dt_timezone

import pytest

from apps.clinics.models import ServiceSchedule
from apps.settings_core.models import BranchPolicy
from apps.visits.services.reschedule_validation import (
    min_notice_hours,
    validate_cancellation,
    validate_reschedule,
)
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
)

SUNDAY = date(2030, 1, 6)
MONDAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)
SATURDAY = date(2030, 1, 12)
PREVIOUS_SATURDAY = date(2030, 1, 5)


def at(day, hour, minute=0):
    return datetime.combine(day, time(hour, minute), tzinfo=dt_timezone.utc)


@pytest.fixture
def schedules():
    """Open Monday 09:00-12:00 and 13:00-17:00."""
    return [
        ServiceSchedule(day_of_week=DayOfWeek.MONDAY, start_time=time(9), end_time=time(12)),
        ServiceSchedule(day_of_week=DayOfWeek.MONDAY, start_time=time(13), end_time=time(17)),
    ]


@pytest.fixture
def policy():
    return BranchPolicy(reschedule_time_limit_hours=24)


def test_admin_notice_floor_is_two_hours(policy):
    assert min_notice_hours(UserRoles.ADMIN, policy) == 2


def test_policy_hours_apply_to_other_roles():
    assert min_notice_hours(UserRoles.USER, BranchPolicy(reschedule_time_limit_hours=48)) == 48
    assert min_notice_hours(UserRoles.STAFF, BranchPolicy(reschedule_time_limit_hours=6)) == 6


def test_missing_policy_defaults_to_24_hours():
    assert min_notice_hours(UserRoles.USER, None) == 24
    assert min_notice_hours(UserRoles.USER, BranchPolicy(reschedule_time_limit_hours=None)) == 24


def test_zero_hour_policy_means_no_notice():
    assert min_notice_hours(UserRoles.USER, BranchPolicy(reschedule_time_limit_hours=0)) == 0


def test_admin_one_hour_ahead_is_too_soon(schedules, policy):
    """Admin at T+1h is still inside the 2h floor."""
    result = validate_reschedule(MONDAY, "11:00", UserRoles.ADMIN, policy, schedules, at(MONDAY, 10))

    assert not result.ok
    assert isinstance(result.date_error, TodayTooSoon)


def test_admin_three_hours_ahead_passes(schedules, policy):
    result = validate_reschedule(MONDAY, "13:00", UserRoles.ADMIN, policy, schedules, at(MONDAY, 10))

    assert result.ok
    assert result.error is None


def test_admin_notice_across_midnight_is_insufficient_notice(policy):
    schedules = [
        ServiceSchedule(day_of_week=DayOfWeek.MONDAY, start_time=time(0), end_time=time(2)),
    ]

    result = validate_reschedule(
        MONDAY, "00:30", UserRoles.ADMIN, policy, schedules, at(SUNDAY, 23, 30)
    )

    assert isinstance(result.date_error, InsufficientNotice)
    assert result.date_error.params["hours"] == 2
    assert result.date_error.params["minimum_date"] == "2030-01-07"
    assert result.date_error.params["minimum_time"] == "01:30"
    assert result.date_error.params["current_date"] == "2030-01-06"
    assert result.date_error.params["current_time"] == "23:30"


@pytest.mark.parametrize("slot", ["09:00", "12:30", "13:00", "16:30"])
def test_same_day_is_always_too_soon_with_24_hour_policy(schedules, policy, slot):
    result = validate_reschedule(MONDAY, slot, UserRoles.USER, policy, schedules, at(MONDAY, 8))

    assert isinstance(result.date_error, TodayTooSoon)
    assert result.error is result.date_error
    assert result.date_error.params == {"minimum_date": "2030-01-08", "minimum_time": "08:00"}


def test_next_day_inside_notice_window(schedules, policy):
    result = validate_reschedule(MONDAY, "09:00", UserRoles.USER, policy, schedules, at(SUNDAY, 10))

    assert isinstance(result.date_error, InsufficientNotice)
    assert result.time_error is None


def test_next_day_outside_notice_window(schedules, policy):
    result = validate_reschedule(MONDAY, "13:00", UserRoles.USER, policy, schedules, at(SUNDAY, 10))

    assert result.ok


def test_longer_policy_is_respected(schedules):
    policy = BranchPolicy(reschedule_time_limit_hours=72)

    result = validate_reschedule(MONDAY, "13:00", UserRoles.USER, policy, schedules, at(SUNDAY, 10))

    assert isinstance(result.date_error, InsufficientNotice)
    assert result.date_error.params["hours"] == 72


def test_past_date(schedules, policy):
    result = validate_reschedule(MONDAY, "09:00", UserRoles.USER, policy, schedules, at(TUESDAY, 9))

    assert isinstance(result.date_error, PastDate)


def test_past_date_applies_to_admins(schedules, policy):
    result = validate_reschedule(MONDAY, "16:30", UserRoles.ADMIN, policy, schedules, at(TUESDAY, 9))

    assert isinstance(result.date_error, PastDate)


def test_gap_between_windows_is_not_available(schedules, policy):
    """Monday 12:30 falls between the morning and afternoon windows."""
    result = validate_reschedule(MONDAY, "12:30", UserRoles.USER, policy, schedules, at(PREVIOUS_SATURDAY, 9))

    assert result.date_error is None
    assert isinstance(result.time_error, TimeNotAvailable)
    assert isinstance(result.error, TimeNotAvailable)


def test_first_afternoon_slot_is_accepted(schedules, policy):
    result = validate_reschedule(MONDAY, "13:00", UserRoles.USER, policy, schedules, at(PREVIOUS_SATURDAY, 9))

    assert result.ok
    assert "13:00" in result.slots


def test_unaligned_time_is_not_available(schedules, policy):
    result = validate_reschedule(MONDAY, "13:15", UserRoles.USER, policy, schedules, at(SUNDAY, 9))

    assert isinstance(result.time_error, TimeNotAvailable)


def test_unparseable_time_is_not_available(schedules, policy):
    result = validate_reschedule(MONDAY, "1pm", UserRoles.USER, policy, schedules, at(SUNDAY, 9))

    assert isinstance(result.time_error, TimeNotAvailable)


def test_closed_weekday_reports_no_slots_even_with_time(schedules, policy):
    result = validate_reschedule(SATURDAY, "10:00", UserRoles.USER, policy, schedules, at(MONDAY, 9))

    assert isinstance(result.date_error, NoSlotsForDay)
    assert result.time_error is None
    assert result.date_error.params == {"day": "Saturday"}
    assert "Saturday" in result.date_error.message


def test_inactive_schedule_closes_the_day(policy):
    schedules = [
        ServiceSchedule(
            day_of_week=DayOfWeek.MONDAY, start_time=time(9), end_time=time(17), is_active=False
        ),
    ]

    result = validate_reschedule(MONDAY, "10:00", UserRoles.USER, policy, schedules, at(PREVIOUS_SATURDAY, 9))

    assert isinstance(result.error, NoSlotsForDay)


def test_missing_date(schedules, policy):
    result = validate_reschedule(None, "10:00", UserRoles.USER, policy, schedules, at(MONDAY, 9))

    assert isinstance(result.date_error, MissingDate)
    assert result.time_error is None


def test_missing_date_and_time(schedules, policy):
    result = validate_reschedule(None, None, UserRoles.USER, policy, schedules, at(MONDAY, 9))

    assert isinstance(result.date_error, MissingDate)
    assert isinstance(result.time_error, MissingTime)


def test_missing_time_does_not_reject_a_valid_day(schedules, policy):
    """Without a time the day is judged by its last instant."""
    result = validate_reschedule(MONDAY, None, UserRoles.USER, policy, schedules, at(SUNDAY, 10))

    assert result.date_error is None
    assert isinstance(result.time_error, MissingTime)


def test_missing_time_today_for_admin(schedules, policy):
    result = validate_reschedule(MONDAY, "", UserRoles.ADMIN, policy, schedules, at(MONDAY, 10))

    assert result.date_error is None
    assert isinstance(result.error, MissingTime)


def test_day_level_error_takes_priority(schedules, policy):
    result = validate_reschedule(MONDAY, "12:30", UserRoles.USER, policy, schedules, at(TUESDAY, 9))

    assert isinstance(result.date_error, PastDate)
    assert isinstance(result.time_error, TimeNotAvailable)
    assert result.error is result.date_error
    assert set(result.errors) == {"date", "time"}


def test_raise_for_error_carries_all_field_errors(schedules, policy):
    result = validate_reschedule(MONDAY, "12:30", UserRoles.USER, policy, schedules, at(TUESDAY, 9))

    with pytest.raises(PastDate) as exc_info:
        result.raise_for_error()

    payload = exc_info.value.as_dict()
    assert payload["code"] == "past_date"
    assert payload["errors"]["date"]["code"] == "past_date"
    assert payload["errors"]["time"]["code"] == "time_not_available"


def test_raise_for_error_is_silent_when_ok(schedules, policy):
    result = validate_reschedule(MONDAY, "13:00", UserRoles.USER, policy, schedules, at(SUNDAY, 10))

    result.raise_for_error()


def test_time_objects_are_accepted(schedules, policy):
    result = validate_reschedule(MONDAY, time(13, 0), UserRoles.USER, policy, schedules, at(SUNDAY, 10))

    assert result.ok


def test_validation_is_repeatable(schedules, policy):
    now = at(SUNDAY, 10)
    first = validate_reschedule(MONDAY, "12:30", UserRoles.USER, policy, schedules, now)
    second = validate_reschedule(MONDAY, "12:30", UserRoles.USER, policy, schedules, now)

    assert first.error.code == second.error.code
    assert len(schedules) == 2


# =========================
# Cancellation
# =========================

def test_admin_can_always_cancel():
    validate_cancellation(at(MONDAY, 9), UserRoles.ADMIN, None, at(TUESDAY, 9))


def test_past_appointment_cannot_be_cancelled():
    with pytest.raises(PastAppointment):
        validate_cancellation(at(MONDAY, 9), UserRoles.USER, None, at(TUESDAY, 9))


def test_cancellation_needs_policy_notice():
    policy = BranchPolicy(cancellation_hours=12)

    with pytest.raises(InsufficientCancellationNotice) as exc_info:
        validate_cancellation(at(MONDAY, 9), UserRoles.USER, policy, at(MONDAY, 0))
    assert exc_info.value.params == {"hours": 12}

    validate_cancellation(at(MONDAY, 9), UserRoles.USER, policy, at(SUNDAY, 20))


def test_closed_weekday_inside_notice_window_reports_no_slots(schedules, policy):
    """Wednesday is closed, so the notice window is irrelevant."""
    wednesday = date(2030, 1, 9)

    result = validate_reschedule(wednesday, "08:00", UserRoles.USER, policy, schedules, at(TUESDAY, 9))

    assert isinstance(result.date_error, NoSlotsForDay)
    assert result.date_error.params == {"day": "Wednesday"}
    assert isinstance(result.error, NoSlotsForDay)


def test_closed_past_day_reports_no_slots(schedules, policy):
    result = validate_reschedule(SUNDAY, "10:00", UserRoles.USER, policy, schedules, at(TUESDAY, 9))

    assert isinstance(result.date_error, NoSlotsForDay)
