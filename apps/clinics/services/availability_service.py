from datetime import time

from django.conf import settings
from django.db import DatabaseError

from core.constants import DayOfWeek
from core.exceptions import InfrastructureError

from apps.clinics.models import ServiceSchedule


def slot_minutes():
    return settings.SCHEDULING.get("SLOT_MINUTES", 30)


def _to_minutes(value):
    """Minutes since midnight for a ``time`` or an "HH:MM[:SS]" string."""
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    hours, minutes = str(value).split(":")[:2]
    return int(hours) * 60 + int(minutes)


def format_slot(minutes):
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def generate_time_slots(start_time, end_time, duration_minutes=30):
    """Slots from start up to, but excluding, end."""
    slots = []

    current = _to_minutes(start_time)
    end = _to_minutes(end_time)

    while current < end:
        slots.append(format_slot(current))
        current += duration_minutes

    return slots


def compute_slots(schedules, date, duration_minutes=30):
    """
    Bookable "HH:MM" slots of a service on ``date``.

    Only active windows whose weekday matches the date count. Slots of all
    matching windows are merged, de-duplicated and sorted; zero-padded
    "HH:MM" strings sort chronologically. An empty list means the service is
    closed that day.
    """
    weekday = DayOfWeek.for_date(date)

    slots = set()
    for schedule in schedules:
        if not schedule.is_active or schedule.day_of_week != weekday:
            continue
        slots.update(
            generate_time_slots(schedule.start_time, schedule.end_time, duration_minutes)
        )

    return sorted(slots)


def get_service_schedules(service_id):
    try:
        return list(
            ServiceSchedule.objects.filter(
                service_id=service_id,
                deleted_at__isnull=True,
            )
        )
    except DatabaseError as exc:
        raise InfrastructureError() from exc


def get_service_slots(service_id, date):
    return compute_slots(get_service_schedules(service_id), date, slot_minutes())
