# core/constants.py

from django.db import models


class UserRoles:
    """User role constants for RBAC"""
    ADMIN = 'admin'
    STAFF = 'staff'
    USER = 'user'
    VISUALIZER = 'visualizer'

    CHOICES = [
        (ADMIN, 'Administrator'),
        (STAFF, 'Staff'),
        (USER, 'User'),
        (VISUALIZER, 'Visualizer'),
    ]


class DayOfWeek(models.IntegerChoices):
    SUNDAY = 0, 'Sunday'
    MONDAY = 1, 'Monday'
    TUESDAY = 2, 'Tuesday'
    WEDNESDAY = 3, 'Wednesday'
    THURSDAY = 4, 'Thursday'
    FRIDAY = 5, 'Friday'
    SATURDAY = 6, 'Saturday'

    @classmethod
    def for_date(cls, value):
        """Sunday-based day index for a date (Python's weekday() is Monday-based)."""
        return cls((value.weekday() + 1) % 7)


class AppointmentStatus(models.TextChoices):
    SCHEDULED = 'scheduled', 'Scheduled'
    CHECKED_IN = 'checked_in', 'Checked In'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'
    NO_SHOW = 'no_show', 'No Show'


class QueueStatus(models.TextChoices):
    WAITING = 'waiting', 'Waiting'
    SERVING = 'serving', 'Serving'
    COMPLETE = 'complete', 'Complete'


# Allowed status moves for a queue entry; transfer is handled separately.
QUEUE_TRANSITIONS = {
    QueueStatus.WAITING: {QueueStatus.SERVING},
    QueueStatus.SERVING: {QueueStatus.COMPLETE},
    QueueStatus.COMPLETE: set(),
}

TRANSFERABLE_QUEUE_STATUSES = (QueueStatus.WAITING, QueueStatus.SERVING)

NON_RESCHEDULABLE_STATUSES = (
    AppointmentStatus.COMPLETED,
    AppointmentStatus.CANCELLED,
    AppointmentStatus.NO_SHOW,
)
