# core/exceptions.py
"""
Domain error taxonomy.

Every rejection the scheduling and queue engines can produce is a distinct
subclass of ``DomainError`` carrying a stable ``code`` and the interpolation
``params`` a client needs to render a localized message. Views turn these into
``{"error", "code", "params"}`` responses; nothing here is fatal except
``InfrastructureError``.
"""

import logging

from rest_framework import status
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class DomainError(Exception):
    code = 'domain_error'
    default_message = 'The request could not be processed.'
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message=None, **params):
        self.params = params
        self.message = message or self.default_message.format(**params)
        # Per-field rejections when several checks failed at once
        self.errors = {}
        super().__init__(self.message)

    def summary(self):
        return {
            'error': self.message,
            'code': self.code,
            'params': self.params,
        }

    def as_dict(self):
        data = self.summary()
        if self.errors:
            data['errors'] = {
                field: error.summary() for field, error in self.errors.items()
            }
        return data


class InfrastructureError(DomainError):
    """A repository could not be reached. Callers may retry."""
    code = 'infrastructure'
    default_message = 'A backing service is unavailable. Please try again.'
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


# =========================
# Reschedule validation
# =========================

class MissingDate(DomainError):
    code = 'missing_date'
    default_message = 'Select a date for the appointment.'


class MissingTime(DomainError):
    code = 'missing_time'
    default_message = 'Select a time for the appointment.'


class PastDate(DomainError):
    code = 'past_date'
    default_message = (
        'The selected date is in the past. '
        'The earliest allowed time is {minimum_date} at {minimum_time}.'
    )


class TodayTooSoon(DomainError):
    code = 'today_too_soon'
    default_message = (
        'The selected time today is too soon. '
        'The earliest allowed time is {minimum_date} at {minimum_time}.'
    )


class InsufficientNotice(DomainError):
    code = 'insufficient_notice'
    default_message = (
        'Appointments need {hours} hours of notice from {current_date} {current_time}. '
        'The earliest allowed time is {minimum_date} at {minimum_time}.'
    )


class TimeNotAvailable(DomainError):
    code = 'time_not_available'
    default_message = 'The selected time is not available for this service.'


class NoSlotsForDay(DomainError):
    code = 'no_slots_for_day'
    default_message = 'This service is not open on {day}.'


# =========================
# Reschedule / cancellation policy
# =========================

class AppointmentNotFound(DomainError):
    code = 'appointment_not_found'
    default_message = 'Appointment not found.'
    status_code = status.HTTP_404_NOT_FOUND


class AppointmentNotReschedulable(DomainError):
    code = 'appointment_not_reschedulable'
    default_message = 'An appointment in status "{status}" cannot be rescheduled.'


class MaxReschedulesExceeded(DomainError):
    code = 'max_reschedules_exceeded'
    default_message = 'The maximum of {max_reschedules} reschedules has been reached.'


class ExceedsMaxAdvance(DomainError):
    code = 'exceeds_max_advance'
    default_message = 'Appointments can be booked at most {days} days in advance.'


class SlotTaken(DomainError):
    code = 'slot_taken'
    default_message = 'The selected time is already booked.'
    status_code = status.HTTP_409_CONFLICT


class PastAppointment(DomainError):
    code = 'past_appointment'
    default_message = 'This appointment has already taken place.'


class TooLateToReschedule(DomainError):
    code = 'too_late_to_reschedule'
    default_message = 'Appointments can only be rescheduled up to {hours} hours before they start.'


class InsufficientCancellationNotice(DomainError):
    code = 'insufficient_cancellation_notice'
    default_message = 'Appointments must be cancelled at least {hours} hours in advance.'


class InvalidAppointmentStatus(DomainError):
    code = 'invalid_appointment_status'
    default_message = 'This action is not allowed for an appointment in status "{status}".'


# =========================
# Queue
# =========================

class AppointmentNotCheckedIn(DomainError):
    code = 'appointment_not_checked_in'
    default_message = 'The appointment must be checked in before joining the queue.'


class AlreadyQueued(DomainError):
    code = 'already_queued'
    default_message = 'This appointment is already in the queue.'


class ServicePointNotFound(DomainError):
    code = 'service_point_not_found'
    default_message = 'Service point not found.'
    status_code = status.HTTP_404_NOT_FOUND


class ServicePointIneligible(DomainError):
    code = 'service_point_ineligible'
    default_message = 'The selected service point cannot attend this service.'


class ServicePointInactive(DomainError):
    code = 'service_point_inactive'
    default_message = 'The selected service point is not active.'


class EntryNotFound(DomainError):
    code = 'entry_not_found'
    default_message = 'Queue entry not found.'
    status_code = status.HTTP_404_NOT_FOUND


class InvalidStateTransition(DomainError):
    code = 'invalid_state_transition'
    default_message = 'Cannot move a queue entry from "{current}" to "{target}".'


class NoopTransfer(DomainError):
    code = 'noop_transfer'
    default_message = 'The entry is already assigned to this service point.'


def error_response(exc):
    """DRF response for a domain rejection."""
    if isinstance(exc, InfrastructureError):
        logger.error(f"Infrastructure failure: {exc.message}")
    else:
        logger.info(f"Request rejected: {exc.code}")
    return Response(exc.as_dict(), status=exc.status_code)
