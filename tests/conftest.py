"""Shared test fixtures."""
from datetime import time, timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from apps.accounts.models import User
from apps.clinics.models import Branch, Service, ServicePoint, ServicePointService, ServiceSchedule
from apps.visits.models import Appointment
from apps.visits.services.queue_service import QueueService
from core.constants import AppointmentStatus, DayOfWeek, UserRoles
from core.utils.announcer import RecordingAnnouncer


@pytest.fixture
def branch(db):
    return Branch.objects.create(name="Central", code="CEN")


@pytest.fixture
def other_branch(db):
    return Branch.objects.create(name="North", code="NOR")


@pytest.fixture
def service(db):
    return Service.objects.create(name="General consultation")


@pytest.fixture
def other_service(db):
    return Service.objects.create(name="Laboratory")


@pytest.fixture
def monday_schedules(service):
    """Open Monday 09:00-12:00 and 13:00-17:00."""
    return [
        ServiceSchedule.objects.create(
            service=service,
            day_of_week=DayOfWeek.MONDAY,
            start_time=time(9, 0),
            end_time=time(12, 0),
        ),
        ServiceSchedule.objects.create(
            service=service,
            day_of_week=DayOfWeek.MONDAY,
            start_time=time(13, 0),
            end_time=time(17, 0),
        ),
    ]


def make_service_point(branch, name, services=(), is_active=True):
    point = ServicePoint.objects.create(branch=branch, name=name, is_active=is_active)
    for service in services:
        ServicePointService.objects.create(service_point=point, service=service)
    return point


@pytest.fixture
def service_point(branch, service):
    return make_service_point(branch, "Desk 1", [service])


@pytest.fixture
def second_service_point(branch, service):
    return make_service_point(branch, "Desk 2", [service])


@pytest.fixture
def lab_point(branch, other_service):
    """Active point of the same branch that does not attend ``service``."""
    return make_service_point(branch, "Lab window", [other_service])


@pytest.fixture
def inactive_point(branch, service):
    return make_service_point(branch, "Closed desk", [service], is_active=False)


@pytest.fixture
def foreign_point(other_branch, service):
    return make_service_point(other_branch, "North desk", [service])


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@clinic.test", password="pass", full_name="Ada Admin", role=UserRoles.ADMIN
    )


@pytest.fixture
def staff_user(branch):
    return User.objects.create_user(
        email="staff@clinic.test", password="pass", full_name="Sam Staff",
        role=UserRoles.STAFF, branch=branch,
    )


@pytest.fixture
def foreign_staff_user(other_branch):
    return User.objects.create_user(
        email="north@clinic.test", password="pass", full_name="Nora North",
        role=UserRoles.STAFF, branch=other_branch,
    )


@pytest.fixture
def visualizer_user(branch):
    return User.objects.create_user(
        email="screen@clinic.test", password="pass", full_name="Lobby Screen",
        role=UserRoles.VISUALIZER, branch=branch,
    )


@pytest.fixture
def patient_user(db):
    return User.objects.create_user(
        email="patient@clinic.test", password="pass", full_name="Pat Patient", role=UserRoles.USER
    )


@pytest.fixture
def make_appointment(branch, service, patient_user):
    def _create(status=AppointmentStatus.SCHEDULED, scheduled_at=None, **kwargs):
        fields = {
            "branch": branch,
            "service": service,
            "user": patient_user,
            "patient_name": "Pat Patient",
            "status": status,
            "scheduled_at": scheduled_at or timezone.now() + timedelta(hours=1),
        }
        fields.update(kwargs)
        return Appointment.objects.create(**fields)
    return _create


@pytest.fixture
def checked_in_appointment(make_appointment):
    return make_appointment(status=AppointmentStatus.CHECKED_IN, scheduled_at=timezone.now())


@pytest.fixture
def announcer():
    return RecordingAnnouncer()


@pytest.fixture
def survey_calls():
    return []


@pytest.fixture
def queue_service(announcer, survey_calls):
    def record(queue_entry_id, appointment_id):
        survey_calls.append((queue_entry_id, appointment_id))
    return QueueService(announcer=announcer, survey_trigger=record)


@pytest.fixture
def api_client():
    return APIClient()
