"""Post-visit satisfaction surveys."""
import logging

import pytest

from apps.surveys.models import Survey
from apps.surveys.services import SurveyQRService, SurveyService, trigger_survey_generation
from core.exceptions import EntryNotFound

pytestmark = pytest.mark.django_db


class FakeQRService(SurveyQRService):
    def __init__(self):
        super().__init__()
        self.tokens = []

    def generate(self, token):
        self.tokens.append(token)
        return "data:image/png;base64,FAKE"


@pytest.fixture
def completed_entry(queue_service, checked_in_appointment, service_point):
    entry = queue_service.add_to_queue(checked_in_appointment.id, service_point.id)
    queue_service.start_serving(entry.id)
    return queue_service.complete(entry.id)


def test_survey_is_created_for_a_completed_entry(completed_entry):
    qr = FakeQRService()

    survey = SurveyService.create_for_queue_entry(
        completed_entry.id, completed_entry.appointment_id, qr_service=qr
    )

    assert survey.queue_entry == completed_entry
    assert survey.appointment_id == completed_entry.appointment_id
    assert survey.branch_id == completed_entry.branch_id
    assert survey.patient_name == "Pat Patient"
    assert len(survey.token) == 64
    assert qr.tokens == [survey.token]


def test_creating_twice_returns_the_same_survey(completed_entry):
    qr = FakeQRService()

    first = SurveyService.create_for_queue_entry(completed_entry.id, qr_service=qr)
    second = SurveyService.create_for_queue_entry(completed_entry.id, qr_service=qr)

    assert first.id == second.id
    assert Survey.objects.count() == 1
    assert len(qr.tokens) == 1


def test_unknown_entry_is_rejected():
    with pytest.raises(EntryNotFound):
        SurveyService.create_for_queue_entry(999999, qr_service=FakeQRService())


def test_mismatched_appointment_is_rejected(completed_entry):
    with pytest.raises(EntryNotFound):
        SurveyService.create_for_queue_entry(
            completed_entry.id, completed_entry.appointment_id + 1, qr_service=FakeQRService()
        )


def test_qr_code_is_a_png_data_uri(settings):
    settings.SURVEYS = {"BASE_URL": "https://clinic.example/"}
    qr = SurveyQRService()

    assert qr.survey_url("abc") == "https://clinic.example/survey/abc"
    assert qr.generate("abc").startswith("data:image/png;base64,")


def test_trigger_never_raises(caplog):
    with caplog.at_level(logging.ERROR, logger="apps.surveys.services"):
        trigger_survey_generation(999999, 1)

    assert "Survey generation failed for queue entry 999999" in caplog.text
    assert Survey.objects.count() == 0


def test_public_lookup_by_token(api_client, completed_entry):
    survey = SurveyService.create_for_queue_entry(completed_entry.id, qr_service=FakeQRService())

    response = api_client.get(f"/api/surveys/token/{survey.token}/")

    assert response.status_code == 200
    assert response.data["id"] == survey.id
    assert response.data["is_completed"] is False


def test_public_lookup_of_unknown_token(api_client):
    response = api_client.get("/api/surveys/token/nope/")

    assert response.status_code == 404


def test_staff_fetch_survey_of_queue_entry(api_client, staff_user, completed_entry):
    survey = SurveyService.create_for_queue_entry(completed_entry.id, qr_service=FakeQRService())
    api_client.force_authenticate(staff_user)

    response = api_client.get(f"/api/surveys/queue/{completed_entry.id}/")

    assert response.status_code == 200
    assert response.data["token"] == survey.token
    assert response.data["survey_url"].endswith(f"/survey/{survey.token}")


def test_patients_cannot_fetch_queue_surveys(api_client, patient_user, completed_entry):
    api_client.force_authenticate(patient_user)

    response = api_client.get(f"/api/surveys/queue/{completed_entry.id}/")

    assert response.status_code == 403
