"""Integration tests for NominationAdminController."""

import json
import typing as t

import orjson
import pytest
from django.shortcuts import reverse  # type: ignore[attr-defined]
from django.test.client import Client

from accounts.models import NominatorUser
from nominations.exceptions import GenerationFailed
from nominations.llms import MockFormSchemaGenerator
from nominations.models import FormConfiguration, Submission

pytestmark = pytest.mark.django_db


def _put_json(client: Client, url: str, payload: t.Any) -> t.Any:
    return client.put(url, data=orjson.dumps(payload), content_type="application/json")


def _post_json(client: Client, url: str, payload: t.Any) -> t.Any:
    return client.post(url, data=orjson.dumps(payload), content_type="application/json")


@pytest.mark.parametrize(
    "url_name,kwargs",
    [
        ("api:admin_list_form_configs", {}),
        ("api:admin_form_config_status", {}),
        ("api:admin_list_submissions", {"category_id": "obstetrician_of_the_year"}),
    ],
)
def test_admin_endpoints_are_staff_only(
    nominator_client: Client, form_config: FormConfiguration, url_name: str, kwargs: dict[str, str]
) -> None:
    response = nominator_client.get(reverse(url_name, kwargs=kwargs))

    assert response.status_code == 403


def test_save_form_config_requires_staff(nominator_client: Client, form_config_data: dict[str, t.Any]) -> None:
    response = _put_json(nominator_client, reverse("api:admin_save_form_config"), form_config_data)

    assert response.status_code == 403
    assert not FormConfiguration.objects.exists()


# --- Form configurations ---


def test_save_form_config(reviewer_client: Client, form_config_data: dict[str, t.Any]) -> None:
    response = _put_json(reviewer_client, reverse("api:admin_save_form_config"), form_config_data)

    assert response.status_code == 200
    assert response.json() == {"id": "obstetrician_of_the_year"}
    assert FormConfiguration.objects.get().question_count == 6


def test_save_form_config_overwrites(
    reviewer_client: Client, form_config: FormConfiguration, form_config_data: dict[str, t.Any]
) -> None:
    form_config_data["sections"] = []

    response = _put_json(reviewer_client, reverse("api:admin_save_form_config"), form_config_data)

    assert response.status_code == 200
    form_config.refresh_from_db()
    assert form_config.is_empty


def test_save_invalid_form_config_reports_path(reviewer_client: Client, form_config_data: dict[str, t.Any]) -> None:
    form_config_data["sections"][0]["questions"][1]["options"] = []

    response = _put_json(reviewer_client, reverse("api:admin_save_form_config"), form_config_data)

    assert response.status_code == 400
    data = response.json()
    assert data["path"] == "sections.0.questions.1.options"
    assert data["kind"] == "validation"
    assert "sections.0.questions.1.options" in data["errors"]
    assert not FormConfiguration.objects.exists()


def test_list_form_configs(reviewer_client: Client, form_config: FormConfiguration) -> None:
    response = reviewer_client.get(reverse("api:admin_list_form_configs"))

    assert response.status_code == 200
    assert [config["categoryName"] for config in response.json()] == ["Obstetrician of the Year"]


def test_upload_form_config(reviewer_client: Client, form_config_data: dict[str, t.Any]) -> None:
    payload = {
        "segmentName": "Individual",
        "categoryName": "Obstetrician of the Year",
        "description": "Honours an obstetrician for outstanding care.",
        "sectionsJson": json.dumps(form_config_data["sections"]),
    }

    response = _post_json(reviewer_client, reverse("api:admin_upload_form_config"), payload)

    assert response.status_code == 200
    assert response.json() == {"id": "obstetrician_of_the_year"}


def test_upload_form_config_with_invalid_json(reviewer_client: Client) -> None:
    payload = {
        "segmentName": "Individual",
        "categoryName": "Obstetrician of the Year",
        "description": "Honours an obstetrician for outstanding care.",
        "sectionsJson": '{"not": "an array"}',
    }

    response = _post_json(reviewer_client, reverse("api:admin_upload_form_config"), payload)

    assert response.status_code == 400
    assert response.json()["path"] == "sections"
    assert response.json()["detail"] == "Please provide a valid JSON array for sections."


def test_upload_form_config_with_short_description(reviewer_client: Client) -> None:
    payload = {"segmentName": "Individual", "categoryName": "Obstetrician of the Year", "description": "Short"}

    response = _post_json(reviewer_client, reverse("api:admin_upload_form_config"), payload)

    assert response.status_code == 422


def test_generate_form_config_does_not_save(reviewer_client: Client) -> None:
    payload = {
        "description": "Segment: Individual\nCategory: Midwife of the Year\n- Nominee name\n- Portfolio (upload PDF)"
    }

    response = _post_json(reviewer_client, reverse("api:admin_generate_form_config"), payload)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "midwife_of_the_year"
    assert data["categoryName"] == "Midwife of the Year"
    assert [q["type"] for q in data["sections"][0]["questions"]] == ["TEXT", "FILE_UPLOAD"]
    assert not FormConfiguration.objects.exists()


def test_generate_form_config_failure(reviewer_client: Client, monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(self: t.Any, *, description: str) -> t.Any:
        raise GenerationFailed("The AI service did not return a usable result.")

    monkeypatch.setattr(MockFormSchemaGenerator, "generate", fail)

    response = _post_json(
        reviewer_client, reverse("api:admin_generate_form_config"), {"description": "An award for midwives."}
    )

    assert response.status_code == 502
    assert response.json() == {"detail": "The AI service did not return a usable result.", "kind": "generation"}


def test_form_config_status(reviewer_client: Client, form_config: FormConfiguration, submission: Submission) -> None:
    response = reviewer_client.get(reverse("api:admin_form_config_status"))

    assert response.status_code == 200
    rows = {row["id"]: row for row in response.json()}
    assert rows["obstetrician_of_the_year"]["status"] == "ADDED"
    assert rows["obstetrician_of_the_year"]["submission_count"] == 1
    assert rows["neonatologist_of_the_year"]["status"] == "EMPTY"
    assert response.json()[0]["segment_name"] == "Organization"


# --- Submissions ---


def test_list_submissions_for_category(
    reviewer_client: Client, submission: Submission, other_nominator: NominatorUser, form_config: FormConfiguration
) -> None:
    Submission.objects.create(user=other_nominator, category=form_config)

    response = reviewer_client.get(
        reverse("api:admin_list_submissions", kwargs={"category_id": "obstetrician_of_the_year"})
    )

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert {result["user"]["id"] for result in data["results"]} == {
        str(submission.user_id),
        str(other_nominator.id),
    }


def test_list_submissions_unknown_category(reviewer_client: Client) -> None:
    response = reviewer_client.get(reverse("api:admin_list_submissions", kwargs={"category_id": "nope"}))

    assert response.status_code == 404


def test_get_submission_detail(reviewer_client: Client, submission: Submission) -> None:
    response = reviewer_client.get(reverse("api:admin_get_submission", kwargs={"submission_id": submission.id}))

    assert response.status_code == 200
    data = response.json()
    assert data["category_name"] == "Obstetrician of the Year"
    answers = {answer["question_id"]: answer for answer in data["answers"]}
    assert answers["nominee-name"]["answer"] == {"kind": "text", "value": "Dr. Asha Rao"}
    assert answers["areas"]["answer"] == {"kind": "string_list", "value": ["Research", "Outreach"]}
    assert answers["cv"]["answer"] == {"kind": "file_url", "value": "/media/nominations/cv.pdf"}
    assert answers["letter"]["answer"] is None


def test_set_submission_status_is_idempotent(
    reviewer_client: Client, reviewer: NominatorUser, submission: Submission
) -> None:
    url = reverse("api:admin_set_submission_status", kwargs={"submission_id": submission.id})

    first = _put_json(reviewer_client, url, {"status": "approved"})
    second = _put_json(reviewer_client, url, {"status": "approved"})

    assert first.status_code == 200
    assert first.json() == {"id": str(submission.id), "status": "approved", "changed": True}
    assert second.json()["changed"] is False
    submission.refresh_from_db()
    assert submission.reviewed_by == reviewer

    detail = reviewer_client.get(reverse("api:admin_get_submission", kwargs={"submission_id": submission.id}))
    assert detail.json()["status"] == "approved"
    assert detail.json()["reviewed_by"]["id"] == str(reviewer.id)


def test_set_submission_status_rejects_unknown_status(reviewer_client: Client, submission: Submission) -> None:
    url = reverse("api:admin_set_submission_status", kwargs={"submission_id": submission.id})

    response = _put_json(reviewer_client, url, {"status": "shortlisted"})

    assert response.status_code == 422
