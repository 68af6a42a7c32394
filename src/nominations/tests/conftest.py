import copy
import typing as t

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from accounts.models import NominatorUser
from nominations.models import Draft, FormConfiguration, Submission
from nominations.schema import FormConfigSchema, validate_form_config
from nominations.service.form_config_service import save_form_config

OBSTETRICIAN_FORM: dict[str, t.Any] = {
    "segmentName": "Individual",
    "categoryName": "Obstetrician of the Year",
    "description": "Honours an obstetrician for outstanding maternal care.",
    "sections": [
        {
            "id": "nominee",
            "title": "Nominee",
            "questions": [
                {"id": "nominee-name", "title": "Nominee name", "type": "TEXT", "required": True},
                {
                    "id": "specialty",
                    "title": "Specialty",
                    "type": "MULTIPLE_CHOICE",
                    "required": False,
                    "options": ["Obstetrics", "Gynaecology"],
                },
                {
                    "id": "areas",
                    "title": "Areas of impact",
                    "type": "CHECKBOX",
                    "required": True,
                    "options": ["Research", "Teaching", "Outreach"],
                },
            ],
        },
        {
            "id": "evidence",
            "title": "Evidence",
            "questions": [
                {"id": "achievements", "title": "Achievements", "type": "PARAGRAPH", "required": True},
                {"id": "cv", "title": "Curriculum vitae", "type": "FILE_UPLOAD", "required": True},
                {"id": "letter", "title": "Support letter", "type": "FILE_UPLOAD", "required": False},
            ],
        },
    ],
}


@pytest.fixture
def form_config_data() -> dict[str, t.Any]:
    """A fresh copy of a valid form configuration document."""
    return copy.deepcopy(OBSTETRICIAN_FORM)


@pytest.fixture
def form_config_schema(form_config_data: dict[str, t.Any]) -> FormConfigSchema:
    return validate_form_config(form_config_data)


@pytest.fixture
def form_config(db: None, form_config_data: dict[str, t.Any]) -> FormConfiguration:
    """The stored form configuration of 'Obstetrician of the Year'."""
    return save_form_config(form_config_data)


@pytest.fixture
def valid_responses() -> dict[str, t.Any]:
    return {
        "nominee-name": "Dr. Asha Rao",
        "specialty": "Obstetrics",
        "areas": ["Research", "Outreach"],
        "achievements": "Cut maternal complications by a third across the district.",
    }


@pytest.fixture
def cv_file() -> SimpleUploadedFile:
    return SimpleUploadedFile("cv.pdf", b"%PDF-1.4 curriculum vitae", content_type="application/pdf")


@pytest.fixture
def draft(nominator: NominatorUser, form_config: FormConfiguration) -> Draft:
    return Draft.objects.create(user=nominator, category=form_config, responses={"nominee-name": "Dr. A"})


@pytest.fixture
def submission(
    nominator: NominatorUser, form_config: FormConfiguration, valid_responses: dict[str, t.Any]
) -> Submission:
    return Submission.objects.create(
        user=nominator,
        category=form_config,
        responses=valid_responses,
        attachments={"cv": "/media/nominations/cv.pdf"},
    )
