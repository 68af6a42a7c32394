import typing as t

import pytest
from freezegun import freeze_time

from accounts.models import NominatorUser
from nominations.models import FormConfiguration, Submission
from nominations.schema import CategoryStatus, FormConfigSchema
from nominations.service import review_service

SECTIONS = [
    {
        "id": "about",
        "title": "About",
        "questions": [{"id": "name", "title": "Name", "type": "TEXT", "required": True}],
    }
]

SEGMENT_ORDER = ["Organization", "Individual"]
CATEGORY_ORDER = {
    "Individual": ["Cat B", "Cat A", "Cat Missing"],
    "Organization": ["Cat C"],
}


def _config(name: str, segment: str, sections: list[dict[str, t.Any]] | None = None) -> FormConfiguration:
    return FormConfiguration(
        id=name.lower().replace(" ", "_"),
        segment_name=segment,
        category_name=name,
        sections=SECTIONS if sections is None else sections,
    )


class TestBuildStatusRows:
    def test_configured_order_then_remaining_by_name(self) -> None:
        configs = [
            _config("Cat A", "Individual"),
            _config("Cat B", "Individual", sections=[]),
            _config("Cat C", "Organization"),
            _config("Zeta Award", "Individual"),
            _config("Alpha Award", "Initiatives"),
        ]

        rows = review_service.build_status_rows(configs, {"cat_a": 3, "zeta_award": 1}, SEGMENT_ORDER, CATEGORY_ORDER)

        assert [(row.id, row.status, row.submission_count) for row in rows] == [
            ("cat_c", CategoryStatus.ADDED, 0),
            ("cat_b", CategoryStatus.EMPTY, 0),
            ("cat_a", CategoryStatus.ADDED, 3),
            ("cat_missing", CategoryStatus.EMPTY, 0),
            ("alpha_award", CategoryStatus.ADDED, 0),
            ("zeta_award", CategoryStatus.ADDED, 1),
        ]
        assert rows[3].segment_name == "Individual"
        assert rows[3].category_name == "Cat Missing"

    def test_without_configs_every_configured_category_is_empty(self) -> None:
        rows = review_service.build_status_rows([], {}, SEGMENT_ORDER, CATEGORY_ORDER)

        assert [row.id for row in rows] == ["cat_c", "cat_b", "cat_a", "cat_missing"]
        assert {row.status for row in rows} == {CategoryStatus.EMPTY}

    def test_segments_missing_from_segment_order_follow_alphabetically(self) -> None:
        rows = review_service.build_status_rows(
            [], {}, ["Organization"], {"Zed": ["Z1"], "Individual": ["I1"], "Organization": ["O1"]}
        )

        assert [row.id for row in rows] == ["o1", "i1", "z1"]


class TestOrderCategoriesBySegment:
    def test_grouping_and_order(self) -> None:
        configs = [
            _config("Zeta Award", "Individual"),
            _config("Cat A", "Individual"),
            _config("Other Thing", "Other"),
            _config("Cat C", "Organization"),
            _config("Cat B", "Individual"),
            _config("Another Thing", "Another"),
        ]

        groups = review_service.order_categories_by_segment(configs, SEGMENT_ORDER, CATEGORY_ORDER)

        assert [group.segment_name for group in groups] == ["Organization", "Individual", "Another", "Other"]
        assert [config.id for config in groups[1].categories] == ["cat_b", "cat_a", "zeta_award"]

    def test_uses_configured_order_by_default(self) -> None:
        configs = [
            _config("Neonatologist of the Year", "Individual"),
            _config("Obstetrician of the Year", "Individual"),
            _config("Baby Care Brand of the Year", "Organization"),
        ]

        groups = review_service.order_categories_by_segment(configs)

        assert [group.segment_name for group in groups] == ["Organization", "Individual"]
        assert [c.category_name for c in groups[1].categories] == [
            "Obstetrician of the Year",
            "Neonatologist of the Year",
        ]


def test_resolve_answers_types_values_by_question(form_config_schema: FormConfigSchema) -> None:
    answers = review_service.resolve_answers(
        form_config_schema,
        {"nominee-name": "Dr. Rao", "areas": ["Research"], "retired-question": "old"},
        {"cv": "https://files.example.com/cv.pdf"},
    )

    by_id = {answer.question_id: answer for answer in answers}
    assert [answer.question_id for answer in answers][:6] == [
        "nominee-name",
        "specialty",
        "areas",
        "achievements",
        "cv",
        "letter",
    ]
    assert by_id["nominee-name"].answer is not None and by_id["nominee-name"].answer.kind == "text"
    assert by_id["areas"].answer is not None and by_id["areas"].answer.kind == "string_list"
    assert by_id["cv"].answer is not None and by_id["cv"].answer.kind == "file_url"
    assert by_id["specialty"].answer is None
    assert by_id["letter"].answer is None
    assert by_id["retired-question"].section_title is None
    assert by_id["cv"].section_title == "Evidence"


@pytest.mark.django_db
class TestSubmissionReview:
    def test_submission_counts(self, submission: Submission) -> None:
        assert review_service.submission_counts() == {"obstetrician_of_the_year": 1}

    def test_get_status_rows_reads_the_database(self, submission: Submission) -> None:
        rows = {row.id: row for row in review_service.get_status_rows()}

        assert rows["obstetrician_of_the_year"].status == CategoryStatus.ADDED
        assert rows["obstetrician_of_the_year"].submission_count == 1
        assert rows["neonatologist_of_the_year"].status == CategoryStatus.EMPTY

    def test_status_change(self, submission: Submission, reviewer: NominatorUser) -> None:
        with freeze_time("2026-04-02 09:30:00"):
            changed = review_service.set_submission_status(submission, Submission.Status.APPROVED, reviewer)

        assert changed
        submission.refresh_from_db()
        assert submission.status == Submission.Status.APPROVED
        assert submission.reviewed_by == reviewer
        assert submission.reviewed_at is not None
        assert submission.reviewed_at.isoformat().startswith("2026-04-02T09:30:00")
        assert submission.updated_at == submission.reviewed_at

    def test_same_status_is_a_no_op(
        self, submission: Submission, reviewer: NominatorUser, nominator_user_factory: t.Any
    ) -> None:
        review_service.set_submission_status(submission, Submission.Status.REJECTED, reviewer)
        submission.refresh_from_db()
        first_reviewed_at = submission.reviewed_at
        second_reviewer = nominator_user_factory(is_staff=True)

        changed = review_service.set_submission_status(submission, Submission.Status.REJECTED, second_reviewer)

        assert not changed
        submission.refresh_from_db()
        assert submission.reviewed_by == reviewer
        assert submission.reviewed_at == first_reviewed_at

    def test_detail_reflects_status_change_immediately(self, submission: Submission, reviewer: NominatorUser) -> None:
        assert review_service.get_submission_detail(submission.id)["status"] == "pending"

        review_service.set_submission_status(
            review_service.get_submission(submission.id), Submission.Status.APPROVED, reviewer
        )

        detail = review_service.get_submission_detail(submission.id)
        assert detail["status"] == "approved"
        assert detail["reviewed_by"] == reviewer
        assert detail["category_name"] == "Obstetrician of the Year"
