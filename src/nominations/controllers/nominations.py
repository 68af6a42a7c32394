import orjson
from django.db.models import QuerySet
from ninja.errors import HttpError
from ninja.params import Form
from ninja_extra import api_controller, route, status
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth
from pydantic import ValidationError as PydanticValidationError

from common.controllers import UserAwareController
from common.throttling import (
    AIAssistThrottle,
    DraftAutosaveThrottle,
    NominationSubmissionThrottle,
    UserDefaultThrottle,
)
from nominations import schema
from nominations.exceptions import SubmissionValidationError
from nominations.models import Draft, Submission
from nominations.service import assist_service, draft_service, form_config_service, review_service
from nominations.service.submission_service import SubmissionCommitter, list_user_submissions


@api_controller("/nominations", auth=JWTAuth(), tags=["Nominations"], throttle=UserDefaultThrottle())
class NominationController(UserAwareController):
    """Endpoints for nominators: browse categories, keep a draft, submit."""

    @route.get(
        "/categories",
        url_name="list_categories",
        response=list[schema.SegmentGroupSchema],
        by_alias=True,
    )
    def list_categories(self) -> list[review_service.SegmentGroup]:
        """List every award category with a form, grouped by segment in display order."""
        return review_service.order_categories_by_segment(form_config_service.list_form_configs())

    @route.get(
        "/categories/{category_id}",
        url_name="get_category_form",
        response=schema.FormConfigSchema,
        by_alias=True,
    )
    def get_category_form(self, category_id: str) -> schema.FormConfigSchema:
        """Get the nomination form of a category.

        Returns 404 for an unknown category slug.
        """
        return form_config_service.get_form_config(category_id).as_schema()

    @route.get(
        "/categories/{category_id}/draft",
        url_name="get_draft",
        response=schema.DraftSchema,
    )
    def get_draft(self, category_id: str) -> Draft:
        """Get your saved draft for the category, or 404 if you have none."""
        form_config = form_config_service.get_form_config(category_id)
        draft = draft_service.get_draft(self.user(), form_config)
        if draft is None:
            raise HttpError(404, "No draft saved for this category.")
        return draft

    @route.put(
        "/categories/{category_id}/draft",
        url_name="save_draft",
        response=schema.DraftSchema,
        throttle=DraftAutosaveThrottle(),
    )
    def save_draft(self, category_id: str, payload: schema.DraftUpdateSchema) -> Draft:
        """Create or overwrite your draft for the category.

        Clients call this from their debounced autosave; the last write wins.
        """
        form_config = form_config_service.get_form_config(category_id)
        return draft_service.save_draft(self.user(), form_config, payload.responses)

    @route.post(
        "/categories/{category_id}/submit",
        url_name="submit_nomination",
        response={201: schema.SubmissionSchema},
        throttle=NominationSubmissionThrottle(),
    )
    def submit(self, category_id: str, payload: Form[str]) -> tuple[int, Submission]:
        """Submit your nomination for the category.

        Send a multipart request: ``payload`` is a JSON document with ``responses`` and
        ``declaration_accepted``, and every attachment is a file part named after its question id.
        On success your draft for the category is deleted.
        """
        form_config = form_config_service.get_form_config(category_id)
        try:
            data = schema.SubmissionPayloadSchema.model_validate(orjson.loads(payload))
        except (orjson.JSONDecodeError, PydanticValidationError):
            raise SubmissionValidationError({"payload": "Expected a JSON object with responses."})
        files = dict(self.context.request.FILES.items())  # type: ignore[union-attr]
        committer = SubmissionCommitter(self.user(), form_config)
        submission = committer.submit(data.responses, files, data.declaration_accepted)
        return status.HTTP_201_CREATED, submission

    @route.get(
        "/submissions/mine",
        url_name="list_my_submissions",
        response=PaginatedResponseSchema[schema.SubmissionSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_my_submissions(self) -> QuerySet[Submission]:
        """List your submitted nominations, most recent first."""
        return list_user_submissions(self.user())

    @route.post(
        "/assist",
        url_name="assist_nomination_text",
        response=schema.TextAssistResponseSchema,
        by_alias=True,
        throttle=AIAssistThrottle(),
    )
    def assist(self, payload: schema.TextAssistRequestSchema) -> schema.TextAssistResponseSchema:
        """Let the AI assistant rephrase, expand or summarize a free-text answer.

        Returns 502 if the assistant produced nothing usable.
        """
        result = assist_service.assist(payload)
        return schema.TextAssistResponseSchema(suggested_text=result.suggested_text)
