import typing as t
from uuid import UUID

from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_extra.permissions import IsAdminUser
from ninja_jwt.authentication import JWTAuth

from common.controllers import UserAwareController
from common.throttling import AIAssistThrottle, UserDefaultThrottle, WriteThrottle
from nominations import schema
from nominations.models import Submission
from nominations.service import form_config_service, review_service


@api_controller(
    "/admin",
    auth=JWTAuth(),
    permissions=[IsAdminUser],
    tags=["Nominations Admin"],
    throttle=UserDefaultThrottle(),
)
class NominationAdminController(UserAwareController):
    """Staff endpoints: manage form configurations and review submissions."""

    @route.get(
        "/form-configs",
        url_name="admin_list_form_configs",
        response=list[schema.FormConfigSchema],
        by_alias=True,
    )
    def list_form_configs(self) -> list[schema.FormConfigSchema]:
        """List every stored form configuration."""
        return [config.as_schema() for config in form_config_service.list_form_configs()]

    @route.put(
        "/form-configs",
        url_name="admin_save_form_config",
        response=schema.SaveFormConfigResponse,
        throttle=WriteThrottle(),
    )
    def save_form_config(self, payload: schema.FormConfigInputSchema) -> schema.SaveFormConfigResponse:
        """Create or overwrite a form configuration.

        The body is a FormConfig (``segmentName``, ``categoryName``, ``description``, ``sections``).
        The id is always derived from ``categoryName``. Returns 400 with the path of the first
        invalid field, e.g. ``sections.0.questions.1.options``.
        """
        form_config = form_config_service.save_form_config(payload.model_dump(by_alias=True))
        return schema.SaveFormConfigResponse(id=form_config.id)

    @route.post(
        "/form-configs/upload",
        url_name="admin_upload_form_config",
        response=schema.SaveFormConfigResponse,
        throttle=WriteThrottle(),
    )
    def upload_form_config(self, payload: schema.FormConfigUploadSchema) -> schema.SaveFormConfigResponse:
        """Save a manually entered form configuration whose sections are a JSON array string."""
        form_config = form_config_service.upload_form_config(payload)
        return schema.SaveFormConfigResponse(id=form_config.id)

    @route.post(
        "/form-configs/generate",
        url_name="admin_generate_form_config",
        response=schema.FormConfigSchema,
        by_alias=True,
        throttle=AIAssistThrottle(),
    )
    def generate_form_config(self, payload: schema.GenerateFormConfigSchema) -> schema.FormConfigSchema:
        """Generate a form configuration from a natural-language description.

        Nothing is saved: review the result and save it with PUT /admin/form-configs.
        Returns 502 if the generator produced nothing usable.
        """
        return form_config_service.generate_form_config(payload.description)

    @route.get(
        "/form-configs/status",
        url_name="admin_form_config_status",
        response=list[schema.StatusRowSchema],
    )
    def form_config_status(self) -> list[review_service.StatusRow]:
        """Every category in display order with its form status and submission count."""
        return review_service.get_status_rows()

    @route.get(
        "/categories/{category_id}/submissions",
        url_name="admin_list_submissions",
        response=PaginatedResponseSchema[schema.AdminSubmissionInListSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_submissions(self, category_id: str) -> QuerySet[Submission]:
        """List the submissions of every user for a category, most recent first."""
        form_config = form_config_service.get_form_config(category_id)
        return review_service.list_submissions(form_config.id)

    @route.get(
        "/submissions/{submission_id}",
        url_name="admin_get_submission",
        response=schema.SubmissionDetailSchema,
    )
    def get_submission(self, submission_id: UUID) -> dict[str, t.Any]:
        """Get a submission with its answers resolved against the category form."""
        return review_service.get_submission_detail(submission_id)

    @route.put(
        "/submissions/{submission_id}/status",
        url_name="admin_set_submission_status",
        response=schema.SubmissionStatusChangedSchema,
        throttle=WriteThrottle(),
    )
    def set_submission_status(
        self, submission_id: UUID, payload: schema.SubmissionStatusUpdateSchema
    ) -> schema.SubmissionStatusChangedSchema:
        """Set the review status of a submission.

        Setting the current status again changes nothing and returns ``changed: false``.
        """
        submission = review_service.get_submission(submission_id)
        changed = review_service.set_submission_status(submission, payload.status, self.user())
        return schema.SubmissionStatusChangedSchema(id=submission.id, status=submission.status, changed=changed)
