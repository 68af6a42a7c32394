from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja_extra import NinjaExtraAPI

from accounts.controllers.account import AccountController
from accounts.controllers.auth import AuthController
from common.schema import ResponseOk, VersionResponse
from common.throttling import AnonDefaultThrottle, UserDefaultThrottle
from nominations.controllers import NominationAdminController, NominationController
from nominations.exceptions import (
    DeclarationRequiredError,
    FormConfigNotFound,
    GenerationFailed,
    MissingRequiredFileError,
    PersistenceError,
    SchemaValidationError,
    SubmissionValidationError,
    UploadError,
)

from .exception_handlers import (
    handle_declaration_required_error,
    handle_django_validation_error,
    handle_form_config_not_found,
    handle_general_exception,
    handle_generation_failed,
    handle_missing_required_file_error,
    handle_persistence_error,
    handle_schema_validation_error,
    handle_submission_validation_error,
    handle_upload_error,
)

api = NinjaExtraAPI(
    title="Awards Nominations API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"{settings.SITE_NAME} nominations API {settings.VERSION}",
    app_name=f"awards-api-{settings.VERSION}",
    urls_namespace="api",
    servers=[
        {"url": settings.SERVICE_URL, "description": settings.SERVICE_DESCRIPTION},
    ],
    throttle=[AnonDefaultThrottle(), UserDefaultThrottle()],
)


@api.get("/version", tags=["Version"], response={200: VersionResponse})
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Get the API version.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/healthcheck", tags=["Healthcheck"], response={200: ResponseOk})
def healthcheck(request: HttpRequest) -> tuple[int, ResponseOk]:
    """Check the health of the API."""
    return 200, ResponseOk()


api.register_controllers(
    # Auth/Account controllers
    AuthController,
    AccountController,
    # Nomination controllers
    NominationController,
    NominationAdminController,
)

EXCEPTION_HANDLERS = {
    Exception: handle_general_exception,
    ValidationError: handle_django_validation_error,
    SchemaValidationError: handle_schema_validation_error,
    SubmissionValidationError: handle_submission_validation_error,
    MissingRequiredFileError: handle_missing_required_file_error,
    DeclarationRequiredError: handle_declaration_required_error,
    GenerationFailed: handle_generation_failed,
    UploadError: handle_upload_error,
    PersistenceError: handle_persistence_error,
    FormConfigNotFound: handle_form_config_not_found,
}

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
