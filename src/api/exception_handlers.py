"""Exception handlers for the API.

Every nomination error response carries a ``kind`` so clients can tell inline field errors
apart from notices.
"""

import traceback
import typing as t
from copy import deepcopy

import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja.responses import Response

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

logger = structlog.get_logger(__name__)

MISSING_FILE_MESSAGE = "Please upload a file."


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle a general exception.

    Args:
        request: The incoming HTTP request.
        exc: The exception.

    Returns:
        The response.
    """
    user = getattr(request, "user", None)
    logger.exception(
        "internal_server_error",
        method=request.method,
        path=request.path,
        headers=obfuscate(dict(request.headers)),
        GET=obfuscate(request.GET.dict()),
        user=str(user) if user else None,
    )
    data = {"detail": "Internal Server Error."}
    if settings.DEBUG or (user and user.is_staff):  # pragma: no cover
        data["traceback"] = traceback.format_exc()
    return Response(status=500, data=data)


def handle_django_validation_error(request: HttpRequest, exc: ValidationError | t.Type[ValidationError]) -> Response:
    """Handle a validation error.

    Args:
        request: The incoming HTTP request.
        exc: The exception.
    """
    logger.warning("validation_error", path=request.path, exc_info=True)
    error_dict = {k: [ee for e in v for ee in e] for k, v in exc.error_dict.items()}
    return Response(status=400, data={"errors": error_dict, "kind": "validation"})


def handle_schema_validation_error(
    request: HttpRequest, exc: SchemaValidationError | t.Type[SchemaValidationError]
) -> Response:
    """Handle an invalid form configuration."""
    logger.info("form_config_invalid", field=exc.path, reason=exc.message)
    return Response(
        status=400,
        data={
            "detail": exc.message,
            "path": exc.path,
            "errors": {exc.path: exc.message},
            "kind": exc.kind,
        },
    )


def handle_submission_validation_error(
    request: HttpRequest, exc: SubmissionValidationError | t.Type[SubmissionValidationError]
) -> Response:
    """Handle answers that fail their validation rules."""
    return Response(
        status=400,
        data={"detail": "Please correct the highlighted answers.", "errors": exc.errors, "kind": exc.kind},
    )


def handle_missing_required_file_error(
    request: HttpRequest, exc: MissingRequiredFileError | t.Type[MissingRequiredFileError]
) -> Response:
    """Handle required file uploads without a staged file."""
    return Response(
        status=400,
        data={
            "detail": "Please upload all required files.",
            "errors": {question_id: MISSING_FILE_MESSAGE for question_id in exc.question_ids},
            "kind": exc.kind,
        },
    )


def handle_declaration_required_error(
    request: HttpRequest, exc: DeclarationRequiredError | t.Type[DeclarationRequiredError]
) -> Response:
    """Handle a submission without an accepted declaration."""
    return Response(
        status=400,
        data={"detail": "Please accept the declaration before submitting.", "kind": exc.kind},
    )


def handle_generation_failed(request: HttpRequest, exc: GenerationFailed | t.Type[GenerationFailed]) -> Response:
    """Handle a generator that returned nothing usable."""
    return Response(
        status=502,
        data={"detail": str(exc) or "The AI service did not return a usable result.", "kind": exc.kind},
    )


def handle_upload_error(request: HttpRequest, exc: UploadError | t.Type[UploadError]) -> Response:
    """Handle an attachment that could not be stored."""
    return Response(status=502, data={"detail": str(exc), "kind": exc.kind})


def handle_persistence_error(request: HttpRequest, exc: PersistenceError | t.Type[PersistenceError]) -> Response:
    """Handle a failed database read or write."""
    return Response(
        status=503,
        data={"detail": str(exc) or "The database is unavailable, please try again.", "kind": exc.kind},
    )


def handle_form_config_not_found(
    request: HttpRequest, exc: FormConfigNotFound | t.Type[FormConfigNotFound]
) -> Response:
    """Handle an unknown category slug."""
    return Response(status=404, data={"detail": str(exc), "kind": exc.kind})


SENSITIVE_KEYS = {"password", "token", "x-api-key", "authorization", "authentication", "cookie"}


def obfuscate(data: dict[str, t.Any]) -> dict[str, t.Any]:
    """Obfuscate sensitive data in payloads and headers."""
    new_data = deepcopy(data)
    for key in data.keys():
        if key.lower() in SENSITIVE_KEYS:
            new_data[key] = "********"
    return new_data
