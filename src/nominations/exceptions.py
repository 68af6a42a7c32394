"""Custom exceptions for the nominations app.

Every exception carries a ``kind`` so API clients can decide between an inline field
error, a dismissible notice or a not-found view.
"""


class NominationException(Exception):
    """Base exception for the nominations app."""

    kind = "error"


class SchemaValidationError(NominationException):
    """Raised when a candidate form configuration does not satisfy the schema."""

    kind = "validation"

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class SubmissionValidationError(NominationException):
    """Raised when one or more answers fail their validation rules."""

    kind = "validation"

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__(f"Invalid answers for: {', '.join(sorted(errors))}")


class MissingRequiredFileError(NominationException):
    """Raised when a required file upload question has no staged file."""

    kind = "validation"

    def __init__(self, question_ids: list[str]) -> None:
        self.question_ids = question_ids
        super().__init__(f"Missing required files for: {', '.join(question_ids)}")


class DeclarationRequiredError(NominationException):
    """Raised when the nominator did not accept the declaration."""

    kind = "validation"


class GenerationFailed(NominationException):
    """Raised when the hosted generator returned nothing usable."""

    kind = "generation"


class UploadError(NominationException):
    """Raised when an attachment could not be written to object storage."""

    kind = "upload"

    def __init__(self, question_id: str, filename: str) -> None:
        self.question_id = question_id
        self.filename = filename
        super().__init__(f"Failed to upload '{filename}' for question '{question_id}'.")


class PersistenceError(NominationException):
    """Raised when a database read or write failed."""

    kind = "persistence"


class FormConfigNotFound(NominationException):
    """Raised when no form configuration exists for a category slug."""

    kind = "not_found"

    def __init__(self, category_id: str) -> None:
        self.category_id = category_id
        super().__init__(f"No form configuration for category '{category_id}'.")
