"""Submission commit: validate, upload attachments, then persist the submission and drop the draft."""

import typing as t

import structlog
from django.conf import settings
from django.core.files.storage import Storage, default_storage
from django.core.files.uploadedfile import UploadedFile
from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from accounts.models import NominatorUser
from nominations.exceptions import (
    DeclarationRequiredError,
    MissingRequiredFileError,
    PersistenceError,
    SubmissionValidationError,
    UploadError,
)
from nominations.models import Draft, FormConfiguration, Submission
from nominations.schema import FormConfigSchema, QuestionType
from nominations.utils import attachment_path
from nominations.validation import RuleCache, check_answer_shapes

logger = structlog.get_logger(__name__)


class SubmissionCommitter:
    """Commits the nomination of one user for one category.

    The steps run strictly in order and nothing touches storage or the database before
    every precondition holds:

    1. preconditions: required files staged, rules pass, declaration accepted;
    2. upload of every staged file, aborting on the first failure;
    3. one atomic batch creating the submission and deleting the draft.
    """

    def __init__(
        self,
        user: NominatorUser,
        form_config: FormConfiguration,
        storage: Storage | None = None,
    ) -> None:
        """Initialize the committer."""
        self.user = user
        self.form_config = form_config
        self.schema: FormConfigSchema = form_config.as_schema()
        self.storage = storage or default_storage
        self.rules = RuleCache()

    def submit(
        self,
        responses: dict[str, t.Any],
        files: t.Mapping[str, UploadedFile],
        declaration_accepted: bool,
    ) -> Submission:
        """Submit the nomination.

        Raises:
            MissingRequiredFileError: a required file upload has no staged file.
            SubmissionValidationError: answers fail their rules or do not fit the form.
            DeclarationRequiredError: the declaration was not accepted.
            UploadError: an attachment could not be stored.
            PersistenceError: the submission could not be written.
        """
        self.check_preconditions(responses, files, declaration_accepted)
        attachments = self.upload_attachments(files)
        submission = self.persist(responses, attachments)
        logger.info(
            "submission_committed",
            submission_id=str(submission.id),
            user_id=str(self.user.id),
            category_id=self.form_config.id,
            attachment_count=len(attachments),
        )
        return submission

    def check_preconditions(
        self,
        responses: t.Mapping[str, t.Any],
        files: t.Mapping[str, UploadedFile],
        declaration_accepted: bool,
    ) -> None:
        """Validate everything that can be validated without side effects."""
        questions = self.schema.questions_by_id()
        missing_files = [
            question.id
            for question in questions.values()
            if question.type == QuestionType.FILE_UPLOAD and question.required and question.id not in files
        ]
        if missing_files:
            raise MissingRequiredFileError(missing_files)

        errors = check_answer_shapes(self.schema, responses)
        for question_id, file in files.items():
            question = questions.get(question_id)
            if question is None or question.type != QuestionType.FILE_UPLOAD:
                errors[question_id] = "This question does not accept files."
            elif file.size is not None and file.size > settings.NOMINATION_MAX_UPLOAD_SIZE:
                errors[question_id] = "The file is too large."
        errors.update(self.rules.for_config(self.schema).validate(responses))
        if errors:
            raise SubmissionValidationError(errors)

        if not declaration_accepted:
            raise DeclarationRequiredError("Please accept the declaration to submit your nomination.")

    def upload_attachments(self, files: t.Mapping[str, UploadedFile]) -> dict[str, str]:
        """Upload every staged file and return question id to URL.

        Already uploaded files are left in place if a later upload fails.
        """
        attachments: dict[str, str] = {}
        for question_id, file in files.items():
            filename = file.name or question_id
            path = attachment_path(self.user.id, self.form_config.id, filename)
            try:
                stored_name = self.storage.save(path, file)
                attachments[question_id] = self.storage.url(stored_name)
            except Exception as e:
                logger.exception(
                    "attachment_upload_failed",
                    user_id=str(self.user.id),
                    category_id=self.form_config.id,
                    question_id=question_id,
                    uploaded_count=len(attachments),
                )
                raise UploadError(question_id, filename) from e
        return attachments

    def persist(self, responses: dict[str, t.Any], attachments: dict[str, str]) -> Submission:
        """Create the submission and delete the draft as one all-or-nothing batch."""
        try:
            with transaction.atomic():
                submission = Submission.objects.create(
                    user=self.user,
                    category=self.form_config,
                    submitted_at=timezone.now(),
                    responses=responses,
                    attachments=attachments,
                    status=Submission.Status.PENDING,
                )
                self.delete_draft()
        except DatabaseError as e:
            logger.error(
                "submission_persist_failed",
                user_id=str(self.user.id),
                category_id=self.form_config.id,
                orphaned_attachments=list(attachments.values()),
                error=str(e),
            )
            raise PersistenceError("Could not save your nomination. Please submit again.") from e
        return submission

    def delete_draft(self) -> None:
        """Delete the draft of this user for this category."""
        Draft.objects.filter(user=self.user, category=self.form_config).delete()


def list_user_submissions(user: NominatorUser) -> QuerySet[Submission]:
    """Submissions made by the user, most recent first."""
    return Submission.objects.for_user(user).select_related("category")
