"""Admin operations on form configurations."""

import typing as t

import structlog
from django.conf import settings
from django.db import DatabaseError
from django.db.models import QuerySet

from nominations.exceptions import FormConfigNotFound, PersistenceError
from nominations.llms.llm_helpers import load_backend
from nominations.llms.llm_interfaces import FormSchemaGenerator
from nominations.models import FormConfiguration
from nominations.schema import (
    FormConfigSchema,
    FormConfigUploadSchema,
    parse_sections_json,
    validate_form_config,
)

logger = structlog.get_logger(__name__)


def get_schema_generator() -> FormSchemaGenerator:
    """Get the configured schema generator backend."""
    return load_backend(settings.NOMINATIONS_SCHEMA_GENERATOR)  # type: ignore[no-any-return]


def save_form_config(config: FormConfigSchema | t.Mapping[str, t.Any]) -> FormConfiguration:
    """Create or overwrite the form configuration of a category.

    The configuration is (re)validated, so the id always matches the category name.

    Raises:
        SchemaValidationError: if the configuration is not a valid form.
    """
    validated = validate_form_config(config)
    try:
        form_config, created = FormConfiguration.objects.update_or_create(
            id=validated.id,
            defaults={
                "segment_name": validated.segment_name,
                "category_name": validated.category_name,
                "description": validated.description,
                "sections": [section.model_dump(mode="json", exclude_none=True) for section in validated.sections],
            },
        )
    except DatabaseError as e:
        logger.error("form_config_save_failed", category_id=validated.id, error=str(e))
        raise PersistenceError("Could not save the form configuration.") from e
    logger.info(
        "form_config_saved",
        category_id=form_config.id,
        created=created,
        section_count=len(validated.sections),
    )
    return form_config


def upload_form_config(payload: FormConfigUploadSchema) -> FormConfiguration:
    """Save a manually entered form configuration whose sections come as a JSON array string."""
    sections = parse_sections_json(payload.sections_json)
    config = validate_form_config(
        {
            "segmentName": payload.segment_name,
            "categoryName": payload.category_name,
            "description": payload.description,
            "sections": sections,
        }
    )
    return save_form_config(config)


def list_form_configs() -> QuerySet[FormConfiguration]:
    """All stored form configurations."""
    return FormConfiguration.objects.all()


def get_form_config(category_id: str) -> FormConfiguration:
    """Get the form configuration of a category.

    Raises:
        FormConfigNotFound: if no configuration exists for the slug.
    """
    try:
        return FormConfiguration.objects.get(pk=category_id)
    except FormConfiguration.DoesNotExist:
        raise FormConfigNotFound(category_id)


def generate_form_config(description: str, generator: FormSchemaGenerator | None = None) -> FormConfigSchema:
    """Generate a form configuration candidate from a natural-language description.

    The candidate is validated but never persisted; the admin reviews and saves it explicitly.

    Raises:
        GenerationFailed: if the generator produced nothing usable.
        SchemaValidationError: if the generated configuration is not a valid form.
    """
    generator = generator or get_schema_generator()
    logger.info("form_config_generation_started", backend=type(generator).__name__)
    generated = generator.generate(description=description)
    config = validate_form_config(generated.model_dump())
    logger.info("form_config_generated", category_id=config.id, section_count=len(config.sections))
    return config
