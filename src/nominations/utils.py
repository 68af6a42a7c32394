import os
import re
import typing as t

from django.conf import settings
from django.utils import timezone

_WHITESPACE_RUN = re.compile(r"\s+")
_NON_SLUG_CHARS = re.compile(r"[^\w-]+", re.ASCII)
_UNSAFE_FILENAME_CHARS = re.compile(r"[^-\w.]")


def slugify_category(name: str) -> str:
    """Derive the form configuration id from a category name.

    Lowercases, turns every whitespace run into a single underscore and drops anything
    outside ``[a-z0-9_-]``.

    >>> slugify_category("Obstetrician of the Year")
    'obstetrician_of_the_year'
    """
    return _NON_SLUG_CHARS.sub("", _WHITESPACE_RUN.sub("_", name.lower()))


def kebab_case(title: str) -> str:
    """Turn a display title into a kebab-case identifier."""
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def safe_filename(filename: str) -> str:
    """Strip directories and unsafe characters from a client supplied filename."""
    name = os.path.basename(filename.replace("\\", "/")).strip().replace(" ", "_")
    return _UNSAFE_FILENAME_CHARS.sub("", name).strip(".") or "attachment"


def attachment_path(user_id: t.Any, category_id: str, filename: str) -> str:
    """Storage path for a staged attachment.

    ``<upload root>/<user id>/<category id>/<epoch millis>_<filename>``
    """
    timestamp = int(timezone.now().timestamp() * 1000)
    return f"{settings.NOMINATION_UPLOAD_ROOT}/{user_id}/{category_id}/{timestamp}_{safe_filename(filename)}"
