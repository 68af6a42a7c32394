"""Display order of award segments and categories.

The order is a presentation contract configured in settings (``AWARD_SEGMENT_ORDER`` and
``AWARD_CATEGORY_ORDER``), not something derived from the stored form configurations.
"""

from django.conf import settings


def segment_order() -> list[str]:
    """Configured segment names, in display order."""
    return list(getattr(settings, "AWARD_SEGMENT_ORDER", []))


def category_order() -> dict[str, list[str]]:
    """Configured category names per segment, in display order."""
    return dict(getattr(settings, "AWARD_CATEGORY_ORDER", {}))
