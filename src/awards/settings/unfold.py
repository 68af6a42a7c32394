"""Django Unfold admin configuration."""

from django.urls import reverse_lazy
from django.utils.translation import gettext_lazy as _

from .base import SITE_NAME, VERSION

UNFOLD = {
    "SITE_TITLE": f"{SITE_NAME} v{VERSION} Admin",
    "SITE_HEADER": f"{SITE_NAME} v{VERSION} Administration",
    "SITE_URL": "/",
    "SHOW_HISTORY": False,
    "SHOW_VIEW_ON_SITE": False,
    "COLORS": {
        "primary": {
            "50": "239 246 255",
            "100": "219 234 254",
            "200": "191 219 254",
            "300": "147 197 253",
            "400": "96 165 250",
            "500": "59 130 246",
            "600": "37 99 235",
            "700": "29 78 216",
            "800": "30 64 175",
            "900": "30 58 138",
            "950": "23 37 84",
        },
    },
    "SIDEBAR": {
        "show_search": True,
        "show_all_applications": False,
        "navigation": [
            {
                "title": _("Dashboard"),
                "separator": False,
                "items": [
                    {
                        "title": _("Dashboard"),
                        "icon": "home",
                        "link": reverse_lazy("admin:index"),
                    },
                ],
            },
            {
                "title": _("Users"),
                "separator": True,
                "collapsible": True,
                "items": [
                    {
                        "title": _("Nominators"),
                        "icon": "person",
                        "link": reverse_lazy("admin:accounts_nominatoruser_changelist"),
                    },
                ],
            },
            {
                "title": _("Nominations"),
                "separator": True,
                "collapsible": True,
                "items": [
                    {
                        "title": _("Form configurations"),
                        "icon": "dynamic_form",
                        "link": reverse_lazy("admin:nominations_formconfiguration_changelist"),
                    },
                    {
                        "title": _("Drafts"),
                        "icon": "edit_note",
                        "link": reverse_lazy("admin:nominations_draft_changelist"),
                    },
                    {
                        "title": _("Submissions"),
                        "icon": "inbox",
                        "link": reverse_lazy("admin:nominations_submission_changelist"),
                    },
                ],
            },
        ],
    },
}
