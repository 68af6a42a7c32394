"""ASGI config for the awards project."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "awards.settings")

application = get_asgi_application()
