"""WSGI config for the awards project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "awards.settings")

application = get_wsgi_application()
