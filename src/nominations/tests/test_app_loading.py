"""The project must boot from a fresh interpreter, where app models load before any schema."""

import os
import subprocess
import sys

from django.conf import settings

import nominations.models


def test_django_setup_in_a_fresh_interpreter() -> None:
    env = {**os.environ, "DJANGO_SETTINGS_MODULE": "awards.settings", "PYTHONPATH": str(settings.BASE_DIR)}

    result = subprocess.run(
        [sys.executable, "-c", "import django; django.setup(); import api.api"],
        cwd=settings.BASE_DIR,
        env=env,
        capture_output=True,
        text=True,
        timeout=120,
    )

    assert result.returncode == 0, result.stderr


def test_models_module_does_not_import_schemas() -> None:
    assert "FormConfigSchema" not in vars(nominations.models)
    assert "validate_form_config" not in vars(nominations.models)
