from nominations.tests.conftest import form_config, form_config_data  # noqa: F401
