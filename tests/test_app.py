"""
Tests for the application entry point.
"""

import pytest


class TestRegisterApplication:
    @pytest.fixture(autouse=True)
    def _qt(self):
        pytest.importorskip("PyQt6.QtWidgets")

    def test_register_when_called_then_default_settings_use_registered_names(self):
        from PyQt6.QtCore import QSettings

        from minibooklet.app import APPLICATION_NAME, ORGANIZATION_NAME, register_application

        register_application()
        settings = QSettings()
        assert settings.organizationName() == ORGANIZATION_NAME
        assert settings.applicationName() == APPLICATION_NAME
