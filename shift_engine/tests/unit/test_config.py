"""Unit tests for shift_engine.config."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shift_engine.config import Settings, ShiftEnv, load_settings

# ---------------------------------------------------------------------------
# Settings - default values
# ---------------------------------------------------------------------------


class TestSettingsDefaults:
    def test_default_env(self):
        assert Settings().env == ShiftEnv.DEV

    def test_default_debug(self):
        assert Settings().debug is False

    def test_default_logging(self):
        settings = Settings()
        assert settings.log_level == "INFO"
        assert settings.structured_logging is False

    def test_default_report_extras(self):
        assert Settings().report_extras is False

    def test_default_ddl_options(self):
        settings = Settings()
        assert settings.default_schema == "dbo"
        assert settings.foreign_keys_with_nocheck is True


# ---------------------------------------------------------------------------
# Environment variable overrides
# ---------------------------------------------------------------------------


class TestSettingsEnvOverrides:
    def test_env_var_overrides_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SHIFT_ENV", "prod")
        assert Settings().env == ShiftEnv.PROD

    def test_env_var_overrides_debug(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SHIFT_DEBUG", "true")
        assert Settings().debug is True

    def test_env_var_overrides_report_extras(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SHIFT_REPORT_EXTRAS", "1")
        assert Settings().report_extras is True

    def test_env_var_overrides_schema(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SHIFT_DEFAULT_SCHEMA", "sales")
        assert Settings().default_schema == "sales"

    def test_env_var_case_insensitive(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("shift_log_level", "debug")
        assert Settings().log_level == "DEBUG"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestSettingsValidation:
    def test_log_level_normalized(self):
        assert Settings(log_level=" warning ").log_level == "WARNING"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError, match="Unknown log level"):
            Settings(log_level="chatty")

    def test_empty_schema_rejected(self):
        with pytest.raises(ValidationError):
            Settings(default_schema="  ")

    def test_schema_stripped(self):
        assert Settings(default_schema=" sales ").default_schema == "sales"

    def test_invalid_env_rejected(self):
        with pytest.raises(ValidationError):
            Settings(env="qa")


# ---------------------------------------------------------------------------
# load_settings
# ---------------------------------------------------------------------------


class TestLoadSettings:
    def test_overrides(self):
        settings = load_settings(report_extras=True, default_schema="hr")
        assert settings.report_extras is True
        assert settings.default_schema == "hr"

    def test_defaults(self):
        assert load_settings().env == ShiftEnv.DEV

    def test_debug_override_enables_debug(self):
        assert load_settings(debug=True).debug is True
