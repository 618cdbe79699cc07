"""Tests for configuration defaults and environment overrides."""

import pytest

from passentry.config import Config, EntrySettings

REQUIRED = {
    "database_url": "mongodb://localhost:27017/passentry",
    "site_url": "https://example.com",
    "public_url": "https://auth.example.com/",
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PASSENTRY_ENTRY__EXPIRATION_MINUTES", "PASSENTRY_ENTRY__ENABLED", "PASSENTRY_SMTP__HOST"):
        monkeypatch.delenv(name, raising=False)


class TestEntrySettings:
    def test_defaults(self):
        settings = EntrySettings()
        assert settings.enabled is True
        assert settings.expiration_minutes == 5
        assert settings.key_length == 64
        assert settings.controller_parameter == "ple"
        assert settings.key_parameter == "ple_key"
        assert settings.email_parameter == "ple_email"

    def test_rejects_short_keys(self):
        with pytest.raises(ValueError):
            EntrySettings(key_length=8)


class TestConfig:
    def test_entry_base_url(self):
        config = Config(**REQUIRED)
        assert config.entry_base_url == "https://auth.example.com/entry"

    def test_smtp_optional(self):
        assert Config(**REQUIRED).smtp is None

    def test_nested_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PASSENTRY_ENTRY__EXPIRATION_MINUTES", "10")
        monkeypatch.setenv("PASSENTRY_ENTRY__ENABLED", "false")
        config = Config(**REQUIRED)
        assert config.entry.expiration_minutes == 10
        assert config.entry.enabled is False
        assert config.entry.key_length == 64

    def test_smtp_from_env(self, monkeypatch):
        monkeypatch.setenv("PASSENTRY_SMTP__HOST", "smtp.example.com")
        monkeypatch.setenv("PASSENTRY_SMTP__FROM_EMAIL", "noreply@example.com")
        config = Config(**REQUIRED)
        assert config.smtp is not None
        assert config.smtp.host == "smtp.example.com"
        assert config.smtp.port == 587
