"""Tests for environment-driven settings."""

import pytest

from app.core.config import Settings


def test_cors_origins_accepts_comma_separated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_CORS_ORIGINS", "https://a.example, https://b.example,")

    settings = Settings(_env_file=None)

    assert settings.cors_origins == ["https://a.example", "https://b.example"]


def test_newsletter_service_is_normalised(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_NEWSLETTER_SERVICE", "  MailChimp ")

    settings = Settings(_env_file=None)

    assert settings.newsletter_service == "mailchimp"
