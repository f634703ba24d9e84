"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from euplatesc.settings import Settings


def test_reads_prefixed_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EUPLATESC_MERCHANT_ID", "44840981234")
    monkeypatch.setenv("EUPLATESC_SECRET_KEY", "00ff")
    monkeypatch.setenv("EUPLATESC_SANDBOX", "true")
    settings = Settings()
    assert settings.merchant_id == "44840981234"
    assert settings.secret_key.get_secret_value() == "00ff"
    assert settings.sandbox is True
    assert settings.is_configured


def test_unconfigured_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EUPLATESC_MERCHANT_ID", raising=False)
    monkeypatch.delenv("EUPLATESC_SECRET_KEY", raising=False)
    assert not Settings().is_configured


def test_secret_key_masked_in_repr() -> None:
    settings = Settings(merchant_id="1", secret_key="00112233")
    assert "00112233" not in repr(settings)
