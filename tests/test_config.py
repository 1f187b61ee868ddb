"""Tests for settings fallbacks."""

from pathlib import Path

from etims_worker.config import (
    DEFAULT_DEVICE_INIT_ENDPOINT,
    DEFAULT_STATUS_ENDPOINT,
    DEFAULT_SUBMIT_ENDPOINT,
    Settings,
)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.request_timeout_seconds == 30.0
    assert settings.output_directory == Path("./generated-invoices")
    assert not settings.has_credentials


def test_blank_endpoints_fall_back():
    settings = Settings(
        _env_file=None,
        invoice_submit_endpoint="",
        invoice_status_endpoint="  ",
        device_init_endpoint="",
    )

    assert settings.submit_path == DEFAULT_SUBMIT_ENDPOINT
    assert settings.status_path == DEFAULT_STATUS_ENDPOINT
    assert settings.device_init_path == DEFAULT_DEVICE_INIT_ENDPOINT


def test_legacy_base_url_is_normalized():
    settings = Settings(_env_file=None, base_url="https://etims-sbx.kra.go.ke/API/")

    assert settings.normalized_base_url == "https://etims-sbx.kra.go.ke"
    assert settings.has_legacy_base_url


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("KRA_ETIMS_BASE_URL", "https://etims-api.kra.go.ke")
    monkeypatch.setenv("KRA_ETIMS_API_USERNAME", "user")
    monkeypatch.setenv("KRA_ETIMS_API_PASSWORD", "secret")

    settings = Settings(_env_file=None)

    assert settings.normalized_base_url == "https://etims-api.kra.go.ke"
    assert not settings.has_legacy_base_url
    assert settings.has_credentials
