"""
Application configuration loaded from environment variables.

Endpoint paths fall back to the common OSCU paths when left blank, so a
sandbox can be reached with nothing but a base URL and credentials.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SUBMIT_ENDPOINT = "/api/oscu/invoice/submit"
DEFAULT_STATUS_ENDPOINT = "/api/oscu/invoice/status"
DEFAULT_DEVICE_INIT_ENDPOINT = "/api/oscu/device/init"


class Settings(BaseSettings):
    """
    KRA eTIMS settings.

    Every field is read from an environment variable with the
    ``KRA_ETIMS_`` prefix (e.g. ``KRA_ETIMS_BASE_URL``).
    Use .env file for local development.
    """

    model_config = SettingsConfigDict(
        env_prefix="KRA_ETIMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # KRA API
    base_url: str = Field(
        default="",
        description="KRA eTIMS base URL, e.g. https://etims-api-sbx.kra.go.ke"
    )
    api_username: str = Field(default="", description="Basic auth username")
    api_password: str = Field(default="", description="Basic auth password")
    pin: str = Field(default="", description="Taxpayer PIN registered with KRA")
    device_serial_number: str | None = Field(
        default=None,
        description="OSCU/VSCU device serial number"
    )

    # Endpoint paths (issued by KRA after sandbox registration)
    invoice_submit_endpoint: str = Field(default=DEFAULT_SUBMIT_ENDPOINT)
    invoice_status_endpoint: str = Field(
        default=DEFAULT_STATUS_ENDPOINT,
        description="May contain an {invoiceNumber} placeholder"
    )
    device_init_endpoint: str = Field(default=DEFAULT_DEVICE_INIT_ENDPOINT)

    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Connect/read timeout for calls to KRA"
    )

    # Storage
    output_directory: Path = Field(
        default=Path("./generated-invoices"),
        description="Directory for request/response JSON and QR images"
    )

    # Server
    debug: bool = Field(
        default=False,
        description="Enable debug mode with detailed error messages"
    )

    @property
    def normalized_base_url(self) -> str:
        """Base URL without the deprecated trailing ``/api`` segment."""
        base_url = self.base_url.rstrip("/")
        if base_url.lower().endswith("/api"):
            return base_url[:-4]
        return base_url

    @property
    def has_legacy_base_url(self) -> bool:
        return self.normalized_base_url != self.base_url.rstrip("/")

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_username) and bool(self.api_password)

    @property
    def submit_path(self) -> str:
        return self.invoice_submit_endpoint.strip() or DEFAULT_SUBMIT_ENDPOINT

    @property
    def status_path(self) -> str:
        return self.invoice_status_endpoint.strip() or DEFAULT_STATUS_ENDPOINT

    @property
    def device_init_path(self) -> str:
        return self.device_init_endpoint.strip() or DEFAULT_DEVICE_INIT_ENDPOINT


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once at startup and cached for subsequent calls.
    """
    return Settings()
