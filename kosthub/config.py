"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="Asia/Jakarta",
        description="Timezone used to decide which calendar day it is",
    )
    scheduler_enabled: bool = Field(
        default=True,
        description="Start the reminder and heartbeat jobs together with the API",
    )
    reminder_hour: int = Field(default=9, ge=0, le=23)
    reminder_minute: int = Field(default=0, ge=0, le=59)
    heartbeat_interval_seconds: int = Field(
        default=30,
        description="Seconds between keepalive frames sent to live connections",
        gt=0,
    )
    reminder_short_month_policy: Literal["skip", "last_day"] = Field(
        default="skip",
        description=(
            "What to do when a tenant's due day does not exist in the current month: "
            "'skip' sends nothing that month, 'last_day' fires on the month's last day"
        ),
    )
    approval_requires_room_price: bool = Field(
        default=False,
        description="Refuse to approve receipts whose amount differs from the room price",
    )
    receipt_max_bytes: int = Field(
        default=5 * 1024 * 1024,
        description="Maximum accepted size for uploaded receipt images",
        gt=0,
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending notification emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of notification emails",
        min_length=3,
    )
    azure_storage_connection_string: str | None = Field(
        default=None,
        description="Connection string of the blob storage account holding receipt images",
    )
    azure_storage_container_name: str | None = Field(
        default=None,
        description="Blob container where receipt images are stored",
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    @property
    def email_enabled(self) -> bool:
        return bool(self.sendgrid_api_key and self.sendgrid_sender)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
