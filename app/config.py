"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding=ENV_FILE_ENCODING,
        env_ignore_empty=True,
        extra="ignore",
    )

    database_url: str = Field(
        default="sqlite:///./portfolio.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        default="change-me", description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    admin_email: str = Field(
        default="admin@example.com",
        description="Login of the single dashboard administrator",
    )
    admin_password_hash: str | None = Field(
        default=None,
        description="passlib hash of the administrator password",
    )
    app_timezone: str = Field(
        default="UTC", description="Timezone used to stamp notifications"
    )
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    openai_api_key: str | None = Field(default=None)
    openai_base_url: str | None = Field(default=None)
    openai_model: str = Field(default="gpt-4.1-mini")
    openai_temperature: float = Field(default=0.4, ge=0, le=2)

    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending alert emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of alert messages",
        min_length=3,
    )
    notification_email_recipient: str | None = Field(
        default=None,
        description="Mailbox receiving high importance notification alerts",
    )

    stream_metrics_interval_seconds: float = Field(default=5.0, gt=0)
    stream_keepalive_seconds: float = Field(default=15.0, gt=0)
    metrics_window_seconds: int = Field(default=60, gt=0)
    error_rate_threshold: float = Field(default=5.0, ge=0)
    active_users_threshold: int = Field(default=100, gt=0)
    traffic_spike_factor: float = Field(default=3.0, gt=1)

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
