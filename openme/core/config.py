"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

Most variable names match the ones the Open Me deployment already uses
(``CMS_ADMIN_TOKEN``, ``SMTP_HOST``, ``OPEN_ME_FIREBASE_PROJECT_ID``...), so
several groups are unprefixed and rely on explicit aliases.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log output: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated log files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client rate limiting on write endpoints",
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )
    letter_update_requests: int = Field(
        10,
        description="Maximum letter-update requests per window and client",
        ge=1,
    )
    letter_update_window_seconds: float = Field(
        60.0, description="letter-update window in seconds", gt=0
    )
    emergency_notify_requests: int = Field(
        3,
        description="Maximum emergency-notify requests per window and client",
        ge=1,
    )
    emergency_notify_window_seconds: float = Field(
        60.0, description="emergency-notify window in seconds", gt=0
    )
    telemetry_requests: int = Field(
        60,
        description="Maximum letter-open / read-receipt requests per window and client",
        ge=1,
    )
    telemetry_window_seconds: float = Field(
        60.0, description="letter-open / read-receipt window in seconds", gt=0
    )
    unlock_evaluator_requests: int = Field(
        60,
        description="Maximum unlock-evaluator requests per window and client",
        ge=1,
    )
    unlock_evaluator_window_seconds: float = Field(
        60.0, description="unlock-evaluator window in seconds", gt=0
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class SecuritySettings(BaseSettings):
    """CORS allow-list and CMS credentials."""

    allowed_origins: str | None = Field(
        None,
        description="Comma-separated list of origins allowed to call the API",
        validation_alias=AliasChoices("OPEN_ME_ALLOWED_ORIGINS", "ALLOWED_ORIGINS"),
    )
    cms_admin_token: str | None = Field(
        None,
        description="Shared secret required in X-Admin-Token for CMS writes",
        validation_alias=AliasChoices("CMS_ADMIN_TOKEN"),
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        populate_by_name=True,
    )


class EmailSettings(BaseSettings):
    """Emergency notification delivery configuration.

    Gmail API credentials take precedence; SMTP is used only when every
    SMTP value is present.
    """

    emergency_recipient_email: str | None = Field(
        None,
        validation_alias=AliasChoices("EMERGENCY_RECIPIENT_EMAIL"),
    )
    gmail_oauth_access_token: str | None = Field(
        None,
        validation_alias=AliasChoices("GMAIL_OAUTH_ACCESS_TOKEN"),
    )
    gmail_sender_email: str | None = Field(
        None,
        validation_alias=AliasChoices("GMAIL_SENDER_EMAIL"),
    )
    smtp_host: str | None = Field(None, validation_alias=AliasChoices("SMTP_HOST"))
    smtp_port: int | None = Field(None, validation_alias=AliasChoices("SMTP_PORT"))
    smtp_username: str | None = Field(None, validation_alias=AliasChoices("SMTP_USERNAME"))
    smtp_password: str | None = Field(None, validation_alias=AliasChoices("SMTP_PASSWORD"))
    smtp_from_email: str | None = Field(None, validation_alias=AliasChoices("SMTP_FROM_EMAIL"))
    smtp_secure: bool = Field(
        False,
        description="Use implicit TLS (always on for port 465)",
        validation_alias=AliasChoices("SMTP_SECURE"),
    )
    timeout_seconds: float = Field(
        10.0,
        description="Timeout for a single provider call",
        validation_alias=AliasChoices("EMAIL_TIMEOUT_SECONDS"),
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        populate_by_name=True,
    )

    @property
    def gmail_configured(self) -> bool:
        return bool(self.gmail_oauth_access_token and self.gmail_sender_email)

    @property
    def smtp_configured(self) -> bool:
        return all(
            (
                self.smtp_host,
                self.smtp_port,
                self.smtp_username,
                self.smtp_password,
                self.smtp_from_email,
            )
        )


class FirestoreSettings(BaseSettings):
    """Firestore persistence for letters. Disabled unless fully configured."""

    project_id: str | None = Field(None)
    client_email: str | None = Field(None)
    private_key: str | None = Field(None)
    timeout_seconds: float = Field(
        10.0,
        description="Timeout for a single Firestore call",
    )
    letters_collection: str = Field(
        "open_me_letters",
        validation_alias=AliasChoices("OPEN_ME_FIRESTORE_LETTERS_COLLECTION"),
    )

    model_config = SettingsConfigDict(
        env_prefix="OPEN_ME_FIREBASE_",
        case_sensitive=False,
        populate_by_name=True,
    )

    @property
    def configured(self) -> bool:
        return bool(self.project_id and self.client_email and self.private_key)


def _build_log_settings() -> LogSettings:
    return LogSettings()


def _build_app_settings() -> AppSettings:
    return AppSettings()


def _build_security_settings() -> SecuritySettings:
    return SecuritySettings()


def _build_email_settings() -> EmailSettings:
    return EmailSettings()


def _build_firestore_settings() -> FirestoreSettings:
    return FirestoreSettings()


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if a setting is malformed.

    Environments:
    - development: Local development
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    log: LogSettings = Field(default_factory=_build_log_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    security: SecuritySettings = Field(default_factory=_build_security_settings)
    email: EmailSettings = Field(default_factory=_build_email_settings)
    firestore: FirestoreSettings = Field(default_factory=_build_firestore_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
