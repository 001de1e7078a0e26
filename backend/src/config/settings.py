"""
Application settings configuration for DailyPulse.

Centralized settings loaded from environment variables.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ICON_PATH = "/icons/icon-192x192.png"
REPORT_DETAIL_PATH = "/dashboard/reports"


class AppSettings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment Variables:
        APP_BASE_URL: Public URL of the dashboard, used for notification deep links
        NOTIFICATION_ICON_URL: Icon shown on push notifications
            (default: {APP_BASE_URL}/icons/icon-192x192.png)
        FIREBASE_CREDENTIALS_PATH: Service-account JSON file for Firebase Admin
            (default: "" = application default credentials)
        FIREBASE_PROJECT_ID: Optional Firebase project override
        PUSH_DRY_RUN: Validate multicast sends without delivering (default: False)
        PUSH_PRUNE_INVALID_TOKENS: Delete tokens reported as unregistered (default: True)
        JWT_SECRET_KEY: Secret key for signing access tokens
        JWT_TOKEN_EXPIRY_HOURS: Access token lifetime in hours (default: 12)
        EVENT_WEBHOOK_SECRET: Shared secret for the report-created webhook
            (default: "" = webhook disabled)
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Link targets embedded in push payloads
    app_base_url: str = Field(
        default="http://localhost:3000",
        validation_alias="APP_BASE_URL",
        description="Public dashboard URL used to build notification deep links"
    )

    notification_icon_url: str = Field(
        default="",
        validation_alias="NOTIFICATION_ICON_URL",
        description="Absolute icon URL for push notifications. Empty = derived from APP_BASE_URL."
    )

    # Firebase Cloud Messaging
    firebase_credentials_path: str = Field(
        default="",
        validation_alias="FIREBASE_CREDENTIALS_PATH",
        description="Path to a Firebase service-account JSON file"
    )

    firebase_project_id: str = Field(
        default="",
        validation_alias="FIREBASE_PROJECT_ID",
    )

    push_dry_run: bool = Field(
        default=False,
        validation_alias="PUSH_DRY_RUN",
        description="If True, FCM validates the multicast message without delivering it"
    )

    push_prune_invalid_tokens: bool = Field(
        default=True,
        validation_alias="PUSH_PRUNE_INVALID_TOKENS",
    )

    # Access tokens
    jwt_secret_key: str = Field(
        default="",
        validation_alias="JWT_SECRET_KEY",
        description="Secret key for signing access tokens. Must be at least 32 bytes."
    )

    jwt_token_expiry_hours: int = Field(
        default=12,
        validation_alias="JWT_TOKEN_EXPIRY_HOURS",
        ge=1,
        le=720,
    )

    # Report-created webhook for external event sources (queues, triggers)
    event_webhook_secret: str = Field(
        default="",
        validation_alias="EVENT_WEBHOOK_SECRET",
    )

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret_key(cls, v: str) -> str:
        """Validate that JWT secret key is sufficiently long."""
        if v and len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator("app_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def icon_url(self) -> str:
        """Icon reference for push payloads."""
        return self.notification_icon_url or f"{self.app_base_url}{DEFAULT_ICON_PATH}"

    @property
    def firebase_configured(self) -> bool:
        """Check if explicit Firebase credentials are configured."""
        return bool(self.firebase_credentials_path)

    @property
    def jwt_configured(self) -> bool:
        """Check if JWT is properly configured."""
        return bool(self.jwt_secret_key)

    @property
    def webhook_configured(self) -> bool:
        return bool(self.event_webhook_secret)

    def report_link(self, report_id: str) -> str:
        """
        Build the deep link to a report's detail view.

        Args:
            report_id: Report GUID (rpt_xxx)

        Returns:
            Absolute URL, e.g. https://host/dashboard/reports?view=rpt_xxx
        """
        return f"{self.app_base_url}{REPORT_DETAIL_PATH}?view={report_id}"


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get cached application settings instance.

    Returns:
        AppSettings: Configured application settings from environment
    """
    return AppSettings()
