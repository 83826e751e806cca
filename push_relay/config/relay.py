"""Relay service configuration."""
from functools import lru_cache

from pydantic import AliasChoices, Field

from .database import DatabaseConfig


class RelaySettings(DatabaseConfig):
    """Configuration for the Push Relay service."""

    # Service Info
    SERVICE_NAME: str = Field(default="push-relay")
    VERSION: str = Field(default="0.1.0")
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "EXPO_PUBLIC_PORT"),
    )

    # Shopify
    SHOPIFY_WEBHOOK_SECRET: str = Field(
        default="",
        validation_alias=AliasChoices(
            "SHOPIFY_WEBHOOK_SECRET", "EXPO_PUBLIC_SHOPIFY_SECRET"
        ),
        description="Shared secret used to sign Shopify webhooks",
    )

    # Firebase Cloud Messaging
    FIREBASE_CREDENTIALS_PATH: str = Field(
        default="serviceAccountKey.json",
        validation_alias=AliasChoices(
            "FIREBASE_CREDENTIALS_PATH", "GOOGLE_APPLICATION_CREDENTIALS"
        ),
        description="Path to the Firebase service account JSON key",
    )
    FIREBASE_PROJECT_ID: str | None = Field(
        default=None,
        description="Firebase project id; defaults to the service account's project",
    )
    FCM_TIMEOUT: float = Field(
        default=10.0, ge=1.0, le=120.0, description="FCM request timeout in seconds"
    )
    FCM_MAX_RETRIES: int = Field(
        default=3, ge=1, le=10, description="Attempts per message on transient FCM errors"
    )

    # Deep links
    WELL_KNOWN_DIR: str = Field(
        default=".well-known",
        description="Directory served at /.well-known (assetlinks.json, apple-app-site-association)",
    )

    @property
    def webhook_secret_configured(self) -> bool:
        """Whether a Shopify signing secret is available."""
        return bool(self.SHOPIFY_WEBHOOK_SECRET)


@lru_cache
def get_settings() -> RelaySettings:
    """Get the cached settings instance."""
    return RelaySettings()
