"""Common dependencies for the application."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from push_relay.adapters.fcm import FCMClient
from push_relay.core.exceptions import ConfigurationError
from push_relay.database.connection import get_db_session
from push_relay.services.notification_sender import NotificationSender
from push_relay.services.order_notifications import OrderNotificationService
from push_relay.services.token_registry import TokenRegistry


def get_optional_messaging_client(request: Request) -> FCMClient | None:
    """Get the FCM client created at startup, or None without credentials."""
    return getattr(request.app.state, "messaging", None)


def get_messaging_client(
    messaging: FCMClient | None = Depends(get_optional_messaging_client),
) -> FCMClient:
    """Get the FCM client; sending routes fail when it is not configured."""
    if messaging is None:
        raise ConfigurationError("Messaging client is not configured")
    return messaging


def get_token_registry(db: Session = Depends(get_db_session)) -> TokenRegistry:
    """Get token registry bound to the request's database session."""
    return TokenRegistry(db)


def get_notification_sender(
    messaging: FCMClient = Depends(get_messaging_client),
) -> NotificationSender:
    """Get notification sender instance."""
    return NotificationSender(messaging)


def get_order_notification_service(
    registry: TokenRegistry = Depends(get_token_registry),
    messaging: FCMClient | None = Depends(get_optional_messaging_client),
) -> OrderNotificationService:
    """Get order notification service; messaging is checked once there is someone to notify."""
    return OrderNotificationService(registry, messaging)
