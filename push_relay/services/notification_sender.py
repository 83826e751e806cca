"""Direct and multicast notification senders."""

import copy
import logging
from typing import Any

from push_relay.adapters.fcm import (
    MAX_MULTICAST_TOKENS,
    FCMClient,
    Message,
    MessagingError,
    MulticastMessage,
    Notification,
)
from push_relay.core.exceptions import MessagingProviderError, ValidationError
from push_relay.core.logging import mask_token
from push_relay.schemas.notification import (
    MulticastNotificationResponse,
    NotificationContent,
    SendMulticastNotificationRequest,
    SendNotificationRequest,
    SendNotificationResponse,
)

logger = logging.getLogger(__name__)

ANDROID_COLOR = "#FF4081"


def deep_merge(base: dict[str, Any], overrides: dict[str, Any] | None) -> dict[str, Any]:
    """Return ``base`` with ``overrides`` merged in; nested dicts merge key by key."""
    merged = copy.deepcopy(base)
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def android_config(title: str, body: str, overrides: dict[str, Any] | None = None) -> dict[str, Any]:
    defaults = {
        "priority": "high",
        "notification": {
            "title": title,
            "body": body,
            "color": ANDROID_COLOR,
            "sound": "default",
        },
    }
    return deep_merge(defaults, overrides)


def apns_config(title: str, body: str, overrides: dict[str, Any] | None = None) -> dict[str, Any]:
    defaults = {
        "payload": {
            "aps": {
                "alert": {"title": title, "body": body},
                "sound": "default",
                "badge": 1,
                "content-available": 1,
            }
        }
    }
    return deep_merge(defaults, overrides)


def _require_content(notification: NotificationContent | None) -> Notification:
    if notification is None or not notification.title or not notification.body:
        raise ValidationError("Notification title and body are required", field="notification")
    return Notification(title=notification.title, body=notification.body)


class NotificationSender:
    """Pass-through sends of caller-built notifications."""

    def __init__(self, messaging: FCMClient):
        self.messaging = messaging

    async def send(self, request: SendNotificationRequest) -> SendNotificationResponse:
        """Send one notification to one token."""
        if not request.token:
            raise ValidationError("FCM token is required", field="token")
        notification = _require_content(request.notification)

        message = Message(
            token=request.token,
            notification=notification,
            data=request.data or {},
            android=android_config(notification.title, notification.body, request.android),
            apns=apns_config(notification.title, notification.body, request.apns),
        )

        logger.info(
            f"Sending notification '{notification.title}' to {mask_token(request.token)}"
        )
        try:
            message_id = await self.messaging.send(message)
        except MessagingError as e:
            logger.error(f"Error sending notification: {e}")
            raise MessagingProviderError(e.message, provider_code=e.code) from e

        logger.info(f"Notification sent successfully: {message_id}")
        return SendNotificationResponse(message_id=message_id)

    async def send_multicast(
        self, request: SendMulticastNotificationRequest
    ) -> MulticastNotificationResponse:
        """Send one notification to each of up to 500 tokens."""
        if not request.tokens:
            raise ValidationError("Array of FCM tokens is required", field="tokens")
        if len(request.tokens) > MAX_MULTICAST_TOKENS:
            raise ValidationError(
                f"At most {MAX_MULTICAST_TOKENS} FCM tokens are allowed per request",
                field="tokens",
            )
        notification = _require_content(request.notification)

        multicast = MulticastMessage(
            tokens=request.tokens,
            notification=notification,
            data=request.data or {},
            android=android_config(notification.title, notification.body, request.android),
            apns=apns_config(notification.title, notification.body, request.apns),
        )

        logger.info(
            f"Sending multicast notification '{notification.title}' "
            f"to {len(request.tokens)} devices"
        )
        batch = await self.messaging.send_each_for_multicast(multicast)
        logger.info(
            f"Multicast notification sent: success={batch.success_count} "
            f"failure={batch.failure_count}"
        )

        return MulticastNotificationResponse(
            success_count=batch.success_count,
            failure_count=batch.failure_count,
            responses=[r.to_dict() for r in batch.responses],
        )
