"""Direct notification endpoints."""

from fastapi import APIRouter, Depends

from push_relay.core.dependencies import get_notification_sender
from push_relay.schemas.notification import (
    SendMulticastNotificationRequest,
    SendNotificationRequest,
)
from push_relay.services.notification_sender import NotificationSender

router = APIRouter(tags=["notifications"])


@router.post("/send-notification")
async def send_notification(
    request: SendNotificationRequest,
    sender: NotificationSender = Depends(get_notification_sender),
):
    """Send a notification to a single FCM token."""
    response = await sender.send(request)
    return response.model_dump(by_alias=True)


@router.post("/send-multicast-notification")
async def send_multicast_notification(
    request: SendMulticastNotificationRequest,
    sender: NotificationSender = Depends(get_notification_sender),
):
    """Send a notification to several FCM tokens and report per-token results."""
    response = await sender.send_multicast(request)
    return response.model_dump(by_alias=True)
