from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NotificationContent(BaseModel):
    title: str | None = None
    body: str | None = None


class _NotificationEnvelope(BaseModel):
    """Fields shared by the direct and multicast send requests."""

    model_config = ConfigDict(extra="ignore")

    notification: NotificationContent | None = None
    data: dict[str, Any] | None = None
    android: dict[str, Any] | None = None
    apns: dict[str, Any] | None = None


class SendNotificationRequest(_NotificationEnvelope):
    token: str | None = None


class SendMulticastNotificationRequest(_NotificationEnvelope):
    tokens: list[str] | None = None


class SendNotificationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message_id: str = Field(serialization_alias="messageId")
    message: str = "Notification sent successfully"


class MulticastNotificationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    success_count: int = Field(serialization_alias="successCount")
    failure_count: int = Field(serialization_alias="failureCount")
    responses: list[dict[str, Any]]
    message: str = "Multicast notification sent"
