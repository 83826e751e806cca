from .fcm import (
    BatchResponse,
    FCMClient,
    Message,
    MessagingError,
    MulticastMessage,
    Notification,
    SendResponse,
)

__all__ = [
    "FCMClient",
    "Message",
    "MulticastMessage",
    "Notification",
    "SendResponse",
    "BatchResponse",
    "MessagingError",
]
