from .notification import (
    MulticastNotificationResponse,
    NotificationContent,
    SendMulticastNotificationRequest,
    SendNotificationRequest,
    SendNotificationResponse,
)
from .order import OrderCustomer, ShopifyOrder
from .registration import RegisterTokenRequest, RegisterTokenResponse, RegistrationResult

__all__ = [
    "NotificationContent",
    "SendNotificationRequest",
    "SendMulticastNotificationRequest",
    "SendNotificationResponse",
    "MulticastNotificationResponse",
    "ShopifyOrder",
    "OrderCustomer",
    "RegisterTokenRequest",
    "RegisterTokenResponse",
    "RegistrationResult",
]
