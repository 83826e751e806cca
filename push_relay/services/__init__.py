from .notification_sender import NotificationSender
from .order_notifications import OrderNotificationService
from .token_registry import TokenRegistry, normalize_customer_id

__all__ = [
    "NotificationSender",
    "OrderNotificationService",
    "TokenRegistry",
    "normalize_customer_id",
]
