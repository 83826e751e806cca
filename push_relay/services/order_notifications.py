"""Order-created notifications and stale token pruning."""

import logging
from typing import Any, Dict

from push_relay.adapters.fcm import BatchResponse, FCMClient, MulticastMessage, Notification
from push_relay.core.exceptions import ConfigurationError
from push_relay.schemas.order import ShopifyOrder
from push_relay.services.token_registry import TokenRegistry

logger = logging.getLogger(__name__)

# Provider codes meaning the token will never work again
STALE_TOKEN_ERROR_CODES = frozenset(
    {
        "messaging/invalid-registration-token",
        "messaging/registration-token-not-registered",
        "messaging/invalid-argument",
        "messaging/invalid-recipient",
    }
)

ORDERS_SCREEN = "Orders"


def build_order_message(order: ShopifyOrder, tokens: list[str]) -> MulticastMessage:
    """Build the "thank you for your order" multicast message."""
    return MulticastMessage(
        tokens=tokens,
        notification=Notification(
            title=f"Thank you for your order, {order.customer_name}!",
            body=f"Your order {order.name} has been placed successfully.",
        ),
        data={
            "orderId": "" if order.id is None else str(order.id),
            "screen": ORDERS_SCREEN,
        },
        android={"priority": "high", "notification": {"sound": "default"}},
        apns={"payload": {"aps": {"sound": "default", "badge": 1}}},
    )


def stale_tokens(tokens: list[str], batch: BatchResponse) -> list[str]:
    """Tokens whose delivery failed with an error that marks them unusable."""
    stale = []
    for token, response in zip(tokens, batch.responses):
        if not response.success and response.error and response.error.code in STALE_TOKEN_ERROR_CODES:
            logger.info(f"Removing invalid token: {token} - Reason: {response.error.code}")
            stale.append(token)
    return stale


class OrderNotificationService:
    """Notifies a customer's devices when one of their orders is created."""

    def __init__(self, registry: TokenRegistry, messaging: FCMClient | None):
        self.registry = registry
        self.messaging = messaging

    async def handle_order_created(self, order: ShopifyOrder) -> Dict[str, Any]:
        """Process a verified ``orders/create`` payload."""
        customer_id = order.customer_id
        if not customer_id:
            logger.warning("No customer ID in order payload")
            return {"status": "ignored", "message": "No customer ID"}

        registered = await self.registry.get_tokens(customer_id)
        if registered is None:
            logger.warning(f"No user found for customer ID {customer_id}")
            return {"status": "ignored", "message": "No user for this customer"}

        tokens = list(dict.fromkeys(t for t in registered if t))
        if not tokens:
            logger.warning(f"No FCM tokens for user {customer_id}")
            return {"status": "ignored", "message": "No tokens"}

        if self.messaging is None:
            raise ConfigurationError("Messaging client is not configured")

        message = build_order_message(order, tokens)
        logger.info(f"Sending order {order.name} notification to {len(tokens)} devices")
        batch = await self.messaging.send_each_for_multicast(message)

        removed = await self._prune(customer_id, stale_tokens(tokens, batch))

        if batch.failure_count > 0:
            logger.warning(
                f"Some notifications failed to deliver: "
                f"{[r.to_dict() for r in batch.responses if not r.success]}"
            )

        logger.info(f"Order notification sent for customer {customer_id}")
        return {
            "status": "sent",
            "message": "Notification sent",
            "successCount": batch.success_count,
            "failureCount": batch.failure_count,
            "removedTokens": removed,
        }

    async def _prune(self, customer_id: str, tokens: list[str]) -> int:
        if not tokens:
            return 0
        try:
            removed = await self.registry.remove_tokens(customer_id, tokens)
        except Exception as e:
            # Bookkeeping only; the notification outcome stands either way
            logger.error(f"Failed to remove invalid tokens for {customer_id}: {e}", exc_info=True)
            return 0
        logger.info(f"Removed invalid tokens from DB: {tokens}")
        return removed
