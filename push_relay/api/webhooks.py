"""Webhook endpoints for Shopify events."""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from push_relay.config.relay import RelaySettings, get_settings
from push_relay.core.dependencies import get_order_notification_service
from push_relay.core.exceptions import RelayException, WebhookSignatureError
from push_relay.core.webhook_security import WebhookValidator
from push_relay.schemas.order import ShopifyOrder
from push_relay.services.order_notifications import OrderNotificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["webhooks"])


async def verified_body(
    request: Request,
    x_shopify_hmac_sha256: Optional[str] = Header(None),
    settings: RelaySettings = Depends(get_settings),
) -> bytes:
    """
    Read the raw request body and check its Shopify signature.

    Runs before any JSON parsing and before the database or messaging
    dependencies are resolved.
    """
    body = await request.body()
    validator = WebhookValidator(settings.SHOPIFY_WEBHOOK_SECRET)
    if not validator.validate_signature(body, x_shopify_hmac_sha256):
        logger.error("Invalid Shopify webhook signature")
        raise WebhookSignatureError()
    return body


@router.post("/order-created")
async def order_created(
    body: bytes = Depends(verified_body),
    service: OrderNotificationService = Depends(get_order_notification_service),
):
    """
    Receive Shopify ``orders/create`` webhooks.

    Notifies the ordering customer's devices and prunes tokens FCM reports
    as no longer valid. Orders that cannot be matched to a device are
    acknowledged with 200.
    """
    try:
        order = ShopifyOrder.model_validate(json.loads(body.decode("utf-8")))
        logger.info(f"Order created: {order.name} (id={order.id})")
        return await service.handle_order_created(order)
    except RelayException:
        raise
    except Exception as e:
        logger.error(f"Error in order-created webhook: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error", "code": "INTERNAL_SERVER_ERROR"},
        )
