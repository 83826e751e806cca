"""Device token registration endpoints."""

from fastapi import APIRouter, Depends

from push_relay.core.dependencies import get_token_registry
from push_relay.schemas.registration import RegisterTokenRequest, RegisterTokenResponse
from push_relay.services.token_registry import TokenRegistry

router = APIRouter(tags=["tokens"])


@router.post("/register-fcm-token")
async def register_fcm_token(
    request: RegisterTokenRequest,
    registry: TokenRegistry = Depends(get_token_registry),
):
    """Register an FCM token for a Shopify customer."""
    result = await registry.register(request.shopify_customer_id, request.token)
    return RegisterTokenResponse(result=result).to_body()
