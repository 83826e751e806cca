"""Main API router."""

from fastapi import APIRouter

from push_relay.api.notifications import router as notifications_router
from push_relay.api.tokens import router as tokens_router
from push_relay.api.webhooks import router as webhooks_router

api_router = APIRouter()

api_router.include_router(webhooks_router)
api_router.include_router(notifications_router)
api_router.include_router(tokens_router)
