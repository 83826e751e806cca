"""Webhook security and validation utilities."""

import base64
import binascii
import hashlib
import hmac
import logging
from typing import Optional

from push_relay.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SHOPIFY_HMAC_HEADER = "X-Shopify-Hmac-Sha256"


def compute_signature(payload: bytes, secret: str) -> str:
    """Base64 HMAC-SHA256 of ``payload``, as Shopify puts it in the header."""
    digest = hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def _decode_signature(signature: Optional[str]) -> Optional[bytes]:
    if not signature:
        return None
    try:
        return base64.b64decode(signature.strip(), validate=True)
    except (binascii.Error, ValueError):
        return None


def verify(payload: bytes, signature: Optional[str], secret: Optional[str]) -> bool:
    """
    Check a base64 HMAC-SHA256 webhook signature.

    Args:
        payload: Raw request body bytes, exactly as received
        signature: Value of the signature header
        secret: Shared signing secret

    Returns:
        True only if the decoded signature has the digest's length and
        matches it under a constant-time comparison

    Raises:
        ConfigurationError: If no secret is configured
    """
    if not secret:
        logger.error("Shopify webhook secret is not set")
        raise ConfigurationError("Missing secret")

    provided = _decode_signature(signature)
    if provided is None:
        logger.warning("Missing or malformed webhook signature header")
        return False

    expected = hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).digest()

    if len(provided) != len(expected):
        logger.warning("Invalid webhook signature (length mismatch)")
        return False

    is_valid = hmac.compare_digest(expected, provided)
    if not is_valid:
        logger.warning("Invalid webhook signature")

    return is_valid


class WebhookValidator:
    """Validator for Shopify webhook request signatures."""

    def __init__(self, webhook_secret: Optional[str] = None):
        """
        Initialize webhook validator.

        Args:
            webhook_secret: Secret key for HMAC signature validation.
                           Validation fails closed when it is empty.
        """
        self.webhook_secret = webhook_secret

    def validate_signature(self, payload: bytes, signature: Optional[str]) -> bool:
        """Validate a webhook signature against the configured secret."""
        return verify(payload, signature, self.webhook_secret)
