"""Token registry: Shopify customer id -> set of FCM tokens."""

import logging
from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from push_relay.core.exceptions import DatabaseError, ValidationError
from push_relay.core.logging import mask_token
from push_relay.models import Customer, PushToken
from push_relay.schemas.registration import RegistrationResult

logger = logging.getLogger(__name__)


def normalize_customer_id(raw: str | int | None) -> str:
    """
    Reduce a customer identifier to its final path segment.

    ``"gid://shopify/Customer/42"`` and ``42`` both become ``"42"``.
    """
    if raw is None:
        return ""
    return str(raw).strip().split("/")[-1].strip()


class TokenRegistry:
    """Data access for customer device tokens."""

    def __init__(self, db: Session):
        """Initialize TokenRegistry with database session."""
        self.db = db

    def _get_customer(self, customer_id: str) -> Customer | None:
        return self.db.scalar(
            select(Customer).where(Customer.shopify_customer_id == customer_id)
        )

    async def get_tokens(self, customer_id: str) -> list[str] | None:
        """Return the customer's tokens, or None if the customer never registered."""
        customer = self._get_customer(customer_id)
        if customer is None:
            return None
        return list(
            self.db.scalars(
                select(PushToken.token)
                .where(PushToken.customer_id == customer.id)
                .order_by(PushToken.id)
            )
        )

    async def add_token_if_absent(self, customer_id: str, token: str) -> bool:
        """
        Add ``token`` to an existing customer's set.

        Returns:
            True if the set changed, False if the token was already present
        """
        customer = self._get_customer(customer_id)
        if customer is None:
            raise ValueError(f"Customer {customer_id} is not registered")

        exists = self.db.scalar(
            select(PushToken.id).where(
                PushToken.customer_id == customer.id, PushToken.token == token
            )
        )
        if exists is not None:
            return False

        self.db.add(PushToken(customer_id=customer.id, token=token))
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent registration inserted the same token first
            self.db.rollback()
            return False
        return True

    async def remove_tokens(self, customer_id: str, tokens: Iterable[str]) -> int:
        """Remove the given tokens from a customer's set; returns how many were removed."""
        tokens = [t for t in set(tokens) if t]
        if not tokens:
            return 0

        customer = self._get_customer(customer_id)
        if customer is None:
            return 0

        result = self.db.execute(
            delete(PushToken).where(
                PushToken.customer_id == customer.id, PushToken.token.in_(tokens)
            )
        )
        self.db.commit()
        return result.rowcount or 0

    async def register(self, customer_id: str | int | None, token: str | None) -> RegistrationResult:
        """Register a device token for a customer, creating the record on first use."""
        normalized = normalize_customer_id(customer_id)
        token = (token or "").strip()
        if not normalized or not token:
            raise ValidationError("shopifyCustomerId and token are required")

        try:
            return await self._register(normalized, token)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to register token for customer {normalized}: {e}")
            raise DatabaseError("Failed to register FCM token") from e

    async def _register(self, normalized: str, token: str) -> RegistrationResult:
        if self._get_customer(normalized) is None:
            customer = Customer(shopify_customer_id=normalized)
            customer.push_tokens.append(PushToken(token=token))
            self.db.add(customer)
            try:
                self.db.commit()
            except IntegrityError:
                # Lost a race with another first registration; fall through to set-add
                self.db.rollback()
            else:
                logger.info(
                    f"Created token record for customer {normalized} "
                    f"with token {mask_token(token)}"
                )
                return RegistrationResult.CREATED

        if await self.add_token_if_absent(normalized, token):
            logger.info(f"Added token {mask_token(token)} for customer {normalized}")
            return RegistrationResult.ADDED

        logger.info(f"Token {mask_token(token)} already registered for customer {normalized}")
        return RegistrationResult.DUPLICATE
