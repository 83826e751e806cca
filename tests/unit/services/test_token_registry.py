"""Unit tests for the token registry."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from push_relay.core.exceptions import DatabaseError, ValidationError
from push_relay.models import Customer, PushToken
from push_relay.schemas.registration import RegistrationResult
from push_relay.services.token_registry import normalize_customer_id


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("gid://shopify/Customer/42", "42"),
        ("42", "42"),
        (42, "42"),
        ("  gid://shopify/Customer/7 ", "7"),
        ("gid://shopify/Customer/", ""),
        (None, ""),
        ("", ""),
    ],
)
def test_normalize_customer_id(raw, expected):
    assert normalize_customer_id(raw) == expected


@pytest.mark.asyncio
class TestTokenRegistry:
    """Test registration and pruning of device tokens."""

    async def test_first_registration_creates_record(self, registry, db):
        result = await registry.register("gid://shopify/Customer/42", "tokA")

        assert result == RegistrationResult.CREATED
        assert db.query(Customer).filter(Customer.shopify_customer_id == "42").count() == 1
        assert await registry.get_tokens("42") == ["tokA"]

    async def test_duplicate_registration_keeps_set_size(self, registry, db):
        await registry.register("42", "tokA")

        result = await registry.register("gid://shopify/Customer/42", "tokA")

        assert result == RegistrationResult.DUPLICATE
        assert await registry.get_tokens("42") == ["tokA"]
        assert db.query(PushToken).count() == 1

    async def test_two_distinct_tokens_share_one_record(self, registry, db):
        first = await registry.register("gid://shopify/Customer/42", "tokA")
        second = await registry.register("gid://shopify/Customer/42", "tokB")

        assert first == RegistrationResult.CREATED
        assert second == RegistrationResult.ADDED
        assert db.query(Customer).count() == 1
        assert sorted(await registry.get_tokens("42")) == ["tokA", "tokB"]

    async def test_same_token_for_different_customers(self, registry):
        await registry.register("1", "shared")
        result = await registry.register("2", "shared")

        assert result == RegistrationResult.CREATED
        assert await registry.get_tokens("1") == ["shared"]
        assert await registry.get_tokens("2") == ["shared"]

    @pytest.mark.parametrize(
        "customer_id, token",
        [
            (None, "tokA"),
            ("", "tokA"),
            ("gid://shopify/Customer/", "tokA"),
            ("42", None),
            ("42", ""),
            ("42", "   "),
        ],
    )
    async def test_register_rejects_missing_fields(self, registry, db, customer_id, token):
        with pytest.raises(ValidationError) as exc_info:
            await registry.register(customer_id, token)

        assert exc_info.value.status_code == 400
        assert db.query(Customer).count() == 0

    async def test_get_tokens_for_unknown_customer(self, registry):
        assert await registry.get_tokens("does-not-exist") is None

    async def test_add_token_if_absent(self, registry):
        await registry.register("42", "tokA")

        assert await registry.add_token_if_absent("42", "tokB") is True
        assert await registry.add_token_if_absent("42", "tokB") is False
        assert sorted(await registry.get_tokens("42")) == ["tokA", "tokB"]

    async def test_add_token_requires_existing_record(self, registry):
        with pytest.raises(ValueError):
            await registry.add_token_if_absent("42", "tokA")

    async def test_remove_tokens_is_set_difference(self, registry):
        for token in ("tokA", "tokB", "tokC"):
            await registry.register("42", token)

        removed = await registry.remove_tokens("42", ["tokA", "tokC", "unknown"])

        assert removed == 2
        assert await registry.get_tokens("42") == ["tokB"]

    async def test_remove_all_tokens_keeps_record(self, registry, db):
        await registry.register("42", "tokA")

        await registry.remove_tokens("42", ["tokA"])

        assert await registry.get_tokens("42") == []
        assert db.query(Customer).count() == 1

    async def test_remove_tokens_for_unknown_customer(self, registry):
        assert await registry.remove_tokens("404", ["tokA"]) == 0

    async def test_remove_nothing(self, registry):
        await registry.register("42", "tokA")

        assert await registry.remove_tokens("42", []) == 0
        assert await registry.get_tokens("42") == ["tokA"]

    async def test_register_wraps_database_failures(self, registry, db):
        failure = OperationalError("INSERT INTO customer", {}, Exception("database is down"))

        with patch.object(db, "commit", side_effect=failure):
            with pytest.raises(DatabaseError) as exc_info:
                await registry.register("42", "tokA")

        assert exc_info.value.status_code == 500
        assert await registry.get_tokens("42") is None
