from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CreatedAtMixin, TimestampMixin


class Customer(TimestampMixin, Base):
    """A Shopify customer that has registered at least one device."""

    __tablename__ = "customer"

    id: Mapped[int] = mapped_column(primary_key=True)
    shopify_customer_id: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False, index=True
    )

    push_tokens: Mapped[list["PushToken"]] = relationship(
        back_populates="customer", cascade="all, delete-orphan"
    )


class PushToken(CreatedAtMixin, Base):
    """One FCM registration token of a customer; unique per customer."""

    __tablename__ = "push_token"
    __table_args__ = (
        UniqueConstraint("customer_id", "token", name="uq_push_token_customer_token"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customer.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token: Mapped[str] = mapped_column(String(512), nullable=False)

    customer: Mapped["Customer"] = relationship(back_populates="push_tokens")
