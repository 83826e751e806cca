from pydantic import BaseModel, ConfigDict


class OrderCustomer(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | str | None = None
    first_name: str | None = None


class ShopifyOrder(BaseModel):
    """The subset of a Shopify ``orders/create`` payload the relay reads."""

    model_config = ConfigDict(extra="allow")

    id: int | str | None = None
    name: str | None = None
    customer: OrderCustomer | None = None

    @property
    def customer_id(self) -> str | None:
        if self.customer is None or self.customer.id in (None, ""):
            return None
        return str(self.customer.id)

    @property
    def customer_name(self) -> str:
        if self.customer is None or not self.customer.first_name:
            return "Customer"
        return self.customer.first_name
