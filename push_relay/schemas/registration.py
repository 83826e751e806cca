from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RegistrationResult(str, Enum):
    CREATED = "created"
    ADDED = "added"
    DUPLICATE = "duplicate"


class RegisterTokenRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    shopify_customer_id: str | int | None = Field(
        default=None, validation_alias="shopifyCustomerID"
    )
    token: str | None = None


class RegisterTokenResponse(BaseModel):
    success: bool = True
    result: RegistrationResult

    def to_body(self) -> dict[str, bool]:
        """Wire format: ``{"success": true, "<result>": true}``."""
        return {"success": self.success, self.result.value: True}
