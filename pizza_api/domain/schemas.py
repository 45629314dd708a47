# pizza_api/domain/schemas.py
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class UserRecord(BaseModel):
    """Stored user, keyed by email."""

    email: str
    firstName: str
    lastName: str
    hashedPassword: str
    streetAddress: str
    cartItemIds: List[str] = Field(default_factory=list)

    def public(self) -> dict:
        """User data without the password digest."""
        return self.model_dump(exclude={"hashedPassword"})


class TokenRecord(BaseModel):
    """Bearer token. ``expires`` is epoch milliseconds."""

    id: str
    email: str
    expires: int


class CartItemRecord(BaseModel):
    """One line in a user's shopping cart."""

    id: str
    email: str
    itemId: int = Field(..., ge=0)
    quantity: int = Field(..., gt=0)


class MenuItem(BaseModel):
    name: str
    description: str = ""
    price: Decimal


class Menu(BaseModel):
    """Read-only catalog, indexed by position."""

    items: List[MenuItem] = Field(default_factory=list)

    def item(self, index: int) -> MenuItem | None:
        if 0 <= index < len(self.items):
            return self.items[index]
        return None


class CartLine(BaseModel):
    """Cart item resolved against the menu (response)."""

    id: str
    email: str
    itemId: int
    name: str
    description: str
    quantity: int
    unitPrice: float
    total: float


class CheckoutRequest(BaseModel):
    """Validated cart and user handed to the settlement gateway."""

    model_config = ConfigDict(frozen=True)

    email: str
    streetAddress: str
    lines: List[CartLine]
    total: float
    currency: str


class SettlementResult(BaseModel):
    """What the settlement gateway reports back."""

    status: str
    reference: str | None = None
    amount: float
    currency: str
