from decimal import Decimal
from typing import Protocol

from pizza_api.domain.errors import (
    AuthError,
    ConsistencyError,
    RecordNotFoundError,
    ServiceUnavailableError,
    ValidationError,
)
from pizza_api.domain.schemas import CheckoutRequest, SettlementResult
from pizza_api.repos.cart_repo import CartRepo
from pizza_api.repos.menu_repo import MenuRepo
from pizza_api.repos.user_repo import UserRepo
from pizza_api.services.cart_service import build_line, load_menu
from pizza_api.services.credential_service import CredentialService
from pizza_api.utils.logging import get_logger
from pizza_api.utils.settings import Settings

logger = get_logger(__name__)


class SettlementGateway(Protocol):
    def settle(self, request: CheckoutRequest) -> SettlementResult: ...


class CheckoutService:
    """
    Prices the user's cart against the menu and hands it to the settlement
    gateway. The cart is left as it is afterwards.
    """

    def __init__(
        self,
        users: UserRepo,
        carts: CartRepo,
        menus: MenuRepo,
        credentials: CredentialService,
        settings: Settings,
        gateway: SettlementGateway | None = None,
    ):
        self.users = users
        self.carts = carts
        self.menus = menus
        self.credentials = credentials
        self.currency = settings.currency
        self.gateway = gateway

    def checkout(self, email: str, token_id) -> dict:
        if not self.credentials.verify(token_id, email):
            raise AuthError()
        try:
            user = self.users.get_user(email)
        except RecordNotFoundError:
            raise AuthError()

        if not user.cartItemIds:
            raise ValidationError("The shopping cart is empty.")

        menu = load_menu(self.menus)
        lines = []
        for cart_id in user.cartItemIds:
            try:
                item = self.carts.get_cart_item(cart_id)
            except RecordNotFoundError:
                logger.error(f"User {email} lists missing cart item {cart_id}")
                raise ConsistencyError("The shopping cart references a missing cart item.")
            menu_item = menu.item(item.itemId)
            if menu_item is None:
                raise ValidationError(f"Cart item {cart_id} refers to a menu item that no longer exists.")
            lines.append(build_line(item, menu_item))

        total = sum((Decimal(str(line.total)) for line in lines), Decimal("0.00"))
        request = CheckoutRequest(
            email=email,
            streetAddress=user.streetAddress,
            lines=lines,
            total=float(total),
            currency=self.currency,
        )

        if self.gateway is None:
            raise ServiceUnavailableError("Checkout is not available.")

        logger.info(f"Checking out {len(lines)} item(s) for {email}, total {request.total}")
        result = self.gateway.settle(request)
        return {
            "email": email,
            "items": [line.model_dump() for line in lines],
            "total": request.total,
            "settlement": result.model_dump(),
        }
