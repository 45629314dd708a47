from decimal import Decimal

from pizza_api.domain.errors import (
    AuthError,
    ConflictError,
    ConsistencyError,
    DomainError,
    NotFoundError,
    RecordExistsError,
    RecordNotFoundError,
    ValidationError,
)
from pizza_api.domain.schemas import CartItemRecord, CartLine, Menu, MenuItem
from pizza_api.repos.cart_repo import CartRepo
from pizza_api.repos.menu_repo import MenuRepo
from pizza_api.repos.user_repo import UserRepo
from pizza_api.services.credential_service import CredentialService, create_random_string
from pizza_api.utils.logging import get_logger
from pizza_api.utils.settings import Settings

logger = get_logger(__name__)

CENT = Decimal("0.01")


def build_line(item: CartItemRecord, menu_item: MenuItem) -> CartLine:
    total = (menu_item.price * item.quantity).quantize(CENT)
    return CartLine(
        id=item.id,
        email=item.email,
        itemId=item.itemId,
        name=menu_item.name,
        description=menu_item.description,
        quantity=item.quantity,
        unitPrice=float(menu_item.price),
        total=float(total),
    )


def load_menu(menus: MenuRepo) -> Menu:
    try:
        return menus.get_menu()
    except RecordNotFoundError:
        raise NotFoundError("The menu is not available.")


class CartService:
    """
    Shopping cart use cases.

    A cart item lives in the ``cart`` collection and its id is also listed on
    the owning user's ``cartItemIds``. Adding and removing write both records
    one after the other with no rollback; if the second write fails the
    caller gets a ConsistencyError and the records stay out of sync.
    """

    def __init__(
        self,
        carts: CartRepo,
        users: UserRepo,
        menus: MenuRepo,
        credentials: CredentialService,
        settings: Settings,
    ):
        self.carts = carts
        self.users = users
        self.menus = menus
        self.credentials = credentials
        self.max_cart_items = settings.max_cart_items

    #query
    def get_item(self, cart_id: str, token_id) -> CartLine:
        item = self._load(cart_id)
        self._authorize(item.email, token_id)

        menu_item = load_menu(self.menus).item(item.itemId)
        if menu_item is None:
            raise NotFoundError("The menu item in this cart no longer exists.")
        return build_line(item, menu_item)

    #commands
    def add_item(self, email: str, token_id, item_id: int, quantity: int) -> CartItemRecord:
        self._authorize(email, token_id)
        try:
            user = self.users.get_user(email)
        except RecordNotFoundError:
            # token outlived its user
            raise AuthError()

        if load_menu(self.menus).item(item_id) is None:
            raise ValidationError("The specified menu item does not exist.")

        if len(user.cartItemIds) >= self.max_cart_items:
            raise ConflictError(
                f"Maximum number of cart items reached ({self.max_cart_items}). "
                "Checkout or delete them to add items."
            )

        item = CartItemRecord(id=create_random_string(), email=email, itemId=item_id, quantity=quantity)
        try:
            self.carts.add_cart_item(item)
        except RecordExistsError:
            logger.error(f"Cart id collision on {item.id}")
            raise ConflictError("Could not create new cart item.")

        user.cartItemIds.append(item.id)
        try:
            self.users.update_user(user)
        except DomainError as e:
            logger.error(f"Cart item {item.id} created but user {email} not updated: {e}")
            raise ConsistencyError("Could not update user with the new cart item.")

        logger.info(f"Added cart item {item.id} (menu item {item_id} x{quantity}) for {email}")
        return item

    def update_item(self, cart_id: str, token_id, quantity: int) -> bool:
        """Returns False when the quantity is already the requested one."""
        item = self._load(cart_id)
        self._authorize(item.email, token_id)

        if item.quantity == quantity:
            return False

        item.quantity = quantity
        try:
            self.carts.update_cart_item(item)
        except RecordNotFoundError:
            raise NotFoundError("Cart ID does not exist.")
        logger.info(f"Cart item {cart_id} quantity set to {quantity}")
        return True

    def remove_item(self, cart_id: str, token_id) -> None:
        item = self._load(cart_id)
        self._authorize(item.email, token_id)

        try:
            self.carts.delete_cart_item(cart_id)
        except RecordNotFoundError:
            raise NotFoundError("Cart ID does not exist.")

        try:
            user = self.users.get_user(item.email)
        except DomainError as e:
            logger.error(f"Cart item {cart_id} deleted but owner {item.email} not readable: {e}")
            raise ConsistencyError(
                "Could not find the user who created the cart, so could not remove the cart data on the user object."
            )

        if cart_id not in user.cartItemIds:
            logger.error(f"Cart item {cart_id} missing from cartItemIds of {item.email}")
            raise ConsistencyError(
                "Could not find the cart data on the user's object, so could not remove it."
            )

        user.cartItemIds.remove(cart_id)
        try:
            self.users.update_user(user)
        except DomainError as e:
            logger.error(f"Cart item {cart_id} deleted but user {item.email} not updated: {e}")
            raise ConsistencyError("Could not update the user.")

        logger.info(f"Removed cart item {cart_id} for {item.email}")

    def _authorize(self, email: str, token_id) -> None:
        if not self.credentials.verify(token_id, email):
            raise AuthError()

    def _load(self, cart_id: str) -> CartItemRecord:
        try:
            return self.carts.get_cart_item(cart_id)
        except RecordNotFoundError:
            raise NotFoundError("Cart ID does not exist.")
