# pizza_api/api/__init__.py
import time
from typing import Callable

from pizza_api.api.dispatcher import Dispatcher
from pizza_api.api.handlers import CartHandler, CheckoutHandler, MenuHandler, TokenHandler, UserHandler, ping
from pizza_api.data.store import DocumentStore
from pizza_api.repos.cart_repo import CartRepo
from pizza_api.repos.menu_repo import MenuRepo
from pizza_api.repos.token_repo import TokenRepo
from pizza_api.repos.user_repo import UserRepo
from pizza_api.services.cart_service import CartService
from pizza_api.services.checkout_service import CheckoutService, SettlementGateway
from pizza_api.services.credential_service import CredentialService
from pizza_api.services.menu_service import MenuService
from pizza_api.services.payment_client import PaymentClient
from pizza_api.services.token_service import TokenService
from pizza_api.services.user_service import UserService
from pizza_api.utils.settings import Settings


def build_dispatcher(
    settings: Settings,
    store: DocumentStore,
    gateway: SettlementGateway | None = None,
    clock: Callable[[], float] = time.time,
) -> Dispatcher:
    users = UserRepo(store)
    carts = CartRepo(store)
    menus = MenuRepo(store)
    credentials = CredentialService(TokenRepo(store), settings, clock=clock)

    if gateway is None and settings.payment_gateway_url:
        gateway = PaymentClient(settings.payment_gateway_url, timeout=settings.payment_timeout)

    routes = {
        "ping": ping,
        "users": UserHandler(UserService(users, carts, credentials)),
        "tokens": TokenHandler(TokenService(users, credentials)),
        "pizzaMenu": MenuHandler(MenuService(menus, credentials)),
        "shoppingCart": CartHandler(CartService(carts, users, menus, credentials, settings)),
        "checkOut": CheckoutHandler(CheckoutService(users, carts, menus, credentials, settings, gateway)),
    }
    return Dispatcher(routes)
