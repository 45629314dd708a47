# pizza_api/api/handlers.py
"""
Resource handlers.

Each handler maps the request method onto one of the four operations,
validates the request fields, calls its service and returns a
``HandlerResult``. Invalid input is rejected here, before any store access.
"""
from pizza_api.api.dispatcher import HandlerResult, Operation, RequestContext
from pizza_api.domain.errors import DomainError, MethodNotAllowedError, ServiceUnavailableError, ValidationError
from pizza_api.domain.validators import (
    verify_email,
    verify_flag,
    verify_id,
    verify_item_id,
    verify_name,
    verify_password,
    verify_quantity,
    verify_street_address,
)
from pizza_api.services.cart_service import CartService
from pizza_api.services.checkout_service import CheckoutService
from pizza_api.services.menu_service import MenuService
from pizza_api.services.token_service import TokenService
from pizza_api.services.user_service import UserService

NO_CHANGES = {"Info": "No changes made."}


class ResourceHandler:
    """Operations a subclass does not override answer 405."""

    def __call__(self, ctx: RequestContext) -> HandlerResult:
        operation = Operation.from_method(ctx.method)
        if operation is None:
            return HandlerResult.error(MethodNotAllowedError())

        action = {
            Operation.CREATE: self.create,
            Operation.READ: self.read,
            Operation.UPDATE: self.update,
            Operation.DELETE: self.delete,
        }[operation]
        try:
            return action(ctx)
        except DomainError as e:
            return HandlerResult.error(e)

    def create(self, ctx: RequestContext) -> HandlerResult:
        raise MethodNotAllowedError()

    def read(self, ctx: RequestContext) -> HandlerResult:
        raise MethodNotAllowedError()

    def update(self, ctx: RequestContext) -> HandlerResult:
        raise MethodNotAllowedError()

    def delete(self, ctx: RequestContext) -> HandlerResult:
        raise MethodNotAllowedError()


def _require(*values, message: str = "Missing required field.") -> None:
    if any(v is None for v in values):
        raise ValidationError(message)


class UserHandler(ResourceHandler):
    def __init__(self, service: UserService):
        self.service = service

    # required: firstName, lastName, email, password, streetAddress
    def create(self, ctx):
        first_name = verify_name(ctx.payload.get("firstName"))
        last_name = verify_name(ctx.payload.get("lastName"))
        email = verify_email(ctx.payload.get("email"))
        password = verify_password(ctx.payload.get("password"))
        street_address = verify_street_address(ctx.payload.get("streetAddress"))
        _require(first_name, last_name, email, password, street_address, message="Missing required fields.")

        user = self.service.create_user(first_name, last_name, email, password, street_address)
        return HandlerResult.ok(user.public())

    def read(self, ctx):
        email = verify_email(ctx.query.get("email"))
        _require(email)
        return HandlerResult.ok(self.service.get_user(email, ctx.token))

    # required: email; optional: firstName, lastName, password, streetAddress (at least one)
    def update(self, ctx):
        email = verify_email(ctx.payload.get("email"))
        _require(email)

        user = self.service.update_user(
            email,
            ctx.token,
            first_name=verify_name(ctx.payload.get("firstName")),
            last_name=verify_name(ctx.payload.get("lastName")),
            password=verify_password(ctx.payload.get("password")),
            street_address=verify_street_address(ctx.payload.get("streetAddress")),
        )
        return HandlerResult.ok(user)

    def delete(self, ctx):
        email = verify_email(ctx.query.get("email"))
        _require(email)
        self.service.delete_user(email, ctx.token)
        return HandlerResult.ok()


class TokenHandler(ResourceHandler):
    def __init__(self, service: TokenService):
        self.service = service

    def create(self, ctx):
        email = verify_email(ctx.payload.get("email"))
        password = verify_password(ctx.payload.get("password"))
        _require(email, password, message="Missing required field(s).")
        return HandlerResult.ok(self.service.create_token(email, password).model_dump())

    def read(self, ctx):
        token_id = verify_id(ctx.query.get("id"))
        _require(token_id)
        return HandlerResult.ok(self.service.get_token(token_id).model_dump())

    # required: id, extend == true
    def update(self, ctx):
        token_id = verify_id(ctx.payload.get("id"))
        if token_id is None or not verify_flag(ctx.payload.get("extend")):
            raise ValidationError("Missing required fields or fields are invalid.")
        return HandlerResult.ok(self.service.extend_token(token_id).model_dump())

    def delete(self, ctx):
        token_id = verify_id(ctx.query.get("id"))
        _require(token_id)
        self.service.delete_token(token_id)
        return HandlerResult.ok()


class MenuHandler(ResourceHandler):
    """Only reading is implemented; the other operations answer 503."""

    def __init__(self, service: MenuService):
        self.service = service

    def create(self, ctx):
        raise ServiceUnavailableError()

    def read(self, ctx):
        return HandlerResult.ok(self.service.get_menu(ctx.token))

    def update(self, ctx):
        raise ServiceUnavailableError()

    def delete(self, ctx):
        raise ServiceUnavailableError()


class CartHandler(ResourceHandler):
    def __init__(self, service: CartService):
        self.service = service

    # required: email, itemId, quantity
    def create(self, ctx):
        email = verify_email(ctx.payload.get("email"))
        item_id = verify_item_id(ctx.payload.get("itemId"))
        quantity = verify_quantity(ctx.payload.get("quantity"))
        _require(email, item_id, quantity)

        item = self.service.add_item(email, ctx.token, item_id, quantity)
        return HandlerResult.ok(item.model_dump())

    def read(self, ctx):
        cart_id = verify_id(ctx.query.get("id"))
        _require(cart_id)
        return HandlerResult.ok(self.service.get_item(cart_id, ctx.token).model_dump())

    # required: id, quantity
    def update(self, ctx):
        cart_id = verify_id(ctx.payload.get("id"))
        _require(cart_id, message="Missing required fields.")
        quantity = verify_quantity(ctx.payload.get("quantity"))
        _require(quantity, message="Missing fields to update.")

        if not self.service.update_item(cart_id, ctx.token, quantity):
            return HandlerResult(202, NO_CHANGES)
        return HandlerResult.ok()

    def delete(self, ctx):
        cart_id = verify_id(ctx.query.get("id"))
        _require(cart_id)
        self.service.remove_item(cart_id, ctx.token)
        return HandlerResult.ok()


class CheckoutHandler(ResourceHandler):
    def __init__(self, service: CheckoutService):
        self.service = service

    def create(self, ctx):
        email = verify_email(ctx.payload.get("email"))
        _require(email)
        return HandlerResult.ok(self.service.checkout(email, ctx.token))


def ping(ctx: RequestContext) -> HandlerResult:
    return HandlerResult.ok()
