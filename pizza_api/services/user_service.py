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
from pizza_api.domain.schemas import UserRecord
from pizza_api.repos.cart_repo import CartRepo
from pizza_api.repos.user_repo import UserRepo
from pizza_api.services.credential_service import CredentialService
from pizza_api.utils.logging import get_logger

logger = get_logger(__name__)

USER_EXISTS = "A user with that email address already exists."


class UserService:
    """
    Account use cases. Everything except sign-up is self-service: the bearer
    token must belong to the email being read, changed or deleted.
    """

    def __init__(self, users: UserRepo, carts: CartRepo, credentials: CredentialService):
        self.users = users
        self.carts = carts
        self.credentials = credentials

    def create_user(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        street_address: str,
    ) -> UserRecord:
        if self.users.user_exists(email):
            raise ConflictError(USER_EXISTS)

        hashed = self.credentials.hash(password)
        if hashed is None:
            raise ValidationError("Could not hash the user's password.")

        user = UserRecord(
            email=email,
            firstName=first_name,
            lastName=last_name,
            hashedPassword=hashed,
            streetAddress=street_address,
            cartItemIds=[],
        )
        try:
            self.users.create_user(user)
        except RecordExistsError:
            raise ConflictError(USER_EXISTS)

        logger.info(f"Created user {email}")
        return user

    def get_user(self, email: str, token_id) -> dict:
        self._authorize(email, token_id)
        return self._load(email).public()

    def update_user(
        self,
        email: str,
        token_id,
        first_name: str | None = None,
        last_name: str | None = None,
        password: str | None = None,
        street_address: str | None = None,
    ) -> dict:
        if not (first_name or last_name or password or street_address):
            raise ValidationError("Missing fields to update.")

        self._authorize(email, token_id)
        user = self._load(email)

        if first_name:
            user.firstName = first_name
        if last_name:
            user.lastName = last_name
        if password:
            user.hashedPassword = self.credentials.hash(password)
        if street_address:
            user.streetAddress = street_address

        try:
            self.users.update_user(user)
        except RecordNotFoundError:
            raise NotFoundError("The specified user does not exist.")

        logger.info(f"Updated user {email}")
        return user.public()

    def delete_user(self, email: str, token_id) -> None:
        """Delete the user, then every cart item it owns. Not rolled back halfway."""
        self._authorize(email, token_id)
        user = self._load(email)

        try:
            self.users.delete_user(email)
        except RecordNotFoundError:
            raise NotFoundError("Could not find the specified user.")

        failed = []
        for cart_id in user.cartItemIds:
            try:
                self.carts.delete_cart_item(cart_id)
            except DomainError as e:
                failed.append(cart_id)
                logger.error(f"Cascade delete of cart item {cart_id} for {email} failed: {e}")

        if failed:
            raise ConsistencyError(
                "Errors encountered while attempting to delete the user's cart data. "
                "All cart data may not have been deleted."
            )
        logger.info(f"Deleted user {email} and {len(user.cartItemIds)} cart item(s)")

    def _authorize(self, email: str, token_id) -> None:
        if not self.credentials.verify(token_id, email):
            raise AuthError()

    def _load(self, email: str) -> UserRecord:
        try:
            return self.users.get_user(email)
        except RecordNotFoundError:
            raise NotFoundError("Could not find the specified user.")
