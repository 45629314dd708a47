from pizza_api.domain.errors import RecordNotFoundError, ValidationError
from pizza_api.domain.schemas import TokenRecord
from pizza_api.repos.user_repo import UserRepo
from pizza_api.services.credential_service import CredentialService
from pizza_api.utils.logging import get_logger

logger = get_logger(__name__)


class TokenService:
    """
    Token endpoints. Only sign-in checks credentials; reading, extending and
    revoking a token need nothing but its id.
    """

    def __init__(self, users: UserRepo, credentials: CredentialService):
        self.users = users
        self.credentials = credentials

    def create_token(self, email: str, password: str) -> TokenRecord:
        try:
            user = self.users.get_user(email)
        except RecordNotFoundError:
            raise ValidationError("Could not find the specified user.")

        if not self.credentials.passwords_match(password, user.hashedPassword):
            logger.warning(f"Password mismatch for {email}")
            raise ValidationError("Password did not match the specified user's password.")

        return self.credentials.issue_token(email)

    def get_token(self, token_id: str) -> TokenRecord:
        return self.credentials.get_token(token_id)

    def extend_token(self, token_id: str) -> TokenRecord:
        return self.credentials.extend_token(token_id)

    def delete_token(self, token_id: str) -> None:
        self.credentials.revoke_token(token_id)
