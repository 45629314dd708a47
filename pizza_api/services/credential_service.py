# pizza_api/services/credential_service.py
"""
Password hashing and bearer-token lifecycle.

Digests are HMAC-SHA256 over the plaintext keyed with the configured hashing
secret, so the same password always yields the same digest. Tokens are
random 20-character ids stored in the ``tokens`` collection with an absolute
expiry in epoch milliseconds.
"""
import hashlib
import hmac
import secrets
import string
import time
from typing import Callable

from pizza_api.domain.errors import DomainError, RecordNotFoundError, NotFoundError, TokenExpiredError
from pizza_api.domain.schemas import TokenRecord
from pizza_api.domain.validators import ID_LENGTH, verify_id
from pizza_api.repos.token_repo import TokenRepo
from pizza_api.utils.logging import get_logger
from pizza_api.utils.settings import Settings

logger = get_logger(__name__)

TOKEN_ALPHABET = string.ascii_uppercase + string.digits


def create_random_string(length: int = ID_LENGTH) -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


class CredentialService:
    def __init__(
        self,
        token_repo: TokenRepo,
        settings: Settings,
        clock: Callable[[], float] = time.time,
    ):
        self.repo = token_repo
        self.secret = settings.hashing_secret
        self.ttl_ms = settings.token_ttl_seconds * 1000
        self.clock = clock

    def now_ms(self) -> int:
        return int(self.clock() * 1000)

    def hash(self, plaintext: str) -> str | None:
        if not isinstance(plaintext, str) or not plaintext:
            return None
        return hmac.new(self.secret.encode("utf-8"), plaintext.encode("utf-8"), hashlib.sha256).hexdigest()

    def passwords_match(self, plaintext: str, digest: str) -> bool:
        candidate = self.hash(plaintext)
        if candidate is None or not isinstance(digest, str):
            return False
        return hmac.compare_digest(candidate, digest)

    #commands
    def issue_token(self, email: str) -> TokenRecord:
        token = TokenRecord(id=create_random_string(), email=email, expires=self.now_ms() + self.ttl_ms)
        self.repo.create_token(token)
        logger.info(f"Issued token for {email}, expires at {token.expires}")
        return token

    def extend_token(self, token_id: str) -> TokenRecord:
        token = self.get_token(token_id)
        now = self.now_ms()
        if token.expires <= now:
            raise TokenExpiredError()

        token.expires = now + self.ttl_ms
        self.repo.update_token(token)
        logger.info(f"Extended token for {token.email} to {token.expires}")
        return token

    def revoke_token(self, token_id: str) -> None:
        try:
            self.repo.delete_token(token_id)
        except RecordNotFoundError:
            raise NotFoundError("Could not find the specified token.")
        logger.info("Revoked a token")

    #queries
    def get_token(self, token_id: str) -> TokenRecord:
        try:
            return self.repo.get_token(token_id)
        except RecordNotFoundError:
            raise NotFoundError("Specified token does not exist.")

    def active_token(self, token_id) -> TokenRecord | None:
        """Return the unexpired token for ``token_id``; any failure gives None."""
        token_id = verify_id(token_id)
        if token_id is None:
            return None
        try:
            token = self.repo.get_token(token_id)
        except DomainError:
            return None
        if token.expires <= self.now_ms():
            return None
        return token

    def verify(self, token_id, email: str) -> bool:
        token = self.active_token(token_id)
        return token is not None and token.email == email
