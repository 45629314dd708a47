import pytest

from pizza_api.domain.errors import NotFoundError, TokenExpiredError
from pizza_api.domain.validators import ID_LENGTH
from pizza_api.repos.token_repo import TokenRepo
from pizza_api.services.credential_service import TOKEN_ALPHABET, CredentialService, create_random_string
from pizza_api.utils.settings import Settings

from conftest import FakeClock

HOUR_MS = 60 * 60 * 1000


@pytest.fixture
def credentials(store, settings, clock) -> CredentialService:
    return CredentialService(TokenRepo(store), settings, clock=clock)


def test_hash_is_deterministic_and_keyed(store, settings, credentials):
    assert credentials.hash("Sup3r$ecret!") == credentials.hash("Sup3r$ecret!")
    assert credentials.hash("Sup3r$ecret!") != credentials.hash("Sup3r$ecret?")

    other = CredentialService(TokenRepo(store), settings.model_copy(update={"hashing_secret": "other"}))
    assert other.hash("Sup3r$ecret!") != credentials.hash("Sup3r$ecret!")


def test_hash_of_nothing_is_none(credentials):
    assert credentials.hash("") is None
    assert credentials.hash(None) is None


def test_passwords_match(credentials):
    digest = credentials.hash("Sup3r$ecret!")
    assert credentials.passwords_match("Sup3r$ecret!", digest)
    assert not credentials.passwords_match("Wr0ng$ecret!", digest)
    assert not credentials.passwords_match("", digest)


def test_random_string_shape():
    value = create_random_string()
    assert len(value) == ID_LENGTH
    assert set(value) <= set(TOKEN_ALPHABET)


def test_issued_token_ids_do_not_collide(credentials):
    ids = {credentials.issue_token("ada@example.com").id for _ in range(500)}
    assert len(ids) == 500


def test_issue_token_persists_with_one_hour_expiry(credentials, clock, store):
    token = credentials.issue_token("ada@example.com")
    assert len(token.id) == ID_LENGTH
    assert token.expires == int(clock.now * 1000) + HOUR_MS
    assert store.read("tokens", token.id) == token.model_dump()


def test_verify(credentials, clock):
    token = credentials.issue_token("ada@example.com")
    assert credentials.verify(token.id, "ada@example.com")

    assert not credentials.verify("Z" * 20, "ada@example.com")
    assert not credentials.verify(token.id, "grace@example.com")
    assert not credentials.verify(token.id, "Ada@example.com")
    assert not credentials.verify(None, "ada@example.com")
    assert not credentials.verify("short", "ada@example.com")
    assert not credentials.verify("../../../etc/passwd!", "ada@example.com")

    clock.advance(3600)
    # expires == now is already expired
    assert not credentials.verify(token.id, "ada@example.com")


def test_extend_resets_expiry(credentials, clock):
    token = credentials.issue_token("ada@example.com")
    clock.advance(1800)
    extended = credentials.extend_token(token.id)
    assert extended.expires == int(clock.now * 1000) + HOUR_MS
    assert credentials.get_token(token.id).expires == extended.expires


def test_extend_expired_token_fails_without_mutation(credentials, clock, store):
    token = credentials.issue_token("ada@example.com")
    clock.advance(3601)
    with pytest.raises(TokenExpiredError):
        credentials.extend_token(token.id)
    assert store.read("tokens", token.id)["expires"] == token.expires


def test_extend_and_revoke_unknown_token(credentials):
    with pytest.raises(NotFoundError):
        credentials.extend_token("Q" * 20)
    with pytest.raises(NotFoundError):
        credentials.revoke_token("Q" * 20)


def test_ttl_comes_from_settings(store, data_dir):
    clock = FakeClock(1000.0)
    credentials = CredentialService(TokenRepo(store), Settings(data_dir=str(data_dir), token_ttl_seconds=60), clock=clock)
    assert credentials.issue_token("ada@example.com").expires == 1000 * 1000 + 60 * 1000
