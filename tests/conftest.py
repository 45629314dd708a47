import time
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from pizza_api.data.store import DocumentStore
from pizza_api.domain.schemas import CheckoutRequest, SettlementResult
from pizza_api.main import create_app
from pizza_api.utils.settings import Settings

PASSWORD = "Sup3r$ecret!"


class FakeClock:
    def __init__(self, start: float | None = None):
        self.now = start if start is not None else float(int(time.time()))

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGateway:
    def __init__(self):
        self.requests = []

    def settle(self, request: CheckoutRequest) -> SettlementResult:
        self.requests.append(request)
        return SettlementResult(status="succeeded", reference="ch_test_1", amount=request.total, currency=request.currency)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    return Settings(data_dir=str(data_dir), hashing_secret="test-secret", max_cart_items=3, token_ttl_seconds=3600)


@pytest.fixture
def store(data_dir: Path) -> DocumentStore:
    return DocumentStore(data_dir)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def client(settings: Settings, clock: FakeClock, gateway: FakeGateway) -> TestClient:
    app = create_app(settings, gateway=gateway, clock=clock)
    return TestClient(app)


@pytest.fixture
def user_payload() -> dict:
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "password": PASSWORD,
        "streetAddress": "12 Analytical Way",
    }


def sign_up(client: TestClient, payload: dict) -> dict:
    res = client.post("/users", json=payload)
    assert res.status_code == 200, res.text
    res = client.post("/tokens", json={"email": payload["email"], "password": payload["password"]})
    assert res.status_code == 200, res.text
    return res.json()


@pytest.fixture
def token(client: TestClient, user_payload: dict) -> dict:
    return sign_up(client, user_payload)


@pytest.fixture
def other_token(client: TestClient, user_payload: dict) -> dict:
    return sign_up(client, {**user_payload, "email": "grace@example.com", "firstName": "Grace"})
