# pizza_api/services/payment_client.py
import hashlib
from typing import Any

import requests
from requests import RequestException
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from pizza_api.domain.errors import SettlementError
from pizza_api.domain.schemas import CheckoutRequest, SettlementResult
from pizza_api.utils.logging import get_logger

logger = get_logger(__name__)


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(requests.ConnectionError),
    )


def idempotency_key(request: CheckoutRequest) -> str:
    """Same cart contents and total give the same key."""
    lines = sorted(f"{line.id}:{line.quantity}" for line in request.lines)
    raw = "|".join([request.email, *lines, f"{request.total:.2f}", request.currency])
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class PaymentClient:
    """Settlement gateway backed by an external payment HTTP API.

    Every attempt of a charge carries the same ``Idempotency-Key``. Only
    connection failures are retried.
    """

    def __init__(self, base_url: str, timeout: int = 5):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def settle(self, request: CheckoutRequest) -> SettlementResult:
        key = idempotency_key(request)
        try:
            data = self._charge(request, key)
        except (RequestException, ValueError) as e:
            logger.error(f"Payment gateway failed for {request.email}: {e}")
            raise SettlementError()

        if not isinstance(data, dict):
            logger.error(f"Payment gateway answered {type(data).__name__} for {request.email}, expected an object")
            raise SettlementError()

        return SettlementResult(
            status=str(data.get("status", "succeeded")),
            reference=str(data["id"]) if data.get("id") is not None else None,
            amount=request.total,
            currency=request.currency,
        )

    @http_retry()
    def _charge(self, request: CheckoutRequest, key: str) -> Any:
        url = f"{self.base_url}/charges"
        logger.info(f"PaymentClient POST {url} amount={request.total} {request.currency} key={key}")

        resp = requests.post(
            url,
            json={
                "email": request.email,
                "amount": request.total,
                "currency": request.currency,
                "description": f"{len(request.lines)} cart item(s)",
            },
            headers={"Idempotency-Key": key},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()
