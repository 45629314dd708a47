# pizza_api/api/dispatcher.py
"""
Unified request dispatcher.

Turns a raw request (method, path, query, headers, body) into an immutable
``RequestContext``, picks a handler from a static route table keyed by the
path with its slashes trimmed, and returns the handler's ``HandlerResult``
with the status and payload normalized for the wire.
"""
import json
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping

from pizza_api.domain.errors import DomainError
from pizza_api.utils.logging import get_logger

logger = get_logger(__name__)


class Operation(str, Enum):
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    @classmethod
    def from_method(cls, method: str) -> "Operation | None":
        return _METHOD_OPERATIONS.get((method or "").upper())


_METHOD_OPERATIONS = {
    "POST": Operation.CREATE,
    "GET": Operation.READ,
    "PUT": Operation.UPDATE,
    "DELETE": Operation.DELETE,
}


@dataclass(frozen=True)
class RequestContext:
    path: str
    method: str
    query: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    payload: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def token(self) -> str | None:
        value = self.headers.get("token")
        return value if isinstance(value, str) else None


@dataclass(frozen=True)
class HandlerResult:
    status_code: int = 200
    payload: dict | None = None

    @classmethod
    def ok(cls, payload: dict | None = None) -> "HandlerResult":
        return cls(200, payload)

    @classmethod
    def error(cls, exc: DomainError) -> "HandlerResult":
        return cls(exc.status_code, {"Error": exc.message})


Handler = Callable[[RequestContext], HandlerResult]


def normalize_path(path: str) -> str:
    return (path or "").strip("/")


def parse_json_to_object(body: bytes | str | None) -> dict:
    """Empty, malformed or non-object bodies all become an empty record."""
    if not body:
        return {}
    try:
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        parsed = json.loads(body)
    except (UnicodeDecodeError, ValueError):
        return {}
    return parsed if isinstance(parsed, dict) else {}


def not_found(ctx: RequestContext) -> HandlerResult:
    return HandlerResult(404, {})


class Dispatcher:
    def __init__(self, routes: Mapping[str, Handler], not_found_handler: Handler = not_found):
        # read-only after startup
        self.routes = MappingProxyType(dict(routes))
        self.not_found_handler = not_found_handler

    def build_context(
        self,
        method: str,
        path: str,
        query: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        body: bytes | str | None = None,
    ) -> RequestContext:
        return RequestContext(
            path=normalize_path(path),
            method=(method or "").upper(),
            query=MappingProxyType(dict(query or {})),
            headers=MappingProxyType({str(k).lower(): v for k, v in (headers or {}).items()}),
            payload=MappingProxyType(parse_json_to_object(body)),
        )

    def resolve(self, path: str) -> Handler:
        return self.routes.get(normalize_path(path), self.not_found_handler)

    def dispatch(
        self,
        method: str,
        path: str,
        query: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        body: bytes | str | None = None,
    ) -> HandlerResult:
        ctx = self.build_context(method, path, query, headers, body)
        handler = self.resolve(ctx.path)

        try:
            result = handler(ctx)
        except DomainError as e:
            result = HandlerResult.error(e)
        except Exception:
            logger.exception(f"Unhandled error in {ctx.method} /{ctx.path}")
            result = HandlerResult(500, {"Error": "Internal server error."})

        status_code, payload = _finalize(result)
        line = f"{ctx.method} /{ctx.path} {status_code}"
        if status_code == 200:
            logger.info(line)
        else:
            logger.warning(line)
        return HandlerResult(status_code, payload)


def _finalize(result: Any) -> tuple[int, dict]:
    status_code = getattr(result, "status_code", None)
    payload = getattr(result, "payload", None)
    if isinstance(status_code, bool) or not isinstance(status_code, int):
        status_code = 200
    if not isinstance(payload, dict):
        payload = {}
    return status_code, payload
