# pizza_api/domain/errors.py
"""
Error taxonomy shared by the store, services and handlers.

Every error carries the HTTP status it maps to and a message that is safe
to hand back to the client. Handlers turn them into ``{"Error": message}``.
"""

AUTH_ERROR_MESSAGE = "Missing required token in header, or token is invalid."
STORE_ERROR_MESSAGE = "Internal store error."


class DomainError(Exception):
    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    status_code = 400
    default_message = "Missing required field."


class ConflictError(DomainError):
    status_code = 400
    default_message = "Record already exists."


class AuthError(DomainError):
    status_code = 403
    default_message = AUTH_ERROR_MESSAGE

    def __init__(self):
        # never tell the client whether the token was missing or invalid
        super().__init__(AUTH_ERROR_MESSAGE)


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Not found."


class MethodNotAllowedError(DomainError):
    status_code = 405
    default_message = "Method not allowed."


class ConsistencyError(DomainError):
    status_code = 500
    default_message = "Stored records are inconsistent."


class StoreError(DomainError):
    """Underlying I/O failure. ``detail`` is for logs only."""

    status_code = 500
    default_message = STORE_ERROR_MESSAGE

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(STORE_ERROR_MESSAGE)


class SettlementError(DomainError):
    status_code = 500
    default_message = "Could not settle the payment."


class ServiceUnavailableError(DomainError):
    status_code = 503
    default_message = "Service unavailable."


class TokenExpiredError(ValidationError):
    default_message = "The token has already expired and cannot be extended."


class RecordExistsError(ConflictError):
    def __init__(self, collection: str, key: str):
        self.collection = collection
        self.key = key
        super().__init__(f"Record {collection}/{key} already exists.")


class RecordNotFoundError(NotFoundError):
    def __init__(self, collection: str, key: str):
        self.collection = collection
        self.key = key
        super().__init__(f"Record {collection}/{key} does not exist.")
