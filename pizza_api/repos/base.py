from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from pizza_api.domain.errors import StoreError
from pizza_api.utils.logging import get_logger

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


def load_record(model: Type[M], data: Any, collection: str, key: str) -> M:
    """Parse a stored document; a record that no longer fits its schema is a store failure."""
    try:
        return model.model_validate(data)
    except SchemaError as e:
        detail = f"{collection}/{key} does not match {model.__name__}: {e.error_count()} error(s)"
        logger.error(detail)
        raise StoreError(detail)
