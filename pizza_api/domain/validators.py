# pizza_api/domain/validators.py
"""
Input validators.

Each validator takes the raw value from a request and returns the normalized
value, or ``None`` when the value is missing or invalid. They never raise;
handlers decide which ``None`` aborts the request.
"""
import re
from typing import Any

ID_LENGTH = 20

#local part without "/" so that a valid email is always a safe record key
_EMAIL_RE = re.compile(
    r"[-!#$%&'*+0-9=?A-Z^_a-z{|}~](\.?[-!#$%&'*+0-9=?A-Z^_a-z`{|}~])*"
    r"@[a-zA-Z0-9](-*\.?[a-zA-Z0-9])*\.[a-zA-Z](-?[a-zA-Z0-9])+"
)
_LOWER_RE = re.compile(r"[a-z]")
_UPPER_RE = re.compile(r"[A-Z]")
_SPECIAL_RE = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


def _trimmed(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def verify_name(value: Any) -> str | None:
    return _trimmed(value)


def verify_street_address(value: Any) -> str | None:
    return _trimmed(value)


def verify_email(value: Any) -> str | None:
    """Case is preserved: "A@b.com" and "a@b.com" are different users."""
    email = _trimmed(value)
    if email is None or not _EMAIL_RE.fullmatch(email):
        return None
    return email


def verify_password(value: Any) -> str | None:
    """More than 8 characters, mixed case and at least one special character."""
    if not isinstance(value, str):
        return None
    password = value.strip()
    if len(password) <= 8:
        return None
    if not (_LOWER_RE.search(password) and _UPPER_RE.search(password) and _SPECIAL_RE.search(password)):
        return None
    return password


def verify_id(value: Any) -> str | None:
    """Token and cart ids: exactly 20 characters after trimming."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value if len(value) == ID_LENGTH else None


def _integral(value: Any) -> int | None:
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def verify_item_id(value: Any) -> int | None:
    number = _integral(value)
    return number if number is not None and number >= 0 else None


def verify_quantity(value: Any) -> int | None:
    number = _integral(value)
    return number if number is not None and number > 0 else None


def verify_flag(value: Any) -> bool:
    """Only a literal JSON ``true`` counts."""
    return value is True
