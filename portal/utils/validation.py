import re
from enum import Enum
from typing import Any, Optional, TypeVar

from portal.errors import ValidationError


E = TypeVar("E", bound=Enum)

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def coerce_enum(enum_cls: type[E], value: Any, field: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field} must be one of: {allowed}") from None


def require_text(value: Optional[str], message: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(message)
    return text


def is_email(value: str) -> bool:
    return bool(_EMAIL.match(value))


def mib(n_bytes: int) -> str:
    return f"{n_bytes // (1024 * 1024)}MB"
