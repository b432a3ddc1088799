from __future__ import annotations

from typing import Any, Iterable, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def require_int(value: Any, field_name: str) -> int:
    # bool is an int subclass; a JSON true is not an id.
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def require_int_list(value: Any, field_name: str) -> list[int]:
    """Validate a JSON array of ids, dropping duplicates but keeping order."""
    if not isinstance(value, list):
        raise ValidationError(f"{field_name} must be a list")
    seen: set[int] = set()
    out: list[int] = []
    for item in value:
        n = require_int(item, field_name)
        if n not in seen:
            seen.add(n)
            out.append(n)
    return out


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_one_of(value: str, allowed: Iterable[str], field_name: str) -> str:
    allowed = list(allowed)
    if value not in allowed:
        raise ValidationError(f"Invalid {field_name}: {value!r} (expected one of {', '.join(allowed)})")
    return value
