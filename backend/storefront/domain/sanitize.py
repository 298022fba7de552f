"""Input validation and stored-markup escaping for free-text fields."""

import math
from typing import Any

from storefront.core.exceptions import ValidationError

_ESCAPES = str.maketrans({
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
})


def sanitize(text: str) -> str:
    """HTML-escape ``< > " ' /``. Ampersands are left alone so re-saving is idempotent."""
    return text.translate(_ESCAPES)


def is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(data: dict[str, Any], fields: tuple[str, ...]) -> None:
    """Raise ValidationError naming the first field in ``fields`` that is missing."""
    for field in fields:
        if is_missing(data.get(field)):
            raise ValidationError(f"Missing required field: {field}")


def sanitize_fields(data: dict[str, Any], fields: tuple[str, ...]) -> dict[str, Any]:
    """Return a copy of ``data`` with the named string fields escaped."""
    cleaned = dict(data)
    for field in fields:
        value = cleaned.get(field)
        if isinstance(value, str):
            cleaned[field] = sanitize(value)
    return cleaned


def finite_number(value: Any, field: str) -> float:
    """Parse ``value`` as a finite number (numeric strings allowed) or raise ValidationError."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError(f"{field} must be a number")
    try:
        number = float(value)
    except (ValueError, OverflowError):
        raise ValidationError(f"{field} must be a number") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number")
    return number


def require_numbers(data: dict[str, Any], fields: tuple[str, ...], prefix: str = "") -> None:
    """Validate the named fields that are present (and not None) as finite numbers."""
    for field in fields:
        if data.get(field) is not None:
            finite_number(data[field], f"{prefix}{field}")


def require_line_items(items: Any, numeric_fields: tuple[str, ...] = ("price", "quantity")) -> None:
    """``items`` must be absent or a list of objects whose numeric fields are finite."""
    if items is None:
        return
    if not isinstance(items, list):
        raise ValidationError("items must be a list")
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValidationError(f"items[{index}] must be an object")
        require_numbers(item, numeric_fields, prefix=f"items[{index}].")


def reject_non_finite(value: Any, path: str = "body") -> None:
    """Raise ValidationError if a NaN or infinite float sits anywhere in ``value``.

    Such values parse from request JSON but cannot be rendered back out.
    """
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError(f"{path} must be a finite number")
    elif isinstance(value, dict):
        for key, item in value.items():
            reject_non_finite(item, f"{path}.{key}" if path != "body" else str(key))
    elif isinstance(value, list):
        for index, item in enumerate(value):
            reject_non_finite(item, f"{path}[{index}]")
