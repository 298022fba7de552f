"""Request ids for tracing one storefront request across log lines.

Every response carries ``X-Request-ID``. A client-supplied id is echoed back
when it looks sane; anything else is replaced with a fresh UUID so arbitrary
header content never lands in the logs.
"""

import re
import uuid

from asgi_correlation_id import CorrelationIdMiddleware
from asgi_correlation_id.context import correlation_id
from fastapi import FastAPI

REQUEST_ID_HEADER = "X-Request-ID"

_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")


def is_safe_request_id(value: str) -> bool:
    return bool(_SAFE_REQUEST_ID.fullmatch(value))


def setup_correlation_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CorrelationIdMiddleware,
        header_name=REQUEST_ID_HEADER,
        generator=lambda: str(uuid.uuid4()),
        validator=is_safe_request_id,
    )


def get_correlation_id() -> str | None:
    """Current request's id, or None outside a request."""
    return correlation_id.get(None)


__all__ = ["REQUEST_ID_HEADER", "get_correlation_id", "is_safe_request_id", "setup_correlation_middleware"]
