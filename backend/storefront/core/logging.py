"""structlog setup for the storefront API.

All output goes through the stdlib ``logging`` tree so uvicorn, httpx and
botocore records share one format: JSON lines in production, a colored
console in debug. Every entry is tagged with the request id and scrubbed of
credential-looking fields before rendering.
"""

import logging
import logging.config

import structlog
from asgi_correlation_id.context import correlation_id

# Denied admin attempts are written here; the level is pinned so they survive
# a quiet root logger.
AUDIT_LOGGER_NAME = "storefront.audit"

REDACTED = "[redacted]"

_SENSITIVE_KEYS = frozenset({"password", "token", "access_token", "authorization", "apikey", "service_key"})


def add_correlation_id(logger, method, event_dict):
    cid = correlation_id.get(None)
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def redact_sensitive_fields(logger, method, event_dict):
    """Mask values of keys that may hold passwords or bearer tokens."""
    for key in event_dict.keys() & _SENSITIVE_KEYS:
        event_dict[key] = REDACTED
    return event_dict


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_correlation_id,
        redact_sensitive_fields,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def configure_structlog(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Route structlog through stdlib logging with a single renderer.

    Must run before storefront modules log anything: loggers cache their
    processor chain on first use.
    """
    shared_processors = _shared_processors()
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
                "foreign_pre_chain": shared_processors,
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"handlers": ["stdout"], "level": log_level},
        "loggers": {
            "uvicorn.access": {"level": "WARNING"},
            "httpx": {"level": "WARNING"},
            "botocore": {"level": "WARNING"},
            "boto3": {"level": "WARNING"},
            AUDIT_LOGGER_NAME: {"level": "INFO"},
        },
    })

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
