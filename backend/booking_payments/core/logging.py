"""
Structured logging for the booking payments service, using structlog.

Every log call is an event name plus keyword context (booking_id, sheet,
charge_id, ...). Request context bound by RequestLoggingMiddleware is merged
in, and card tokens or credentials are masked before anything is rendered.
JSON in production, console output in development.
"""

import logging
import sys

import structlog

from booking_payments.core.config import get_settings

SENSITIVE_KEYS = frozenset({"stripeToken", "stripe_token", "token", "source", "password", "api_key"})


def redact_sensitive(logger, method_name: str, event_dict: dict) -> dict:
    """Mask payment tokens and credentials passed as log context."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = "***"
    return event_dict


def setup_logging() -> None:
    settings = get_settings()

    processors = [
        structlog.contextvars.merge_contextvars,
        redact_sensitive,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.is_development:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        # Stripe and SMTP tracebacks go into the JSON line, not stderr
        processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer]
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # Third-party clients log every request; the service logs its own events
    for noisy in ("uvicorn.access", "httpx", "httpcore", "stripe"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
