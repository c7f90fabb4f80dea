"""structlog setup shared by the app and the stdlib loggers it bridges.

Production writes one JSON object per line; debug mode uses the coloured
console renderer. uvicorn, SQLAlchemy and httpx records go through the same
processor chain, so every line carries the level, logger name, timestamp and
the request's correlation id.

Secrets that can reach a log call (SMTP password from the settings row, the
admin API token) are masked before rendering.
"""

import logging
import logging.config

import structlog
from asgi_correlation_id.context import correlation_id

SERVICE_NAME = "sitecms"

REDACTED = "***"
SECRET_KEYS = frozenset({"smtp_password", "password", "admin_token", "admin_api_token", "x_admin_token"})


def add_correlation_id(logger, method, event_dict):
    cid = correlation_id.get(None)
    if cid:
        event_dict.setdefault("correlation_id", cid)
    return event_dict


def add_service_name(logger, method, event_dict):
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def redact_secrets(logger, method, event_dict):
    """Mask secret-looking keys, including one level down in dict values."""
    for key, value in event_dict.items():
        if key in SECRET_KEYS and value:
            event_dict[key] = REDACTED
        elif isinstance(value, dict):
            event_dict[key] = {k: (REDACTED if k in SECRET_KEYS and v else v) for k, v in value.items()}
    return event_dict


def configure_structlog(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Install the processor chain and the stdlib bridge.

    Must run before other modules call structlog.get_logger(): loggers cache
    the chain on first use.
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service_name,
        add_correlation_id,
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    # Tracebacks become a field in JSON; the console renderer prints them itself
    exception_processors = [structlog.processors.format_exc_info] if json_logs else []

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    *exception_processors,
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
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    })

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
