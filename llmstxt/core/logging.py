"""structlog setup for the llms.txt service.

Everything goes through one stdlib handler so uvicorn, httpx and SQLAlchemy
records share the structlog format. Each event carries the request's
correlation ID when there is one, and Admin API access tokens are masked
before rendering.
"""

import logging
import logging.config

import structlog
from asgi_correlation_id.context import correlation_id

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "sqlalchemy.engine")

SECRET_KEYS = frozenset({"access_token", "X-Shopify-Access-Token", "token"})
MASK = "***"


def add_correlation_id(logger, method, event_dict):
    """Copy the asgi-correlation-id request ID into the event."""
    cid = correlation_id.get(None)
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def mask_secrets(logger, method, event_dict):
    for key in SECRET_KEYS & event_dict.keys():
        event_dict[key] = MASK
    headers = event_dict.get("headers")
    if isinstance(headers, dict):
        event_dict["headers"] = {k: (MASK if k in SECRET_KEYS else v) for k, v in headers.items()}
    return event_dict


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_correlation_id,
        mask_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def configure_structlog(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Route structlog and stdlib logging through one formatter.

    Must run before the rest of the package is imported, since module level
    loggers cache their processor chain on first use.

    Args:
        log_level: Root level name
        json_logs: JSONRenderer when True, ConsoleRenderer for local runs
    """
    shared = _shared_processors()
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.format_exc_info,
                    renderer,
                ],
                "foreign_pre_chain": shared,
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "structlog",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"handlers": ["stdout"], "level": log_level},
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
    })

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
