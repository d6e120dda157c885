"""
Logger Implementation
=====================

structlog configuration for zksubmit.

The relayer API key is part of the submit URL path, so transport errors and
relayer responses can echo it back. Every event passes through
``redact_secrets`` before rendering: keys that look sensitive are masked, and
registered secret values or ``/submit-proof/<key>`` path segments are
scrubbed out of string values.

Version: 0.1.0
"""

import logging
import re
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor

from zksubmit import __version__


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


REDACTED = "***REDACTED***"

SENSITIVE_KEYS = ("api_key", "apikey", "secret", "token", "authorization", "password")

_SUBMIT_PATH = re.compile(r"(/submit-proof/)[^/\s\"'?#]+")

_registered_secrets: set[str] = set()


def register_secret(value: str) -> None:
    """Scrub this value from every subsequent log event."""
    if value:
        _registered_secrets.add(value)


def scrub(text: str) -> str:
    """Remove registered secrets and submit-URL keys from a string."""
    text = _SUBMIT_PATH.sub(rf"\1{REDACTED}", text)
    for secret in _registered_secrets:
        text = text.replace(secret, REDACTED)
    return text


def _redact(key: str, value: Any) -> Any:
    if any(s in key.lower() for s in SENSITIVE_KEYS):
        return REDACTED
    if isinstance(value, str):
        return scrub(value)
    if isinstance(value, dict):
        return {k: _redact(str(k), v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_redact(key, v) for v in value]
    return value


def redact_secrets(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Processor masking sensitive keys and scrubbing secret values."""
    return {k: _redact(k, v) for k, v in event_dict.items()}


def _add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", "zksubmit")
    event_dict.setdefault("version", __version__)
    return event_dict


def setup_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Route structlog and stdlib logging through one stdout handler.

    Args:
        log_level: Logging level name
        json_logs: Render JSON lines instead of the colored console format
    """
    level = getattr(logging, log_level.upper())

    # httpx logs full request URLs at INFO, which include the API key
    for noisy_logger in ("httpx", "httpcore"):
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_context,
        redact_secrets,
    ]

    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.RichTracebackFormatter(max_frames=10),
        )

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def get_logger(name: str | None = None) -> "BoundLogger":
    """Get a structured logger, typically ``get_logger(__name__)``."""
    return structlog.stdlib.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach key/values (e.g. the current iteration) to later events."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
