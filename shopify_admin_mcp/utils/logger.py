"""structlog setup for the MCP server.

Every line is a JSON object on stderr, because stdout carries the MCP stdio
protocol. Shopify credentials are masked before rendering, and each tool
invocation stamps its lines with a short correlation id.
"""

import contextvars
import logging
import os
import re
import sys
import uuid
from pathlib import Path

import structlog

correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)

REDACTED = "[REDACTED]"

# shpat_ admin API, shpca_ custom app, shpss_ shared secret
_TOKEN_PATTERN = re.compile(r"shp(?:at|ca|ss)_[A-Za-z0-9]+")

_SECRET_KEYS = frozenset({
    "access_token", "accesstoken", "x-shopify-access-token",
    "authorization", "api_key", "secret", "password", "token",
})


def _mask(value):
    if isinstance(value, str):
        return _TOKEN_PATTERN.sub(REDACTED, value)
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in _SECRET_KEYS else _mask(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_mask(v) for v in value]
    return value


def _redact_processor(logger, method_name, event_dict):
    """Mask secret-named keys and token-shaped strings, nested values included."""
    return _mask(event_dict)


def _correlation_id_processor(logger, method_name, event_dict):
    cid = correlation_id_var.get()
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def new_correlation_id() -> str:
    """Start a new tool invocation and return its 8-char id.

    The id lives in a contextvar, so concurrent asyncio tasks keep their own.
    """
    cid = uuid.uuid4().hex[:8]
    correlation_id_var.set(cid)
    return cid


def setup_logging(level: str = "INFO", log_file: str = None) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive).
        log_file: Also append the JSON lines to this file, created mode 0600.

    Raises:
        ValueError: If level is not a known logging level.
    """
    level_name = level.upper()
    if level_name not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ValueError(f"Invalid logging level: {level}")

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        Path(log_file).touch(mode=0o600, exist_ok=True)
        os.chmod(log_file, 0o600)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(format="%(message)s", level=level_name, handlers=handlers, force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            _correlation_id_processor,
            _redact_processor,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    return structlog.get_logger(name)
