"""structlog setup: JSON lines on stdout with credential redaction.

Two processors keep credentials out of the logs. ``redact_sensitive`` blanks
values whose key names a credential (``refresh_token``, ``password``, ...).
``mask_jwts`` scrubs anything shaped like a JWT out of the remaining string
values, which catches tokens echoed inside error messages.
"""

import logging
import re
import sys
from typing import Any, Dict

import structlog

REDACTED = "REDACTED"

# Substrings that mark an event key as carrying credential material
SENSITIVE_KEY_PARTS = (
    "api_key",
    "authorization",
    "credential",
    "password",
    "secret",
    "token",
)

# header.payload.signature, each part base64url; JWT headers start with "eyJ"
JWT_PATTERN = re.compile(r"eyJ[\w-]+\.[\w-]+\.[\w-]*")


def redact_sensitive(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Replace values of credential-bearing keys with ``REDACTED``.

    Key matching is a case-insensitive substring test, so ``refresh_token``,
    ``client_secret`` and ``Authorization`` are all caught. The ``event``
    key is left alone.
    """
    for key in event_dict:
        if key == "event":
            continue
        if any(part in key.lower() for part in SENSITIVE_KEY_PARTS):
            event_dict[key] = REDACTED
    return event_dict


def mask_jwts(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Mask JWT-shaped substrings inside string values."""
    for key, value in event_dict.items():
        if isinstance(value, str) and "eyJ" in value:
            event_dict[key] = JWT_PATTERN.sub(REDACTED, value)
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """Route structlog output to stdout as one JSON object per line.

    Args:
        log_level: Minimum level name; unknown names fall back to INFO
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_sensitive,
            mask_jwts,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a logger, bound to ``logger_name`` when a name is given."""
    logger = structlog.get_logger()
    return logger.bind(logger_name=name) if name else logger
