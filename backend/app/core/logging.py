"""Storefront Logging Configuration.

Two output formats share one filter chain: every record passes through
``TokenRedactionFilter`` first, so a bearer token that ends up in a log
message (an exception string, a header dump) never reaches the output.
"""

import json
import logging
import re
import sys
from typing import Any, Literal

DEV_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# header.payload.signature, each part base64url
_JWT_PATTERN = re.compile(r"eyJ[\w-]+\.[\w-]+\.[\w-]+")
REDACTED = "[REDACTED]"

# Attributes every LogRecord has; anything else was passed via ``extra=``
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def redact_tokens(text: str) -> str:
    """Replace anything shaped like a JWT with a placeholder."""
    return _JWT_PATTERN.sub(REDACTED, text)


class TokenRedactionFilter(logging.Filter):
    """Scrub JWTs from the rendered message before any handler formats it."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_tokens(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, escaped with json.dumps.

    Fields passed through ``extra=`` (for example ``user_id`` on auth
    events) are copied into the object next to the standard keys.
    """

    def __init__(self):
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_entry[key] = value
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = redact_tokens(self.formatException(record.exc_info))
        return json.dumps(log_entry, default=str)


def setup_logging(
    level: str = "INFO",
    format_type: Literal["structured", "dev"] = "dev",
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'structured' for JSON lines, 'dev' for readable output
    """
    numeric_level = getattr(logging, level.upper())
    handler = logging.StreamHandler(sys.stdout)
    if format_type == "structured":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(DEV_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.addFilter(TokenRedactionFilter())

    logging.root.handlers = [handler]
    logging.root.setLevel(numeric_level)

    for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access", "aiosqlite"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    # SQL echo only at DEBUG
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if numeric_level == logging.DEBUG else logging.WARNING
    )

    get_logger("logging").info(f"Logging configured: level={level}, format={format_type}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the storefront prefix."""
    return logging.getLogger(f"storefront.{name}")
