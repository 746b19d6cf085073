"""
Logging setup for session-cookie.

JSON output for production, plain text for development. Session tokens,
cookie values and secrets are masked before anything is written.
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

SECURITY_LOGGER_NAME = "security.events"

# payload.expiry.signature as produced by the codec
TOKEN_PATTERN = re.compile(r"(?<![A-Za-z0-9_-])[A-Za-z0-9_-]+\.\d{9,}\.[A-Za-z0-9_-]{20,}(?![A-Za-z0-9_-])")

SENSITIVE_FIELD_KEYWORDS = ("secret", "token", "session", "cookie", "password", "key")

_STANDARD_RECORD_FIELDS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def mask_tokens(text: str) -> str:
    """Replace anything shaped like a session token with a placeholder"""
    return TOKEN_PATTERN.sub("[SESSION-TOKEN]", text)


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per record.

    Extra fields whose names suggest session material are redacted unless
    ``include_sensitive`` is set, and token-shaped strings in the message
    are always masked.
    """

    def __init__(self, include_sensitive: bool = False):
        super().__init__()
        self.include_sensitive = include_sensitive

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": mask_tokens(record.getMessage()),
        }

        extra = {
            key: self._redact(key, value)
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_FIELDS
        }
        if extra:
            entry["extra"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)

    def _redact(self, key: str, value: Any) -> Any:
        if self.include_sensitive:
            return value
        if any(keyword in key.lower() for keyword in SENSITIVE_FIELD_KEYWORDS):
            return "[REDACTED]"
        return value


def setup_logging(log_level: str = "INFO", enable_json: bool = True, include_sensitive: bool = False) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        enable_json: Use StructuredFormatter instead of plain text
        include_sensitive: Keep session-related extra fields in JSON output
    """
    if enable_json:
        formatter: logging.Formatter = StructuredFormatter(include_sensitive=include_sensitive)
    else:
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def log_security_event(
    event_type: str,
    message: str,
    level: int = logging.INFO,
    ip_address: Optional[str] = None,
    extra_data: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Record a session security event (rejected token and the like).

    Args:
        event_type: Short machine-readable event name
        message: Human-readable message
        level: Logging level, DEBUG for routine rejections
        ip_address: Client address, if known
        extra_data: Additional structured fields
    """
    logger = logging.getLogger(SECURITY_LOGGER_NAME)
    if not logger.isEnabledFor(level):
        return

    fields: Dict[str, Any] = {"event_type": event_type}
    if ip_address:
        fields["ip_address"] = ip_address
    if extra_data:
        fields.update(extra_data)

    logger.log(level, message, extra=fields)


def init_application_logging(dev_mode: bool = False) -> None:
    """Configure logging for the application process"""
    log_level = "DEBUG" if dev_mode else "INFO"
    setup_logging(log_level=log_level, enable_json=not dev_mode, include_sensitive=dev_mode)
    logging.getLogger("session_cookie.startup").info(
        "Logging initialized", extra={"dev_mode": dev_mode, "log_level": log_level}
    )
