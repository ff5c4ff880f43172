"""Structured logging configuration using structlog.

Provides JSON logging for production and console logging for development,
with automatic context binding and PII redaction. Tenant records carry
caller-facing text (greetings, transfer targets, placeholder values), so
redaction is on by default.
"""

import re
import sys
from collections.abc import MutableMapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

# Sensitive key names (O(1) lookup)
SENSITIVE_KEYS: frozenset[str] = frozenset({
    "password",
    "secret",
    "token",
    "api_key",
    "apikey",
    "authorization",
    "credential",
    "credentials",
    "email",
    "phone",
    "phone_number",
    "caller_phone",
    "emergency_phone",
    "transfer_number",
    "access_token",
    "refresh_token",
    "private_key",
})

# Identifier keys whose values look numeric but are never PII
CORRELATION_KEYS: frozenset[str] = frozenset({
    "call_id",
    "tenant_id",
    "request_id",
    "trace_run_id",
    "config_hash",
    "value_hash",
    "event_id",
    "path",
})

# Regex patterns for PII in string values
EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_PATTERN = re.compile(r"\+?\(?\d{3}\)?[\s\-.]?\d{3}[\s\-.]?\d{4}\b")


class PIIRedactor:
    """Processor that redacts PII from log events.

    Uses two-tier approach:
    1. Key-name lookup via frozenset (O(1)) for known sensitive keys
    2. Regex patterns on string values as fallback for accidental PII
    """

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        """Redact PII from event dictionary."""
        return cast(EventDict, self._redact_dict(event_dict))

    def _redact_dict(self, data: MutableMapping[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in data.items():
            key_lower = str(key).lower()

            if key_lower in SENSITIVE_KEYS:
                result[key] = "[REDACTED]"
            elif key_lower in CORRELATION_KEYS:
                result[key] = value
            elif isinstance(value, dict):
                result[key] = self._redact_dict(value)
            elif isinstance(value, str):
                result[key] = self._redact_string(value)
            elif isinstance(value, list):
                result[key] = self._redact_list(value)
            else:
                result[key] = value

        return result

    def _redact_string(self, value: str) -> str:
        value = EMAIL_PATTERN.sub("[EMAIL]", value)
        return PHONE_PATTERN.sub("[PHONE]", value)

    def _redact_list(self, items: list[Any]) -> list[Any]:
        result: list[Any] = []
        for item in items:
            if isinstance(item, dict):
                result.append(self._redact_dict(item))
            elif isinstance(item, str):
                result.append(self._redact_string(item))
            elif isinstance(item, list):
                result.append(self._redact_list(item))
            else:
                result.append(item)
        return result


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        format: Output format - "json" for production, "console" for development
        redact_pii: Whether to redact PII from logs
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
    ]

    # Redact before the timestamp is attached
    if redact_pii:
        processors.append(PIIRedactor())

    processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    level_map = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    level_num = level_map.get(level.upper(), 20)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance bound to the given name.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        A bound structlog logger
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
