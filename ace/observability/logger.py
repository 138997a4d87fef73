import os
import time
import json
import logging
from contextlib import contextmanager
from typing import Dict, Any, Optional
from datetime import datetime, timezone

import sentry_sdk

logger = logging.getLogger(__name__)

# Keys whose values never reach the logs
_SENSITIVE_KEYS = ("token", "credential", "secret", "password", "api_key", "authorization")


class TimingContext:
    """Context manager for timing operations."""

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            self.duration_ms = (time.perf_counter() - self.start_time) * 1000

    def get_duration_ms(self) -> Optional[float]:
        """Get duration in milliseconds."""
        return self.duration_ms


@contextmanager
def timing(operation_name: str):
    """Context manager for timing operations."""
    context = TimingContext(operation_name)
    with context:
        yield context


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _redact(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Replace values of credential-like keys with a marker.

    Args:
        fields: Log fields

    Returns:
        Copy of the fields safe for logging
    """
    redacted = {}
    for key, value in fields.items():
        if any(marker in key.lower() for marker in _SENSITIVE_KEYS):
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = value
    return redacted


def _truncate(text: str, limit: int = 100) -> str:
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def log_event(
    action: str,
    component: str,
    user_id: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> None:
    """
    Log a structured event with required fields.

    Args:
        action: The action performed (e.g., 'cycle_completed', 'display_show', 'enriched')
        component: The emitting component (e.g., 'agent', 'scheduler', 'enrichment')
        user_id: Optional user the event belongs to
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields to include in the log
    """
    log_entry: Dict[str, Any] = {
        "timestamp": _utc_timestamp(),
        "action": action,
        "component": component,
    }

    if user_id is not None:
        log_entry["user_id"] = user_id

    if duration_ms is not None:
        log_entry["duration_ms"] = round(duration_ms, 2)

    for key, value in _redact(kwargs).items():
        log_entry[key] = _truncate(value) if isinstance(value, str) else value

    logger.info(json.dumps(log_entry, separators=(',', ':'), default=str))


def init_sentry() -> bool:
    """
    Initialize Sentry if enabled and DSN is provided.

    Returns:
        True if Sentry was initialized, False otherwise
    """
    if not os.getenv("OBS_ENABLED", "false").lower() == "true":
        return False

    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        logger.info("Sentry DSN not provided, skipping Sentry initialization")
        return False

    try:
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration

        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[
                FastApiIntegration(),
                LoggingIntegration(
                    level=logging.INFO,
                    event_level=logging.ERROR
                ),
            ],
            traces_sample_rate=0.1,
            environment=os.getenv("ENVIRONMENT", "development"),
        )

        logger.info("Sentry initialized successfully")
        return True

    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")
        return False


def log_error(error: Exception, context: Dict[str, Any] = None) -> None:
    """
    Log an error with optional context.

    Args:
        error: The exception to log
        context: Optional context dictionary
    """
    log_entry = {
        "timestamp": _utc_timestamp(),
        "level": "ERROR",
        "error": str(error),
        "error_type": type(error).__name__,
    }

    if context:
        log_entry.update(_redact(context))

    logger.error(json.dumps(log_entry, separators=(',', ':'), default=str))


def log_warning(message: str, context: Dict[str, Any] = None) -> None:
    """
    Log a warning with optional context.

    Args:
        message: The warning message
        context: Optional context dictionary
    """
    log_entry = {
        "timestamp": _utc_timestamp(),
        "level": "WARNING",
        "message": message,
    }

    if context:
        log_entry.update(_redact(context))

    logger.warning(json.dumps(log_entry, separators=(',', ':'), default=str))


def log_info(message: str, context: Dict[str, Any] = None) -> None:
    """
    Log an info message with optional context.

    Args:
        message: The info message
        context: Optional context dictionary
    """
    log_entry = {
        "timestamp": _utc_timestamp(),
        "level": "INFO",
        "message": message,
    }

    if context:
        log_entry.update(_redact(context))

    logger.info(json.dumps(log_entry, separators=(',', ':'), default=str))
