"""
Logging Setup
=============
Structured logging for integrations using this library.

Usage:
    from alipay_global.log import setup_logging

    setup_logging(service_name="checkout")

Every module logs through ``structlog.get_logger(__name__)``; the redaction
processor keeps signatures, keys and request content out of the output.
"""

import logging
import re
import sys
from typing import Any, Dict

import structlog

REDACTED = "[REDACTED]"

REDACT_KEYS = frozenset({
    "signature",
    "private_key",
    "privatekey",
    "secret",
    "password",
    "token",
    "authorization",
    "content",
    "canonical",
    "body",
})


def _normalize(key: str) -> str:
    return re.sub(r"[-_\s]", "", key.lower())


_NORMALIZED_REDACT_KEYS = {_normalize(k) for k in REDACT_KEYS}


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: REDACTED if _normalize(str(k)) in _NORMALIZED_REDACT_KEYS else _redact(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


def redact_sensitive(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """structlog processor replacing sensitive fields with ``[REDACTED]``."""
    return _redact(event_dict)


def setup_logging(
    service_name: str = "alipay-global",
    level: str = "INFO",
    json_output: bool = True,
) -> structlog.stdlib.BoundLogger:
    """
    Configure structlog and the stdlib root logger.
    
    Args:
        service_name: Bound to every log entry as ``service``
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Whether to output JSON (for production)
        
    Returns:
        Logger for the caller
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_sensitive,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=service_name)

    logger = structlog.get_logger(service_name)
    logger.info("logging.configured", level=level.upper())
    return logger
