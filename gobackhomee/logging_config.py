"""
Logging configuration with credential redaction
"""

import logging
import logging.config
import re
from typing import Any, Dict

_BEARER_RE = re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+")
_SIGNATURE_RE = re.compile(r"((?:signature|token)['\"]?\s*[:=]\s*['\"]?)[A-Za-z0-9._~+/=-]+", re.IGNORECASE)


def redact(message: str) -> str:
    """Mask bearer tokens and signatures in a log message."""
    message = _BEARER_RE.sub(r"\1[REDACTED]", message)
    return _SIGNATURE_RE.sub(r"\1[REDACTED]", message)


class SecretRedactionFilter(logging.Filter):
    """Filter that rewrites records so credentials never reach a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True  # Never drop records, only rewrite them


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration with secret redaction."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "redact_secrets": {
                "()": SecretRedactionFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
                "filters": ["redact_secrets"]
            }
        },
        "loggers": {
            "gobackhomee": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
            "httpx": {
                "handlers": ["default"],
                "level": "WARNING",
                "propagate": False
            }
        }
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the SDK logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
