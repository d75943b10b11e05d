"""
Logging configuration.

Sets up standard library logging for the application and masks session
tokens before any record is emitted.

Author: Matthew Picone (mail@matthewpicone.com)
Date: 2026-01-05
"""

import logging
import logging.config
import re

_token_re = re.compile(r"\b[0-9a-fA-F]{32,}\b")


class TokenMaskFilter(logging.Filter):
    """Mask long hex strings (session tokens) in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = _token_re.sub("****", message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logging(level: str = "INFO"):
    """Configure application logging.

    Args:
        level: Root log level name.
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "mask_tokens": {"()": TokenMaskFilter},
            },
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": ["mask_tokens"],
                },
            },
            "root": {
                "level": level.upper(),
                "handlers": ["console"],
            },
        }
    )
