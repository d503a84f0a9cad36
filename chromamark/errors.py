# chromamark/errors.py
"""
Exceptions raised by the watermark pipeline.

All of them derive from ValueError so callers that already guard image
processing with `except ValueError` keep working.
"""

from typing import Any, Dict, Optional


class WatermarkError(ValueError):
    """Base class for every chromamark failure."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({extra})"


class ConfigurationError(WatermarkError):
    """Size parameters or mid-band table are not mutually consistent."""


class OutOfRangeError(WatermarkError):
    """A sub-region request falls outside its source matrix."""


class PreconditionError(WatermarkError):
    """An input buffer does not meet the shape the codec needs."""
