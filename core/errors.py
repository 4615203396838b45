"""
Error types for the analytics core.

Only malformed input is an error. Missing data is reported as ``None`` by
the services and never raised.
"""

from typing import Optional


class AnalyticsError(Exception):
    """Base class for analytics errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AnalyticsError, ValueError):
    """Malformed or out-of-range input (bad stat, window, weight)."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message
