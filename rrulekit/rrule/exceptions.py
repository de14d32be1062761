"""RRULE-specific exceptions for error handling."""

from typing import Optional


class RRuleError(Exception):
    """Base exception for recurrence rule errors."""

    def __init__(self, message: str, field: Optional[str] = None, token: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.token = token


class RRuleParseError(RRuleError):
    """Exception raised when an RRULE value cannot be parsed."""


class RRuleSerializationError(RRuleError):
    """Exception raised when a rule cannot be written back to RRULE text."""
