"""
Error types raised by the prosperity engine.

Aggregation gaps are not errors; see aggregator.Absent.
"""


class CPIError(Exception):
    """Base class for engine errors."""


class ValidationError(CPIError):
    """Raw inputs are missing, non-numeric, or outside an indicator's domain."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class UnknownIndicatorError(ValidationError):
    """No indicator is registered under the requested key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__("indicator", f"unknown indicator '{key}'")


class StoreError(CPIError):
    """The record store could not complete a read or write."""
