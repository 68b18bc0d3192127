# valuestore/core/exceptions.py

"""
ValueStore domain-specific exceptions.

This module contains the custom exceptions raised by the store and its
format codecs. Library code raises them; the CLI layer catches them and
turns them into messages and exit codes.
"""

from typing import Iterable, Optional


class ValueStoreError(Exception):
    """Base exception for all ValueStore errors."""
    pass

# ==============================================================
# CONFIGURATION ERRORS
# ==============================================================

class ConfigurationError(ValueStoreError):
    """Raised when the store is constructed with invalid options."""
    def __init__(self, option: str, value: object, allowed: Optional[Iterable[str]] = None):
        self.option = option
        self.value = value
        self.allowed = list(allowed) if allowed else None
        if self.allowed:
            super().__init__(
                f"Unknown {option} '{value}'. Allowed: {', '.join(self.allowed)}"
            )
        else:
            super().__init__(f"Invalid {option}: {value}")

# ==============================================================
# VALIDATION ERRORS
# ==============================================================

class ValidationError(ValueStoreError):
    """Raised when a write or counter operation is given an invalid value."""
    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"{reason} for key '{key}'")


class NonScalarValueError(ValidationError):
    """Raised when a leaf value is not None, bool, int, float or str."""
    def __init__(self, key: str, value: object):
        self.value = value
        super().__init__(key, "non-scalar value")


class NotAnIntegerError(ValidationError):
    """Raised when a counter operation finds a value that is not an integer."""
    def __init__(self, key: str, value: object):
        self.value = value
        super().__init__(key, "value is not an integer")

# ==============================================================
# FORMAT ERRORS
# ==============================================================

class FormatError(ValueStoreError):
    """Raised when stored content cannot be decoded by its codec."""
    def __init__(self, format_name: str, details: str, path: Optional[str] = None):
        self.format_name = format_name
        self.details = details
        self.path = path
        where = f" in {path}" if path else ""
        super().__init__(f"Invalid {format_name} content{where}: {details}")
