# valuestore/__init__.py

from .core.store import ValueStore, json_default
from .core.models import StoreOptions, StoreType
from .core.exceptions import (
    ValueStoreError,
    ConfigurationError,
    ValidationError,
    NonScalarValueError,
    NotAnIntegerError,
    FormatError
)

__all__ = [
    'ValueStore',
    'json_default',
    'StoreOptions',
    'StoreType',
    'ValueStoreError',
    'ConfigurationError',
    'ValidationError',
    'NonScalarValueError',
    'NotAnIntegerError',
    'FormatError'
]
