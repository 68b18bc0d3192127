# tests/test_exceptions.py

"""Tests for custom ValueStore exceptions."""

import pytest
from pathlib import Path

from valuestore import (
    ValueStore,
    ValueStoreError,
    ConfigurationError,
    ValidationError,
    NonScalarValueError,
    NotAnIntegerError,
    FormatError,
)

def test_hierarchy():
    """Every store error can be caught as ValueStoreError."""
    for error_class in (ConfigurationError, ValidationError, FormatError):
        assert issubclass(error_class, ValueStoreError)
    assert issubclass(NonScalarValueError, ValidationError)
    assert issubclass(NotAnIntegerError, ValidationError)

def test_configuration_error_message():
    e = ConfigurationError("type", "apcu", ["json", "xml"])
    assert str(e) == "Unknown type 'apcu'. Allowed: json, xml"
    assert e.allowed == ["json", "xml"]

    e = ConfigurationError("root", "1root")
    assert str(e) == "Invalid root: 1root"
    assert e.allowed is None

def test_non_scalar_value_error():
    store = ValueStore()
    marker = object()

    with pytest.raises(NonScalarValueError) as exc:
        store.set("a", {"b": [1, marker]})

    assert exc.value.key == "a.b[1]"
    assert exc.value.value is marker
    assert str(exc.value) == "non-scalar value for key 'a.b[1]'"

def test_not_an_integer_error():
    store = ValueStore()
    store.set("name", "foo")

    with pytest.raises(NotAnIntegerError) as exc:
        store.increment("name")

    assert exc.value.key == "name"
    assert exc.value.value == "foo"
    assert str(exc.value) == "value is not an integer for key 'name'"

def test_format_error_message(tmp_path: Path):
    assert str(FormatError("yml", "bad indent")) == "Invalid yml content: bad indent"

    path = tmp_path / "broken.xml"
    path.write_text("<root><a></root>", encoding="utf-8")

    with pytest.raises(FormatError) as exc:
        ValueStore(path)
    assert str(exc.value).startswith(f"Invalid xml content in {path}: ")
    assert exc.value.__cause__ is not None
