# tests/test_store.py

import io
import json
from collections import OrderedDict
from enum import Enum, IntEnum
from pathlib import Path

import pytest
from rich.console import Console

from valuestore import (
    ValueStore,
    StoreType,
    json_default,
    ConfigurationError,
    ValidationError,
    NonScalarValueError,
    NotAnIntegerError,
)

# --------------------------------------------------------------------------- #
# Access idioms
# --------------------------------------------------------------------------- #
def test_as_functions():
    """get/set/has/unset through explicit methods"""
    settings = ValueStore()

    settings.set("foo", "bar")
    assert settings.get("foo") == "bar"

    assert settings.has("foo")
    assert settings.unset("foo") is True
    assert not settings.has("foo")
    assert settings.get("foo") is None

    assert settings.increment("count") == 1
    assert settings.decrement("count") == 0

def test_as_mapping():
    """Indexing, `in` and `del` delegate to the same operations"""
    settings = ValueStore()

    settings["foo"] = "bar"
    assert settings["foo"] == "bar"
    assert "foo" in settings

    del settings["foo"]
    assert "foo" not in settings

    with pytest.raises(KeyError):
        settings["foo"]
    with pytest.raises(KeyError):
        del settings["foo"]

    settings["count"] = 0
    settings["count"] += 1
    assert settings["count"] == 1
    settings["count"] -= 1
    assert settings["count"] == 0

def test_has_counts_none_as_present():
    settings = ValueStore()
    settings.set("status", None)

    assert settings.has("status")
    assert "status" in settings
    assert settings.get("status", "default") is None

def test_unset_twice_does_not_raise():
    settings = ValueStore()
    settings.set("foo", "bar")

    assert settings.unset("foo") is True
    assert settings.unset("foo") is False

def test_clear():
    settings = ValueStore()
    settings.set("foo", "bar")
    assert settings.has("foo")

    settings.clear()
    assert not settings.has("foo")
    assert settings.count() == 0

def test_count_and_len():
    settings = ValueStore()
    settings.set({"name": "foo", "created": "2021-01-01", "modified": "2021-01-02"})

    assert settings.count() == 3
    assert len(settings) == 3

def test_iteration_keeps_insertion_order(tmp_path: Path):
    settings = ValueStore(tmp_path / "iter.json")
    settings["one"] = 1
    settings["two"] = 2
    settings["three"] = 3

    assert list(settings) == ["one", "two", "three"]
    assert dict(settings.items()) == {"one": 1, "two": 2, "three": 3}

def test_set_mapping_leaves_other_keys_alone():
    settings = ValueStore()
    settings.set("keep", True)
    settings.set({"a": 1, "b": 2})

    assert settings.to_dict() == {"keep": True, "a": 1, "b": 2}

def test_update_is_validated_as_a_whole():
    settings = ValueStore()

    with pytest.raises(ValidationError):
        settings.update({"a": 1}, b=object())

    assert "a" not in settings

def test_get_returns_live_reference():
    """Nested containers returned by get are the ones held by the store"""
    settings = ValueStore()
    settings["account"] = {"ports": [8080]}

    settings.get("account")["ports"].append(3000)
    settings["account"]["name"] = "example.com"

    assert settings.to_dict() == {"account": {"ports": [8080, 3000], "name": "example.com"}}

def test_to_dict_is_a_copy():
    settings = ValueStore()
    settings["account"] = {"ports": [8080]}

    data = settings.to_dict()
    data["account"]["ports"].append(1)
    data["other"] = 1

    assert settings.to_dict() == {"account": {"ports": [8080]}}

# --------------------------------------------------------------------------- #
# Validation
# --------------------------------------------------------------------------- #
def test_store_non_scalar():
    store = ValueStore()

    with pytest.raises(NonScalarValueError):
        store["foo"] = object()

def test_store_non_scalar_deep():
    store = ValueStore()

    with pytest.raises(ValidationError) as exc:
        store.set("foo", {"bar": [1, {"baz": {1, 2}}]})

    assert "foo.bar[1].baz" in str(exc.value)
    assert "non-scalar value" in str(exc.value)
    assert not store.has("foo")

def test_validation_is_atomic():
    """Nothing is written when any leaf of the input is invalid"""
    store = ValueStore()

    with pytest.raises(ValidationError) as exc:
        store.set({"a": 1, "b": {"c": object()}})

    assert exc.value.key == "b.c"
    assert store.count() == 0
    assert not store.has("a")

def test_non_string_keys_are_rejected():
    store = ValueStore()

    with pytest.raises(ValidationError):
        store.set({1: "one"})
    with pytest.raises(ValidationError):
        store.set("nested", {2: "two"})

    assert store.count() == 0

@pytest.mark.parametrize("value", [
    None, True, 0, -12, 1.5, "", "text",
    [], {}, [1, "a", None], {"a": {"b": [True, 2.0]}},
])
def test_valid_values_are_accepted(value):
    store = ValueStore()
    store.set("key", value)
    assert store.get("key") == value

@pytest.mark.parametrize("value", [
    object(), b"bytes", (1, 2), {1, 2}, [1, (2,)], {"a": b"x"},
])
def test_invalid_values_are_rejected(value):
    store = ValueStore()
    with pytest.raises(ValidationError):
        store.set("key", value)

class Color(str, Enum):
    RED = "red"

class Level(IntEnum):
    HIGH = 3

@pytest.mark.parametrize("value", [
    Color.RED,
    Level.HIGH,
    [Color.RED],
    {"nested": Level.HIGH},
    OrderedDict(a=1),
])
def test_scalar_subclasses_are_rejected(tmp_path: Path, value):
    """Only the exact scalar and container types are stored"""
    store = ValueStore(tmp_path / "settings.yml")

    with pytest.raises(NonScalarValueError):
        store.set("key", value)

    assert not store.has("key")
    assert store.save() is True

def test_subclass_keys_are_rejected():
    store = ValueStore()
    with pytest.raises(ValidationError):
        store.set({Color.RED: 1})
    assert store.count() == 0

# --------------------------------------------------------------------------- #
# Counters
# --------------------------------------------------------------------------- #
def test_increment():
    settings = ValueStore()
    assert settings.increment("count") == 1
    assert settings.increment("count", 2) == 3
    assert settings.get("count") == 3

def test_decrement():
    settings = ValueStore()
    assert settings.decrement("count") == -1
    assert settings.decrement("count", 2) == -3
    assert settings.get("count") == -3

@pytest.mark.parametrize("current, expected", [
    (5, 6),
    ("41", 42),
    ("-3", -2),
    (2.0, 3),
    (None, 1),
])
def test_increment_accepts_integer_like_values(current, expected):
    settings = ValueStore()
    settings.set("count", current)

    result = settings.increment("count")

    assert result == expected
    assert isinstance(settings.get("count"), int)

@pytest.mark.parametrize("current", ["bar", "4.5", 2.5, True, [1], {"a": 1}, "5\n", "\u0663", " 5"])
def test_increment_rejects_non_integers(current):
    store = ValueStore()
    store.set("foo", current)

    with pytest.raises(NotAnIntegerError) as exc:
        store.increment("foo")

    assert "value is not an integer" in str(exc.value)
    assert store.get("foo") == current

def test_decrement_rejects_non_integers():
    store = ValueStore()
    store["foo"] = "bar"

    with pytest.raises(ValidationError):
        store.decrement("foo")

    assert store["foo"] == "bar"

def test_counter_amount_must_be_an_int():
    store = ValueStore()

    with pytest.raises(ValidationError):
        store.increment("count", "2")
    with pytest.raises(ValidationError):
        store.decrement("count", 1.0)
    with pytest.raises(ValidationError):
        store.increment("count", Level.HIGH)

    assert not store.has("count")

# --------------------------------------------------------------------------- #
# Construction
# --------------------------------------------------------------------------- #
@pytest.mark.parametrize("filename, expected", [
    ("settings.json", StoreType.JSON),
    ("settings.xml", StoreType.XML),
    ("settings.yml", StoreType.YML),
    ("settings.php", StoreType.PHP),
    ("SETTINGS.YML", StoreType.YML),
    ("settings.txt", StoreType.JSON),
    ("settings", StoreType.JSON),
])
def test_type_is_detected_from_extension(tmp_path: Path, filename: str, expected: StoreType):
    store = ValueStore(tmp_path / filename)
    assert store.type == expected

def test_no_file_defaults_to_json():
    assert ValueStore().type == StoreType.JSON

def test_explicit_type_wins_over_extension(tmp_path: Path):
    store = ValueStore(tmp_path / "settings.json", type="yml")
    assert store.type == StoreType.YML

def test_invalid_type():
    with pytest.raises(ConfigurationError) as exc:
        ValueStore("settings", type="apcu")

    assert exc.value.option == "type"
    assert "apcu" in str(exc.value)

def test_invalid_type_fails_before_reading(tmp_path: Path):
    """The file would not decode; the type error must come first"""
    path = tmp_path / "settings.json"
    path.write_text("{x-a}", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ValueStore(path, type="apcu")

def test_invalid_xml_root():
    with pytest.raises(ConfigurationError):
        ValueStore(type="xml", root="not a name")

def test_missing_file_starts_empty(tmp_path: Path):
    path = tmp_path / "missing.json"
    store = ValueStore(path)

    assert store.count() == 0
    assert not path.exists()

# --------------------------------------------------------------------------- #
# Conversions
# --------------------------------------------------------------------------- #
def test_to_string():
    settings = ValueStore()
    settings["foo"] = "bar"
    assert str(settings) == '{"foo":"bar"}'

def test_json_serializable():
    settings = ValueStore()
    settings["foo"] = "bar"

    text = json.dumps(settings, default=json_default, separators=(",", ":"))

    assert text == '{"foo":"bar"}'
    assert text == settings.to_json()

def test_to_json_options():
    settings = ValueStore()
    settings["url"] = "https://www.example.com/"

    assert settings.to_json() == '{"url":"https://www.example.com/"}'
    assert settings.to_json(escape=True) == '{"url":"https:\\/\\/www.example.com\\/"}'
    assert settings.to_json(pretty=True) == '{\n    "url": "https://www.example.com/"\n}'

def test_exports_do_not_need_a_file():
    settings = ValueStore()
    settings["name"] = "foo"

    assert settings.to_dict() == {"name": "foo"}
    assert "<name>foo</name>" in settings.to_xml()
    assert "<settings>" in settings.to_xml(root="settings")
    assert settings.to_yaml() == "name: foo\n"
    assert settings.to_php() == "<?php\nreturn array (\n  'name' => 'foo',\n);\n"

def test_repr():
    settings = ValueStore()
    settings["a"] = 1
    assert repr(settings) == "ValueStore(file=None, type='json', keys=1)"

# --------------------------------------------------------------------------- #
# Save
# --------------------------------------------------------------------------- #
def test_save_no_file():
    assert ValueStore().save() is False

def test_save_failure_returns_false(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    store = ValueStore(blocker / "settings.json")
    store["foo"] = "bar"

    assert store.save() is False

def test_save_failure_is_reported_to_console(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    buffer = io.StringIO()

    store = ValueStore(blocker / "settings.json", console=Console(file=buffer, width=200))

    assert store.save() is False
    assert "Could not save" in buffer.getvalue()

def test_verbose_logging(tmp_path: Path):
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, log_path=False)

    store = ValueStore(tmp_path / "settings.yml", console=console, verbose=True)
    store["foo"] = "bar"
    store.save()
    ValueStore(tmp_path / "settings.yml", console=console, verbose=True)

    output = buffer.getvalue()
    assert "Using yml format" in output
    assert "Saved 1 key(s)" in output
    assert "Loaded 1 key(s)" in output

def test_clear_does_not_touch_file_until_save(tmp_path: Path):
    path = tmp_path / "settings.json"
    store = ValueStore(path)
    store["foo"] = "bar"
    assert store.save()

    store.clear()
    assert ValueStore(path).get("foo") == "bar"

    assert store.save()
    assert ValueStore(path).count() == 0
