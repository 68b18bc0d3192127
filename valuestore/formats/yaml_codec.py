# valuestore/formats/yaml_codec.py

from typing import Any, Dict

import yaml

from valuestore.core.exceptions import FormatError, ValidationError
from valuestore.core.models import StoreType
from valuestore.core.tree import DataTree, validate_tree
from valuestore.formats.base import Codec


class _StoreDumper(yaml.SafeDumper):
    """SafeDumper writing multi-line strings as literal blocks, without anchors."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_str(data)


_StoreDumper.add_representer(str, _represent_str)


class StoreLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps as plain strings."""


StoreLoader.add_constructor(
    "tag:yaml.org,2002:timestamp", StoreLoader.construct_yaml_str
)


def _stringify_keys(value: Any) -> Any:
    """Mapping keys in YAML may be ints or bools; the store only knows strings."""
    if isinstance(value, dict):
        return {
            (key if isinstance(key, str) else _key_text(key)): _stringify_keys(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_stringify_keys(item) for item in value]
    return value


def _key_text(key: Any) -> str:
    if key is None:
        return ""
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, (int, float)):
        return str(key)
    raise FormatError("yml", f"unsupported mapping key {key!r}")


class YamlCodec(Codec):
    """YAML format: a block-style mapping document, keys kept in order."""

    store_type = StoreType.YML

    def serialize(self, tree: Dict[str, DataTree]) -> str:
        return yaml.dump(
            tree,
            Dumper=_StoreDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    def _decode(self, text: str) -> Dict[str, DataTree]:
        try:
            data = yaml.load(text, Loader=StoreLoader)
        except yaml.YAMLError as e:
            raise FormatError(self.name, str(e)) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise FormatError(self.name, f"expected a mapping at top level, got {type(data).__name__}")

        data = _stringify_keys(data)
        try:
            validate_tree(data)
        except ValidationError as e:
            raise FormatError(self.name, str(e)) from e
        return data
