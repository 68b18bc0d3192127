# valuestore/formats/json_codec.py

import json
from typing import Any, Dict

from valuestore.core.exceptions import FormatError
from valuestore.core.models import StoreType
from valuestore.core.tree import DataTree
from valuestore.formats.base import Codec

JSON_INDENT = 4


class JsonCodec(Codec):
    """
    JSON format.

    Compact output uses no whitespace at all (``{"foo":"bar"}``); pretty
    output is indented with 4 spaces. Forward slashes are only escaped
    when ``escape`` is set, which matters for values holding URLs.
    """

    store_type = StoreType.JSON

    def __init__(self, pretty: bool = False, escape: bool = False):
        self.pretty = pretty
        self.escape = escape

    def serialize(self, tree: Dict[str, DataTree]) -> str:
        if self.pretty:
            text = json.dumps(tree, indent=JSON_INDENT)
        else:
            text = json.dumps(tree, separators=(",", ":"))

        # "/" can only occur inside string literals of the encoded document
        if self.escape:
            text = text.replace("/", "\\/")
        return text

    def _decode(self, text: str) -> Dict[str, DataTree]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise FormatError(self.name, f"{e.msg} (line {e.lineno}, column {e.colno})") from e

        if not isinstance(data, dict):
            raise FormatError(self.name, f"expected an object at top level, got {type(data).__name__}")
        return data

    def _options(self) -> Dict[str, Any]:
        return {"pretty": self.pretty, "escape": self.escape}
