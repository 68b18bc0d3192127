# valuestore/formats/xml_codec.py

"""
XML format.

The tree is wrapped in a root element (``<root>`` by default). Mappings
become child elements named after their keys, sequences become an element
with ``type="list"`` holding ``<item>`` children, and non-string scalars
carry a ``type`` attribute so that a saved document reads back with the
same Python types::

    <?xml version="1.0" encoding="UTF-8"?>
    <root>
      <name>foo</name>
      <account_id type="integer">1000</account_id>
      <ports type="list">
        <item type="integer">8080</item>
      </ports>
    </root>

Keys that are not valid element names are written as ``<item key="...">``.
Strings and keys holding characters XML 1.0 cannot carry (most control
characters) are stored base64-encoded, as ``type="base64"`` text or a
``key-base64`` attribute. Carriage returns are written as ``&#13;`` so the
parser does not fold them into line feeds.
Hand-written documents without ``type`` attributes read as strings, and
repeated sibling elements are collected into a list.
"""

import base64
import math
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, List

from valuestore.core.exceptions import ConfigurationError, FormatError
from valuestore.core.models import DEFAULT_XML_ROOT, XML_NAME_PATTERN, StoreType
from valuestore.core.tree import DataTree
from valuestore.formats.base import Codec

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
ITEM_TAG = "item"
KEY_ATTR = "key"
KEY64_ATTR = "key-base64"
TYPE_ATTR = "type"
XML_INDENT = "  "

# Characters outside the XML 1.0 Char production
INVALID_XML_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

# ==============================================================
# ENCODING
# ==============================================================

def _append(parent: ET.Element, key: str, value: DataTree) -> None:
    """Append ``value`` under ``parent`` as an element named after ``key``."""
    if XML_NAME_PATTERN.match(key):
        elem = ET.SubElement(parent, key)
    elif INVALID_XML_CHARS.search(key):
        elem = ET.SubElement(parent, ITEM_TAG, {KEY64_ATTR: _b64encode(key)})
    else:
        elem = ET.SubElement(parent, ITEM_TAG, {KEY_ATTR: key})
    _fill(elem, value)


def _fill(elem: ET.Element, value: DataTree) -> None:
    if isinstance(value, dict):
        if not value:
            elem.set(TYPE_ATTR, "map")
        for key, item in value.items():
            _append(elem, key, item)
    elif isinstance(value, list):
        elem.set(TYPE_ATTR, "list")
        for item in value:
            _fill(ET.SubElement(elem, ITEM_TAG), item)
    elif value is None:
        elem.set(TYPE_ATTR, "null")
    elif isinstance(value, bool):
        elem.set(TYPE_ATTR, "boolean")
        elem.text = "true" if value else "false"
    elif isinstance(value, int):
        elem.set(TYPE_ATTR, "integer")
        elem.text = str(value)
    elif isinstance(value, float):
        elem.set(TYPE_ATTR, "float")
        elem.text = _float_text(value)
    elif INVALID_XML_CHARS.search(value):
        elem.set(TYPE_ATTR, "base64")
        elem.text = _b64encode(value)
    elif value:
        elem.text = value


def _b64encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8", "surrogatepass")).decode("ascii")


def _float_text(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "INF" if value > 0 else "-INF"
    return repr(value)

# ==============================================================
# DECODING
# ==============================================================

def _read(elem: ET.Element) -> DataTree:
    kind = elem.get(TYPE_ATTR)

    if kind == "list":
        return [_read(child) for child in elem]
    if kind == "map" or (kind is None and len(elem)):
        return _read_mapping(elem)

    text = elem.text or ""
    if kind is None or kind == "string":
        return text
    if kind == "null":
        return None
    if kind == "boolean":
        flag = text.strip().lower()
        if flag not in ("true", "false", "1", "0"):
            raise FormatError("xml", f"invalid boolean '{text}' in <{elem.tag}>")
        return flag in ("true", "1")
    try:
        if kind == "integer":
            return int(text.strip())
        if kind == "float":
            return float(text.strip())
        if kind == "base64":
            return _b64decode(text)
    except ValueError as e:
        raise FormatError("xml", f"invalid {kind} '{text}' in <{elem.tag}>") from e

    raise FormatError("xml", f"unknown type '{kind}' in <{elem.tag}>")


def _b64decode(text: str) -> str:
    """Raises ValueError on text that is not base64 of UTF-8."""
    return base64.b64decode(text.strip(), validate=True).decode("utf-8", "surrogatepass")


def _read_mapping(elem: ET.Element) -> Dict[str, DataTree]:
    result: Dict[str, DataTree] = {}
    repeated: Dict[str, List[DataTree]] = {}

    for child in elem:
        encoded_key = child.get(KEY64_ATTR)
        if encoded_key is not None:
            try:
                key = _b64decode(encoded_key)
            except ValueError as e:
                raise FormatError("xml", f"invalid {KEY64_ATTR} '{encoded_key}'") from e
        else:
            key = child.get(KEY_ATTR, child.tag)
        value = _read(child)
        if key in repeated:
            repeated[key].append(value)
        elif key in result:
            repeated[key] = [result[key], value]
            result[key] = repeated[key]
        else:
            result[key] = value
    return result


class XmlCodec(Codec):
    """XML format wrapped in a configurable root element."""

    store_type = StoreType.XML

    def __init__(self, root: str = DEFAULT_XML_ROOT, pretty: bool = False):
        if not XML_NAME_PATTERN.match(root):
            raise ConfigurationError("root", root)
        self.root = root
        self.pretty = pretty

    def serialize(self, tree: Dict[str, DataTree]) -> str:
        document = ET.Element(self.root)
        for key, value in tree.items():
            _append(document, key, value)

        if self.pretty:
            ET.indent(document, space=XML_INDENT)

        # ElementTree leaves carriage returns in text as-is
        body = ET.tostring(document, encoding="unicode").replace("\r", "&#13;")
        if self.pretty:
            return f"{XML_DECLARATION}\n{body}\n"
        return f"{XML_DECLARATION}{body}"

    def _decode(self, text: str) -> Dict[str, DataTree]:
        try:
            document = ET.fromstring(text)
        except ET.ParseError as e:
            raise FormatError(self.name, str(e)) from e

        if document.tag != self.root:
            return {}
        return _read_mapping(document)

    def _options(self) -> Dict[str, Any]:
        return {"root": self.root, "pretty": self.pretty}
