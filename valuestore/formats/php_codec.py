# valuestore/formats/php_codec.py

"""
PHP literal format.

Stores are written the way PHP's ``var_export`` prints arrays, so that the
file can be ``include``-d by PHP code::

    <?php
    return array (
      'name' => 'foo',
      'ports' =>
      array (
        0 => 8080,
      ),
    );

Reading never executes anything: the file is parsed as a literal
expression. Supported syntax is ``array(...)`` and ``[...]`` with
``key => value`` or positional entries, single- and double-quoted
strings, integers (decimal, hex, octal, binary), floats, ``true``,
``false``, ``null``, ``INF`` and ``NAN``, comments and an optional
``declare(...)`` statement. Variables, function calls and string
interpolation are rejected.

PHP arrays do not distinguish lists from maps. An array whose keys are
exactly ``0..n-1`` in order reads as a list; an empty ``[]`` reads as an
empty list and an empty ``array ()`` as an empty mapping.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from valuestore.core.exceptions import FormatError
from valuestore.core.models import StoreType
from valuestore.core.tree import DataTree
from valuestore.formats.base import Codec

OPEN_TAG = "<?php"
INDENT = "  "

# ==============================================================
# ENCODING
# ==============================================================

def _quote(text: str) -> str:
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _export_scalar(value: DataTree) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NAN"
        if math.isinf(value):
            return "INF" if value > 0 else "-INF"
        return repr(value)
    return _quote(value)


def _export(value: DataTree, indent: str = "") -> str:
    """Render ``value`` like var_export, nested arrays on their own lines."""
    if isinstance(value, list) and not value:
        return "[]"
    if not isinstance(value, (dict, list)):
        return _export_scalar(value)

    entries = value.items() if isinstance(value, dict) else enumerate(value)
    lines = ["array ("]
    for key, item in entries:
        key_text = str(key) if isinstance(key, int) else _quote(key)
        if isinstance(item, (dict, list)) and item:
            lines.append(f"{indent}{INDENT}{key_text} => ")
            lines.append(f"{indent}{INDENT}{_export(item, indent + INDENT)},")
        else:
            lines.append(f"{indent}{INDENT}{key_text} => {_export(item, indent + INDENT)},")
    lines.append(f"{indent})")
    return "\n".join(lines)

# ==============================================================
# TOKENIZER
# ==============================================================

NUMBER = (
    r"0[xX][0-9a-fA-F_]+"
    r"|0[bB][01_]+"
    r"|0[oO][0-7_]+"
    r"|(?:\d[\d_]*)?\.\d[\d_]*(?:[eE][+-]?\d+)?"
    r"|\d[\d_]*\.?(?:[eE][+-]?\d+)?"
)

TOKEN_PATTERN = re.compile(
    r"(?P<ws>\s+)"
    r"|(?P<comment>//[^\n]*|\#[^\n]*|/\*.*?\*/)"
    r"|(?P<open_tag><\?php\b)"
    r"|(?P<close_tag>\?>)"
    r"|(?P<arrow>=>)"
    r"|(?P<sq_string>'(?:[^'\\]|\\.)*')"
    r"|(?P<dq_string>\"(?:[^\"\\]|\\.)*\")"
    rf"|(?P<number>{NUMBER})"
    r"|(?P<name>[A-Za-z_\\][A-Za-z0-9_\\]*)"
    r"|(?P<punct>[()\[\],;=+\-])",
    re.DOTALL,
)

DQ_ESCAPE_PATTERN = re.compile(
    r"\\(?:(?P<simple>[nrtvef\\$\"])"
    r"|(?P<octal>[0-7]{1,3})"
    r"|x(?P<hex>[0-9a-fA-F]{1,2})"
    r"|u\{(?P<unicode>[0-9a-fA-F]+)\})"
)
DQ_SIMPLE_ESCAPES = {
    "n": "\n", "r": "\r", "t": "\t", "v": "\v", "e": "\x1b", "f": "\f",
    "\\": "\\", "$": "$", '"': '"',
}
INTERPOLATION_PATTERN = re.compile(r"(?<!\\)(?:\\\\)*\$[A-Za-z_{]|(?<!\\)(?:\\\\)*\{\$")

# PHP turns decimal-integer string keys into int keys
CANONICAL_INT_PATTERN = re.compile(r"^(?:0|-?[1-9]\d*)$")


@dataclass
class _Token:
    kind: str
    text: str
    line: int


def _tokenize(text: str) -> List[_Token]:
    tokens: List[_Token] = []
    pos = 0
    line = 1
    while pos < len(text):
        match = TOKEN_PATTERN.match(text, pos)
        if not match:
            raise FormatError("php", f"unexpected character {text[pos]!r} on line {line}")
        kind = match.lastgroup or ""
        if kind not in ("ws", "comment"):
            tokens.append(_Token(kind, match.group(), line))
        line += match.group().count("\n")
        pos = match.end()
    return tokens


def _unquote_single(body: str) -> str:
    return re.sub(r"\\([\\'])", r"\1", body)


def _unquote_double(body: str, line: int) -> str:
    if INTERPOLATION_PATTERN.search(body):
        raise FormatError("php", f"string interpolation is not supported on line {line}")

    def replace(match: "re.Match[str]") -> str:
        if match.group("simple"):
            return DQ_SIMPLE_ESCAPES[match.group("simple")]
        if match.group("octal"):
            return chr(int(match.group("octal"), 8) & 0xFF)
        if match.group("hex"):
            return chr(int(match.group("hex"), 16))
        return chr(int(match.group("unicode"), 16))

    return DQ_ESCAPE_PATTERN.sub(replace, body)


def _number(text: str, line: int) -> Union[int, float]:
    try:
        return _parse_number(text)
    except ValueError as e:
        raise FormatError("php", f"invalid number '{text}' on line {line}") from e


def _parse_number(text: str) -> Union[int, float]:
    digits = text.replace("_", "")
    lowered = digits.lower()
    if lowered.startswith("0x"):
        return int(digits[2:], 16)
    if lowered.startswith("0b"):
        return int(digits[2:], 2)
    if lowered.startswith("0o"):
        return int(digits[2:], 8)
    if any(c in lowered for c in ".e"):
        return float(digits)
    if len(digits) > 1 and digits.startswith("0"):
        return int(digits, 8)
    return int(digits)

# ==============================================================
# PARSER
# ==============================================================

_MISSING = object()

CONSTANTS: Dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "inf": math.inf,
    "nan": math.nan,
}


class _Parser:
    """Recursive-descent parser for a ``<?php return <literal>;`` file."""

    def __init__(self, tokens: List[_Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> Optional[_Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self) -> _Token:
        token = self.peek()
        if token is None:
            raise FormatError("php", "unexpected end of file")
        self.pos += 1
        return token

    def expect(self, text: str) -> _Token:
        token = self.next()
        if token.text.lower() != text:
            raise FormatError("php", f"expected '{text}' but found '{token.text}' on line {token.line}")
        return token

    def accept(self, text: str) -> bool:
        token = self.peek()
        if token is not None and token.text.lower() == text:
            self.pos += 1
            return True
        return False

    def parse_file(self) -> Any:
        first = self.next()
        if first.kind != "open_tag":
            raise FormatError("php", f"file must start with {OPEN_TAG}")

        while True:
            token = self.peek()
            if token is None or token.kind == "close_tag":
                return _MISSING
            keyword = token.text.lower()
            if keyword == "declare":
                self.parse_declare()
            elif keyword == "return":
                self.next()
                value = self.parse_value()
                self.expect(";")
                return value
            else:
                raise FormatError("php", f"unsupported statement '{token.text}' on line {token.line}")

    def parse_declare(self) -> None:
        self.expect("declare")
        self.expect("(")
        while not self.accept(")"):
            self.next()
        self.expect(";")

    def parse_value(self) -> Any:
        token = self.next()

        if token.kind == "punct" and token.text in "+-":
            sign = -1 if token.text == "-" else 1
            value = self.parse_value()
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise FormatError("php", f"unary '{token.text}' needs a number on line {token.line}")
            return sign * value
        if token.kind == "number":
            return _number(token.text, token.line)
        if token.kind == "sq_string":
            return _unquote_single(token.text[1:-1])
        if token.kind == "dq_string":
            return _unquote_double(token.text[1:-1], token.line)
        if token.text == "[":
            return self.parse_entries("]", short=True)
        if token.kind == "name":
            name = token.text.lstrip("\\").lower()
            if name == "array":
                self.expect("(")
                return self.parse_entries(")", short=False)
            if name in CONSTANTS:
                return CONSTANTS[name]

        raise FormatError("php", f"unsupported expression '{token.text}' on line {token.line}")

    def parse_entries(self, closing: str, short: bool) -> DataTree:
        entries: Dict[Union[int, str], DataTree] = {}
        next_index = 0

        while not self.accept(closing):
            start = self.peek()
            value = self.parse_value()
            if self.accept("=>"):
                key = _array_key(value, start)
                value = self.parse_value()
            else:
                key = next_index
            if isinstance(key, int) and key >= next_index:
                next_index = key + 1
            entries[key] = value

            if not self.accept(","):
                self.expect(closing)
                break

        return _to_tree(entries, short)


def _array_key(key: Any, token: Optional[_Token]) -> Union[int, str]:
    """Apply PHP's array key casting rules."""
    if key is None:
        return ""
    if isinstance(key, bool):
        return int(key)
    if isinstance(key, float):
        return int(key)
    if isinstance(key, int):
        return key
    if isinstance(key, str):
        return int(key) if CANONICAL_INT_PATTERN.match(key) else key
    line = token.line if token else "?"
    raise FormatError("php", f"illegal array key on line {line}")


def _to_tree(entries: Dict[Union[int, str], DataTree], short: bool) -> DataTree:
    if not entries:
        return [] if short else {}
    if list(entries.keys()) == list(range(len(entries))):
        return list(entries.values())
    return {str(key): value for key, value in entries.items()}


class PhpCodec(Codec):
    """PHP ``return array (...);`` source format, read without evaluation."""

    store_type = StoreType.PHP

    def serialize(self, tree: Dict[str, DataTree]) -> str:
        return f"{OPEN_TAG}\nreturn {_export(tree)};\n"

    def _decode(self, text: str) -> Dict[str, DataTree]:
        value = _Parser(_tokenize(text)).parse_file()

        if isinstance(value, list):
            return {str(index): item for index, item in enumerate(value)}
        if not isinstance(value, dict):
            raise FormatError(self.name, "PHP value-store does not return a mapping")
        return value
