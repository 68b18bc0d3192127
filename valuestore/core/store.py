# valuestore/core/store.py

"""
Key-value store persisted to a single file.

A ValueStore holds a tree of settings in memory, validates every write
and saves the whole tree to its file in JSON, XML, YAML or PHP format.
"""

from __future__ import annotations

import copy
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from valuestore.core.console import Console, ConsoleAware
from valuestore.core.exceptions import FormatError, ValidationError
from valuestore.core.file_reading import read_store_file, write_store_file
from valuestore.core.models import DEFAULT_XML_ROOT, StoreOptions, StoreType
from valuestore.core.tree import DataTree, check_amount, to_counter, validate_tree
from valuestore.formats import Codec, JsonCodec, PhpCodec, XmlCodec, YamlCodec, get_codec

# ==============================================================
# VALUE STORE CLASS
# ==============================================================

class ValueStore(ConsoleAware, MutableMapping):
    """
    Key-value store backed by an optional file.

    The format is taken from ``type`` or detected from the file extension
    (``json``, ``xml``, ``yml``, ``php``; anything else is JSON). If the file
    exists it is loaded right away; changes are only written by ``save``.

    Values returned by ``get`` and ``store[key]`` are the objects held by the
    store, so nested dicts and lists can be changed in place::

        store = ValueStore("settings.json")
        store["account"] = {"ports": [8080]}
        store.get("account")["ports"].append(3000)
        store.save()

    Args:
        file: File to load from and save to. None keeps the store in memory.
        type: Storage format, detected from ``file`` when omitted.
        root: XML root element name.
        escape: Escape forward slashes in saved JSON.
        console: Optional console for diagnostics.
        verbose: Log loads and saves to the console.

    Raises:
        ConfigurationError: Unknown ``type`` or invalid option (before any I/O).
        FormatError: The existing file cannot be decoded.
    """

    def __init__(
        self,
        file: Optional[Union[str, Path]] = None,
        *,
        type: Optional[Union[str, StoreType]] = None,
        root: str = DEFAULT_XML_ROOT,
        escape: bool = False,
        console: Optional[Console] = None,
        verbose: bool = False,
    ):
        super().__init__(console, verbose)
        self.options: StoreOptions = StoreOptions.resolve(file, type, root, escape)
        self.codec: Codec = get_codec(self.options)
        self._data: Dict[str, DataTree] = {}

        self.log(f"[dim]Using {self.type.value} format for {self.file or 'in-memory store'}[/dim]")
        if self.file is not None and self.file.exists():
            self._load()

    # ----------------------------------------------------------
    # Configuration
    # ----------------------------------------------------------

    @property
    def file(self) -> Optional[Path]:
        return self.options.file

    @property
    def type(self) -> StoreType:
        return self.options.type

    @property
    def root(self) -> str:
        return self.options.root

    @property
    def escape(self) -> bool:
        return self.options.escape

    # ----------------------------------------------------------
    # Load / save
    # ----------------------------------------------------------

    def _load(self) -> None:
        """Replace the tree with the decoded content of the file."""
        path: Path = self.file # type: ignore

        content = read_store_file(path)
        try:
            self._data = self.codec.deserialize(content)
        except FormatError as e:
            raise FormatError(e.format_name, e.details, str(path)) from e

        self.log(f"[dim]Loaded {len(self._data)} key(s) from {path}[/dim]")

    def save(self) -> bool:
        """
        Write the tree to the file, holding an exclusive lock while writing.

        Returns:
            True when written; False when the store has no file or the
            write failed.
        """
        if self.file is None:
            self.log("[dim]No file configured, nothing saved[/dim]")
            return False

        content = self.codec.serialize(self._data)
        try:
            write_store_file(self.file, content)
        except OSError as e:
            self.warn(f"Could not save {self.file}: {e}")
            return False

        self.log(f"[dim]Saved {len(self._data)} key(s) to {self.file}[/dim]")
        return True

    # ----------------------------------------------------------
    # Accessors
    # ----------------------------------------------------------

    def has(self, key: str) -> bool:
        """True if ``key`` is present, even when it holds None."""
        return key in self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored at ``key`` (not a copy), or ``default``."""
        return self._data.get(key, default)

    def set(self, key: Union[str, Mapping[str, Any]], value: Any = None) -> None:
        """
        Set one key, or every key of a mapping.

        The whole input is validated before anything is written, so a
        non-scalar value anywhere leaves the store untouched.

        Raises:
            ValidationError: A key is not a string or a leaf is not a scalar.
        """
        data = dict(key) if isinstance(key, Mapping) else {key: value}
        validate_tree(data)
        self._data.update(data)

    def unset(self, key: str) -> bool:
        """Remove ``key``. Returns False (and does nothing) if it was absent."""
        if key in self._data:
            del self._data[key]
            return True
        return False

    def clear(self) -> None:
        """Remove every key. The file is not touched until ``save``."""
        self._data = {}

    def count(self) -> int:
        return len(self._data)

    # ----------------------------------------------------------
    # Counters
    # ----------------------------------------------------------

    def increment(self, key: str, amount: int = 1) -> int:
        """
        Add ``amount`` to the integer at ``key`` and return the new value.

        A missing key starts at 0.

        Raises:
            ValidationError: The stored value is not an integer.
        """
        return self._step(key, check_amount(key, amount))

    def decrement(self, key: str, amount: int = 1) -> int:
        """Subtract ``amount`` from the integer at ``key`` and return the new value."""
        return self._step(key, -check_amount(key, amount))

    def _step(self, key: str, delta: int) -> int:
        if not isinstance(key, str):
            raise ValidationError(str(key), "key must be a string")

        current = self._data.get(key)
        value = 0 if current is None else to_counter(key, current)
        self._data[key] = value + delta
        return self._data[key]

    # ----------------------------------------------------------
    # Exports
    # ----------------------------------------------------------

    def to_dict(self) -> Dict[str, DataTree]:
        """Return a deep copy of the tree."""
        return copy.deepcopy(self._data)

    def to_json(self, pretty: bool = False, escape: bool = False) -> str:
        return JsonCodec(pretty=pretty, escape=escape).serialize(self._data)

    def to_xml(self, pretty: bool = False, root: Optional[str] = None) -> str:
        return XmlCodec(root=root or self.root, pretty=pretty).serialize(self._data)

    def to_yaml(self) -> str:
        return YamlCodec().serialize(self._data)

    def to_php(self) -> str:
        return PhpCodec().serialize(self._data)

    # ----------------------------------------------------------
    # Mapping protocol
    # ----------------------------------------------------------

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        if not self.unset(key):
            raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return self.count()

    def update(self, other: Any = (), /, **kwargs: Any) -> None:
        """Set several keys at once; validated as a whole like ``set(mapping)``."""
        data = dict(other, **kwargs)
        self.set(data)

    def __str__(self) -> str:
        return self.to_json()

    def __repr__(self) -> str:
        return f"ValueStore(file={str(self.file) if self.file else None!r}, type={self.type.value!r}, keys={len(self)})"


def json_default(obj: Any) -> Any:
    """
    ``default`` hook for ``json.dumps`` so stores can be embedded in JSON.

    ``json.dumps(store, default=json_default, separators=(",", ":"))`` gives
    the same text as ``store.to_json()``.
    """
    if isinstance(obj, ValueStore):
        return obj._data
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
