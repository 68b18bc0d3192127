# valuestore/formats/base.py

"""
Platform-agnostic codec interface.

A codec turns a store tree into the text of one on-disk format and back.
Concrete formats override ``serialize`` and ``_decode``; empty content is
handled here so every format reads an empty file as an empty store.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from valuestore.core.models import StoreType
from valuestore.core.tree import DataTree


class Codec(ABC):
    """Serializer/deserializer pair bound to one storage format."""

    store_type: StoreType

    @property
    def name(self) -> str:
        return self.store_type.value

    @abstractmethod
    def serialize(self, tree: Dict[str, DataTree]) -> str:
        """Encode ``tree`` as text."""

    def deserialize(self, text: str) -> Dict[str, DataTree]:
        """
        Decode ``text`` into a tree.

        Empty or whitespace-only text gives an empty mapping without
        invoking the format's decoder.

        Raises:
            FormatError: The text is not valid for this format.
        """
        if not text or not text.strip():
            return {}
        return self._decode(text)

    @abstractmethod
    def _decode(self, text: str) -> Dict[str, DataTree]:
        ...

    def __repr__(self) -> str:
        options = ", ".join(f"{k}={v!r}" for k, v in self._options().items())
        return f"{type(self).__name__}({options})"

    def _options(self) -> Dict[str, Any]:
        return {}
