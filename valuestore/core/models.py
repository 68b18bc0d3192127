# valuestore/core/models.py

"""
Core models for ValueStore.

This module contains the supported storage formats and the construction
options of a store.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from valuestore.core.exceptions import ConfigurationError

# ==============================================================
# STORE TYPES
# ==============================================================

class StoreType(str, Enum):
    """On-disk formats a store can be saved as (also the detected extensions)."""
    JSON = "json"
    XML = "xml"
    YML = "yml"
    PHP = "php"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


DEFAULT_TYPE = StoreType.JSON
DEFAULT_XML_ROOT = "root"

# XML 1.0 element names, restricted to ASCII
XML_NAME_PATTERN = re.compile(r"\A[A-Za-z_][A-Za-z0-9_.\-]*\Z")


def detect_type(file: Optional[Union[str, Path]]) -> StoreType:
    """
    Infer the store type from the file extension (case-insensitive).

    Unknown or missing extensions fall back to JSON.
    """
    if not file:
        return DEFAULT_TYPE

    extension = Path(file).suffix.lstrip(".").lower()
    if extension in StoreType.values():
        return StoreType(extension)
    return DEFAULT_TYPE

# ==============================================================
# STORE OPTIONS
# ==============================================================

class StoreOptions(BaseModel):
    """Construction parameters of a ValueStore."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    file: Optional[Path] = Field(
        default=None,
        description="File the store is loaded from and saved to. None keeps the store in memory."
    )
    type: StoreType = Field(
        default=DEFAULT_TYPE,
        description="Storage format. Detected from the file extension when not given."
    )
    root: str = Field(
        default=DEFAULT_XML_ROOT,
        description="Name of the XML root element (XML only)"
    )
    escape: bool = Field(
        default=False,
        description="Escape forward slashes when writing JSON (JSON only)"
    )

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        if not XML_NAME_PATTERN.match(v):
            raise ValueError(f"root must be a valid XML element name, got '{v}'")
        return v

    @classmethod
    def resolve(
        cls,
        file: Optional[Union[str, Path]] = None,
        type: Optional[Union[str, StoreType]] = None,
        root: str = DEFAULT_XML_ROOT,
        escape: bool = False,
    ) -> "StoreOptions":
        """
        Build options from constructor arguments.

        Raises:
            ConfigurationError: Unknown type or otherwise invalid option.
        """
        if type is None:
            store_type = detect_type(file)
        elif isinstance(type, StoreType):
            store_type = type
        elif isinstance(type, str) and type in StoreType.values():
            store_type = StoreType(type)
        else:
            raise ConfigurationError("type", type, StoreType.values())

        try:
            return cls(
                file=Path(file) if file else None,
                type=store_type,
                root=root,
                escape=escape,
            )
        except PydanticValidationError as e:
            error = e.errors()[0]
            option = ".".join(str(loc) for loc in error["loc"]) or "options"
            raise ConfigurationError(option, error["msg"]) from e
