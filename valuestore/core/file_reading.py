# valuestore/core/file_reading.py

"""
File access utilities for ValueStore.

This module reads store files with proper encoding detection and writes
them back while holding an exclusive lock on the target file.
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Union

import chardet

if os.name == "nt":
    import msvcrt
else:
    import fcntl


def read_store_file(path: Union[str, Path]) -> str:
    """
    Read a store file with the correct encoding (UTF-8, UTF-16, etc.).

    The decoded text is returned unchanged: line endings and control
    characters inside stored strings are data.

    Args:
        path: Path to file

    Returns:
        File content as string
    """
    raw = Path(path).read_bytes()
    if not raw:
        return ""

    # BOM-aware encodings first; utf-16 only when a BOM says so
    if raw.startswith((b"\xff\xfe", b"\xfe\xff")):
        return raw.decode("utf-16")
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    # Fallback to chardet detection
    detected = chardet.detect(raw)
    encoding = detected["encoding"] or "utf-8"
    try:
        return raw.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        # Last resort: force UTF-8 with replacement
        return raw.decode("utf-8", errors="replace")

# ==============================================================
# LOCKED WRITES
# ==============================================================

@contextmanager
def exclusive_lock(handle: BinaryIO) -> Iterator[BinaryIO]:
    """Hold an exclusive advisory lock on an open file."""
    if os.name == "nt":
        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_LOCK, 1)
        try:
            yield handle
        finally:
            handle.seek(0)
            msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
        try:
            yield handle
        finally:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


def write_store_file(path: Union[str, Path], content: str) -> None:
    """
    Overwrite a store file while holding an exclusive lock on it.

    The file is opened without truncation so that a concurrent writer's
    content is only replaced once the lock is held. Missing parent
    directories are created.

    Raises:
        OSError: The file could not be opened or written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = content.encode("utf-8")

    fd = os.open(path, os.O_WRONLY | os.O_CREAT, 0o644)
    with os.fdopen(fd, "wb") as handle:
        with exclusive_lock(handle):
            handle.seek(0)
            handle.truncate()
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
