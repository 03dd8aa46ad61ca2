"""
Read-only byte sources for the database parser.

A byte source is anything with ``read(byte_count, offset) -> bytes``. Reads
past the end of the underlying data return fewer bytes; deciding whether that
is an error is left to the parser.
"""

import logging
import os
from types import TracebackType
from typing import BinaryIO, Optional, Type, Union

logger = logging.getLogger(__name__)


class DatabaseFile:
    """A database file opened for reading."""

    def __init__(self, path: Union[str, os.PathLike]) -> None:
        self.path = os.fspath(path)
        self._file: Optional[BinaryIO] = open(self.path, "rb")
        logger.debug("Opened %s", self.path)

    def read(self, byte_count: int, offset: int) -> bytes:
        if self._file is None:
            raise ValueError(f"read from closed database file {self.path}")
        self._file.seek(offset)
        return self._file.read(byte_count)

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            logger.debug("Closed %s", self.path)

    @property
    def closed(self) -> bool:
        return self._file is None

    def __enter__(self) -> "DatabaseFile":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()


class BytesSource:
    """An in-memory byte source, for data already loaded from elsewhere."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    def read(self, byte_count: int, offset: int) -> bytes:
        return self._data[offset : offset + byte_count]
