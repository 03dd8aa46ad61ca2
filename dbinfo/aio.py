"""
Async schema page reader.

Same pipeline as ``dbinfo.parser`` with the reads awaited, so it runs under
any anyio backend (asyncio or trio).
"""

from __future__ import annotations

import logging
import os
from types import TracebackType
from typing import Optional, Protocol, Union

import anyio

from .header import HEADER_SIZE, DatabaseHeader
from .page import INTERIOR_HEADER_SIZE, PageHeader, parse_page_header
from .parser import (
    DatabaseInfo,
    build_info,
    decode_cell_pointers,
    decode_header,
    get_table_names,
    pointer_array_span,
)

logger = logging.getLogger(__name__)


class AsyncByteSource(Protocol):
    async def read(self, byte_count: int, offset: int) -> bytes: ...


class AsyncDatabaseFile:
    """A database file opened for reading through anyio.

    Use as ``async with AsyncDatabaseFile(path) as f`` or ``f = await AsyncDatabaseFile(path)``.
    """

    def __init__(self, path: Union[str, os.PathLike]) -> None:
        self.path = os.fspath(path)
        self._file: Optional[anyio.AsyncFile[bytes]] = None

    async def open(self) -> "AsyncDatabaseFile":
        if self._file is None:
            self._file = await anyio.open_file(self.path, "rb")
            logger.debug("Opened %s", self.path)
        return self

    async def read(self, byte_count: int, offset: int) -> bytes:
        if self._file is None:
            raise ValueError(f"read from unopened database file {self.path}")
        await self._file.seek(offset)
        return await self._file.read(byte_count)

    async def aclose(self) -> None:
        if self._file is not None:
            await self._file.aclose()
            self._file = None
            logger.debug("Closed %s", self.path)

    def __await__(self):
        return self.open().__await__()

    async def __aenter__(self) -> "AsyncDatabaseFile":
        return await self.open()

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()


async def read_header(source: AsyncByteSource, strict: bool = False) -> DatabaseHeader:
    return decode_header(await source.read(HEADER_SIZE, 0), strict)


async def read_root_page_header(source: AsyncByteSource) -> PageHeader:
    return parse_page_header(await source.read(INTERIOR_HEADER_SIZE, HEADER_SIZE))


async def parse_database(source: AsyncByteSource, strict: bool = False) -> DatabaseInfo:
    """Async counterpart of dbinfo.parser.parse_database."""
    header = await read_header(source, strict)
    page_header = await read_root_page_header(source)
    cell_pointers = decode_cell_pointers(await source.read(*pointer_array_span(page_header)), page_header)
    page = await source.read(header.usable_page_size, 0)

    return build_info(header, page_header, get_table_names(page, cell_pointers))


async def parse_file(path: Union[str, os.PathLike], strict: bool = False) -> DatabaseInfo:
    """Open a database file, read its schema page summary and close it."""
    async with AsyncDatabaseFile(path) as source:
        return await parse_database(source, strict)
