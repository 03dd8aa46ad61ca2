"""
Schema page reader.

Reads the database header and the root page of the schema table (page 1) and
reports the page size, the page count and the names of the tables listed on
that page. Each stage hands its result to the next one; nothing is cached
between calls.

Only the root page is looked at. On a database whose schema spills over
several pages the root page is an interior page and its cells are not table
records, so the result is meaningless for such files.
"""

import logging
from typing import List, NamedTuple, Protocol, Tuple

from .errors import DecodeError, OutOfBoundsError
from .header import HEADER_SIZE, DatabaseHeader, parse_database_header, validate_database_header
from .page import INTERIOR_HEADER_SIZE, PageHeader, get_cell_pointers, parse_page_header
from .record import parse_table_leaf_cell

logger = logging.getLogger(__name__)

# sqlite_schema columns: type, name, tbl_name, rootpage, sql
SCHEMA_TABLE_NAME_COLUMN = 2


class ByteSource(Protocol):
    def read(self, byte_count: int, offset: int) -> bytes: ...


class DatabaseInfo(NamedTuple):
    """What the schema page says about a database."""

    page_size: int
    page_count: int
    number_of_tables: int
    table_names: List[str]


def decode_header(data: bytes, strict: bool = False) -> DatabaseHeader:
    """Parse the database header, validating it first when strict."""
    header = parse_database_header(data)
    if strict:
        validate_database_header(header)

    logger.debug(
        "Database header: page size %d, %d pages, encoding %s",
        header.usable_page_size,
        header.page_count,
        header.encoding_name,
    )
    return header


def pointer_array_span(page_header: PageHeader) -> Tuple[int, int]:
    """(byte_count, offset) of the root page header plus its cell pointer array."""
    return page_header.header_size + page_header.cell_count * 2, HEADER_SIZE


def decode_cell_pointers(data: bytes, page_header: PageHeader) -> List[int]:
    """Decode the cell pointers from bytes read at pointer_array_span."""
    return get_cell_pointers(data, 0, page_header.header_size, page_header.cell_count)


def get_table_names(page: bytes, cell_pointers: List[int]) -> List[str]:
    """
    Read the table name of every schema record on the root page.

    Records shaped like sqlite_schema rows give their tbl_name column; shorter
    records give their last column.

    Args:
        page: The whole of page 1, database header included
        cell_pointers: Cell offsets relative to the start of the page

    Raises:
        OutOfBoundsError: a cell pointer lies outside the page
        DecodeError: a cell holds an empty record
    """
    names = []
    for i, pointer in enumerate(cell_pointers):
        if pointer >= len(page):
            raise OutOfBoundsError(f"cell pointer {i} ({pointer}) is outside the {len(page)}-byte page")

        values = parse_table_leaf_cell(page, pointer)
        if not values:
            raise DecodeError(f"schema cell {i} at offset {pointer} has no columns")

        names.append(values[min(SCHEMA_TABLE_NAME_COLUMN, len(values) - 1)])

    return names


def build_info(header: DatabaseHeader, page_header: PageHeader, table_names: List[str]) -> DatabaseInfo:
    return DatabaseInfo(
        page_size=header.page_size,
        page_count=header.page_count,
        number_of_tables=page_header.cell_count,
        table_names=table_names,
    )


def read_header(source: ByteSource, strict: bool = False) -> DatabaseHeader:
    return decode_header(source.read(HEADER_SIZE, 0), strict)


def read_root_page_header(source: ByteSource) -> PageHeader:
    """Parse the b-tree header of page 1, which follows the database header."""
    page_header = parse_page_header(source.read(INTERIOR_HEADER_SIZE, HEADER_SIZE))
    logger.debug("Root page: %s, %d cells", page_header.type_name, page_header.cell_count)
    return page_header


def read_cell_pointers(source: ByteSource, page_header: PageHeader) -> List[int]:
    return decode_cell_pointers(source.read(*pointer_array_span(page_header)), page_header)


def parse_database(source: ByteSource, strict: bool = False) -> DatabaseInfo:
    """
    Read the schema page summary from a byte source.

    Args:
        source: Anything with read(byte_count, offset)
        strict: Reject headers with a bad header string, page size or
            expansion bytes

    Returns:
        DatabaseInfo for the database

    Raises:
        dbinfo.errors.Error: the file could not be decoded
        OSError: the source failed to read
    """
    header = read_header(source, strict)
    page_header = read_root_page_header(source)
    cell_pointers = read_cell_pointers(source, page_header)
    page = source.read(header.usable_page_size, 0)

    return build_info(header, page_header, get_table_names(page, cell_pointers))


class DatabaseParser:
    """Schema page reader bound to one byte source."""

    def __init__(self, source: ByteSource, strict: bool = False) -> None:
        self._source = source
        self._strict = strict

    def header(self) -> DatabaseHeader:
        return read_header(self._source, self._strict)

    def root_page(self) -> Tuple[PageHeader, List[int]]:
        """The root page header and its cell pointers."""
        page_header = read_root_page_header(self._source)
        return page_header, read_cell_pointers(self._source, page_header)

    def parse(self) -> DatabaseInfo:
        return parse_database(self._source, self._strict)
