"""
SQLite b-tree page parsing.

Page types:
- 0x02: Interior index B-tree page
- 0x05: Interior table B-tree page
- 0x0a: Leaf index B-tree page
- 0x0d: Leaf table B-tree page

The page header is 8 bytes on leaf pages and 12 on interior pages, which
carry an extra right-most child pointer. On page 1 it starts after the
100-byte database header.
"""

import struct
from typing import List, NamedTuple, Optional

from .errors import OutOfBoundsError, TruncatedPageError

INTERIOR_INDEX = 0x02
INTERIOR_TABLE = 0x05
LEAF_INDEX = 0x0A
LEAF_TABLE = 0x0D

PAGE_TYPES = {
    INTERIOR_INDEX: "interior index",
    INTERIOR_TABLE: "interior table",
    LEAF_INDEX: "leaf index",
    LEAF_TABLE: "leaf table",
}

LEAF_HEADER_SIZE = 8
INTERIOR_HEADER_SIZE = 12


class PageHeader(NamedTuple):
    """Parsed B-tree page header."""

    page_type: int
    type_name: str
    first_freeblock: int
    cell_count: int
    cell_content_start: int
    fragmented_bytes: int
    rightmost_ptr: Optional[int]  # Only for interior pages, 1-indexed page number
    header_size: int

    @property
    def is_leaf(self) -> bool:
        return self.page_type in (LEAF_INDEX, LEAF_TABLE)

    @property
    def is_interior(self) -> bool:
        return not self.is_leaf

    @property
    def is_index(self) -> bool:
        return self.page_type in (INTERIOR_INDEX, LEAF_INDEX)

    @property
    def is_table(self) -> bool:
        return self.page_type in (INTERIOR_TABLE, LEAF_TABLE)

    @property
    def rightmost_index(self) -> Optional[int]:
        """The right-most child as a 0-indexed page number."""
        if self.rightmost_ptr is None:
            return None
        return self.rightmost_ptr - 1


def page_header_size(page_type: int) -> int:
    """Header size for a page type: 8 for leaf pages, 12 for everything else."""
    if page_type in (LEAF_INDEX, LEAF_TABLE):
        return LEAF_HEADER_SIZE
    return INTERIOR_HEADER_SIZE


def parse_page_header(data: bytes, offset: int = 0) -> PageHeader:
    """
    Parse a B-tree page header.

    Args:
        data: Page data
        offset: Start of the header within data (100 for page 1)

    Returns:
        Parsed PageHeader

    Raises:
        TruncatedPageError: data ends before the header does
    """
    if offset >= len(data):
        raise TruncatedPageError(f"page header at offset {offset} is past end of {len(data)}-byte buffer")

    page_type = data[offset]
    header_size = page_header_size(page_type)

    if len(data) - offset < header_size:
        raise TruncatedPageError(
            f"page header too short: {len(data) - offset} bytes, need {header_size} for page type 0x{page_type:02x}"
        )

    first_freeblock, cell_count, cell_content_start, fragmented_bytes = struct.unpack(
        ">HHHB", data[offset + 1 : offset + 8]
    )

    # 0 means 65536
    if cell_content_start == 0:
        cell_content_start = 65536

    rightmost_ptr = None
    if header_size == INTERIOR_HEADER_SIZE:
        rightmost_ptr = struct.unpack(">I", data[offset + 8 : offset + 12])[0]

    return PageHeader(
        page_type=page_type,
        type_name=PAGE_TYPES.get(page_type, f"unknown (0x{page_type:02x})"),
        first_freeblock=first_freeblock,
        cell_count=cell_count,
        cell_content_start=cell_content_start,
        fragmented_bytes=fragmented_bytes,
        rightmost_ptr=rightmost_ptr,
        header_size=header_size,
    )


def get_cell_pointers(data: bytes, offset: int, header_size: int, cell_count: int) -> List[int]:
    """
    Read the cell pointer array that follows a page header.

    Args:
        data: Buffer holding the page header and the pointer array
        offset: Start of the page header within data
        header_size: Size of that page header
        cell_count: Number of pointers to read

    Returns:
        Page-relative cell offsets in storage order

    Raises:
        OutOfBoundsError: data is too short to hold cell_count pointers
    """
    start = offset + header_size
    end = start + cell_count * 2

    if end > len(data):
        raise OutOfBoundsError(
            f"cell pointer array of {cell_count} entries at offset {start} ends past buffer of {len(data)} bytes"
        )

    return list(struct.unpack(f">{cell_count}H", data[start:end]))
