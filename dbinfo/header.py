"""
SQLite database header parsing.

The first 100 bytes of a database file hold the database header. All
multibyte fields are big-endian:

    offset  size  field
    0       16    header string "SQLite format 3\\0"
    16      2     page size (1 means 65536)
    18      1     file format write version
    19      1     file format read version
    20      1     reserved space at end of each page
    21      1     maximum embedded payload fraction (64)
    22      1     minimum embedded payload fraction (32)
    23      1     leaf payload fraction (32)
    24      4     file change counter
    28      4     database size in pages
    32      4     first freelist trunk page
    36      4     total freelist pages
    40      4     schema cookie
    44      4     schema format number
    48      4     default page cache size
    52      4     largest root b-tree page (auto-vacuum)
    56      4     text encoding (1 UTF-8, 2 UTF-16le, 3 UTF-16be)
    60      4     user version
    64      4     incremental vacuum mode
    68      4     application id
    72      20    reserved for expansion, zero
    92      4     version-valid-for number
    96      4     SQLITE_VERSION_NUMBER
"""

import struct
from typing import NamedTuple

from .errors import InvalidHeaderError, TruncatedHeaderError

HEADER_SIZE = 100
SQLITE_MAGIC = b"SQLite format 3\x00"

MIN_PAGE_SIZE = 512
MAX_PAGE_SIZE = 32768

TEXT_ENCODINGS = {
    1: "UTF-8",
    2: "UTF-16le",
    3: "UTF-16be",
}

# magic, page size, 6 single-byte fields, 12 u32 fields, expansion, 2 u32 fields
_HEADER_FORMAT = ">16sH6B12I20s2I"


class DatabaseHeader(NamedTuple):
    """Parsed 100-byte database header."""

    magic: str
    page_size: int
    write_version: int
    read_version: int
    reserved_space: int
    max_payload_fraction: int
    min_payload_fraction: int
    leaf_payload_fraction: int
    change_counter: int
    page_count: int
    first_freelist_trunk: int
    freelist_page_count: int
    schema_cookie: int
    schema_format: int
    default_cache_size: int
    largest_root_page: int
    text_encoding: int
    user_version: int
    incremental_vacuum: int
    application_id: int
    reserved_expansion: bytes
    version_valid_for: int
    sqlite_version: int

    @property
    def usable_page_size(self) -> int:
        """Page size in bytes, with the sentinel 1 expanded to 65536."""
        return 65536 if self.page_size == 1 else self.page_size

    @property
    def encoding_name(self) -> str:
        return TEXT_ENCODINGS.get(self.text_encoding, "unknown")


def parse_database_header(data: bytes) -> DatabaseHeader:
    """
    Parse the database header from the first bytes of a database file.

    No field is validated here, see validate_database_header.

    Raises:
        TruncatedHeaderError: fewer than 100 bytes were given
    """
    if len(data) < HEADER_SIZE:
        raise TruncatedHeaderError(f"database header too short: {len(data)} bytes, need {HEADER_SIZE}")

    fields = struct.unpack(_HEADER_FORMAT, data[:HEADER_SIZE])
    magic = fields[0].decode("latin-1")

    return DatabaseHeader(magic, *fields[1:])


def validate_database_header(header: DatabaseHeader) -> None:
    """
    Check the documented header invariants.

    Raises:
        InvalidHeaderError: bad header string, page size or expansion bytes
    """
    if header.magic.encode("latin-1") != SQLITE_MAGIC:
        raise InvalidHeaderError(f"not a database file: header string {header.magic!r}")

    page_size = header.page_size
    valid_size = page_size == 1 or (
        MIN_PAGE_SIZE <= page_size <= MAX_PAGE_SIZE and page_size & (page_size - 1) == 0
    )
    if not valid_size:
        raise InvalidHeaderError(f"invalid page size: {page_size}")

    if any(header.reserved_expansion):
        raise InvalidHeaderError("reserved expansion bytes are not zero")
