"""
SQLite database file inspection.

Decodes the database header, the b-tree header of the schema page and the
schema records on it, without going through SQLite itself.
"""

from .errors import (
    DecodeError,
    Error,
    InvalidHeaderError,
    OutOfBoundsError,
    TruncatedHeaderError,
    TruncatedPageError,
)
from .file import BytesSource, DatabaseFile
from .header import (
    HEADER_SIZE,
    SQLITE_MAGIC,
    DatabaseHeader,
    parse_database_header,
    validate_database_header,
)
from .page import (
    PAGE_TYPES,
    PageHeader,
    get_cell_pointers,
    page_header_size,
    parse_page_header,
)
from .parser import (
    DatabaseInfo,
    DatabaseParser,
    get_table_names,
    parse_database,
)
from .record import (
    IndexLeafCell,
    SerialType,
    decode_serial_type,
    decode_value,
    parse_index_leaf_cell,
    parse_record,
    parse_table_leaf_cell,
    read_varint,
    serial_type_size,
    write_varint,
)

__all__ = [
    # Errors
    "Error",
    "TruncatedHeaderError",
    "TruncatedPageError",
    "OutOfBoundsError",
    "DecodeError",
    "InvalidHeaderError",
    # Files
    "DatabaseFile",
    "BytesSource",
    # Header
    "HEADER_SIZE",
    "SQLITE_MAGIC",
    "DatabaseHeader",
    "parse_database_header",
    "validate_database_header",
    # Page
    "PAGE_TYPES",
    "PageHeader",
    "page_header_size",
    "parse_page_header",
    "get_cell_pointers",
    # Record
    "SerialType",
    "IndexLeafCell",
    "read_varint",
    "write_varint",
    "decode_serial_type",
    "serial_type_size",
    "decode_value",
    "parse_record",
    "parse_table_leaf_cell",
    "parse_index_leaf_cell",
    # Parser
    "DatabaseInfo",
    "DatabaseParser",
    "parse_database",
    "get_table_names",
]
