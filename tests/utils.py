"""Builders for synthetic database files."""

import sqlite3
import struct

from dbinfo.header import HEADER_SIZE, SQLITE_MAGIC
from dbinfo.page import LEAF_TABLE
from dbinfo.record import write_varint


def text(value: str):
    raw = value.encode("utf-8")
    return 13 + 2 * len(raw), raw


def blob(raw: bytes):
    return 12 + 2 * len(raw), raw


def integer(value: int):
    return 4, struct.pack(">i", value)


def null():
    return 0, b""


def build_record(columns) -> bytes:
    """Record from (serial_type, body) pairs."""
    types = b"".join(write_varint(serial_type) for serial_type, _ in columns)

    header_size = len(types) + 1
    while len(write_varint(header_size)) + len(types) != header_size:
        header_size = len(write_varint(header_size)) + len(types)

    return write_varint(header_size) + types + b"".join(body for _, body in columns)


def build_table_leaf_cell(rowid: int, columns) -> bytes:
    payload = build_record(columns)
    return write_varint(len(payload)) + write_varint(rowid) + payload


def schema_cell(rowid: int, name: str, root_page: int = 2) -> bytes:
    """A sqlite_schema row describing a table."""
    return build_table_leaf_cell(
        rowid,
        [
            text("table"),
            text(name),
            text(name),
            (1, bytes([root_page])),
            text(f"CREATE TABLE {name} (id INTEGER PRIMARY KEY)"),
        ],
    )


def build_header(page_size: int = 4096, page_count: int = 1, magic: bytes = SQLITE_MAGIC) -> bytearray:
    header = bytearray(HEADER_SIZE)
    header[0:16] = magic
    struct.pack_into(">H", header, 16, 1 if page_size == 65536 else page_size)
    header[18:24] = bytes([1, 1, 0, 64, 32, 32])
    struct.pack_into(">I", header, 24, 3)  # change counter
    struct.pack_into(">I", header, 28, page_count)
    struct.pack_into(">I", header, 44, 4)  # schema format
    struct.pack_into(">I", header, 56, 1)  # UTF-8
    struct.pack_into(">I", header, 92, 3)  # version-valid-for
    struct.pack_into(">I", header, 96, 3045001)
    return header


def build_database(cells, page_size: int = 4096, page_count: int = 1, **kwargs) -> bytes:
    """Page 1 of a database whose schema page holds the given cells in order."""
    page = bytearray(page_size)
    page[:HEADER_SIZE] = build_header(page_size, page_count, **kwargs)

    content_start = page_size
    pointers = []
    for cell in cells:
        content_start -= len(cell)
        page[content_start : content_start + len(cell)] = cell
        pointers.append(content_start)

    struct.pack_into(">BHHHB", page, HEADER_SIZE, LEAF_TABLE, 0, len(cells), content_start % 65536, 0)
    struct.pack_into(f">{len(pointers)}H", page, HEADER_SIZE + 8, *pointers)

    return bytes(page)


def schema_table_names(db_path):
    """tbl_name of every sqlite_master row, as SQLite reports them, in rowid order."""
    conn = sqlite3.connect(db_path)
    try:
        return [row[0] for row in conn.execute("SELECT tbl_name FROM sqlite_master ORDER BY rowid")]
    finally:
        conn.close()
