"""
SQLite record format decoding.

SQLite records consist of:
- Header: varint header size (counting itself), followed by one serial type
  varint per column
- Body: column values in order, packed according to their serial types

Serial types:
- 0: NULL
- 1..6: big-endian signed integer of 1, 2, 3, 4, 6 or 8 bytes
- 7: IEEE 754 64-bit float
- 8: integer 0
- 9: integer 1
- 10, 11: reserved
- N >= 12 even: BLOB of (N-12)/2 bytes
- N >= 13 odd: TEXT of (N-13)/2 bytes

Column values are returned as strings, which is all the schema page reader
needs.
"""

import struct
from typing import List, NamedTuple, Tuple

from .errors import DecodeError, OutOfBoundsError

# Row id reported for NULL/reserved columns when the caller has none
DEFAULT_ROWID = -99999

MAX_VARINT_SIZE = 9

_INTEGER_SIZES = {1: 1, 2: 2, 3: 3, 4: 4, 5: 6, 6: 8}


class SerialType(NamedTuple):
    """Decoded serial type information."""

    type_code: int
    type_name: str
    byte_size: int

    @property
    def is_text(self) -> bool:
        return self.type_code >= 13 and self.type_code % 2 == 1

    @property
    def is_blob(self) -> bool:
        return self.type_code >= 12 and self.type_code % 2 == 0


class IndexLeafCell(NamedTuple):
    """The two leading columns of an index leaf cell."""

    indexed_value: str
    id: str


def read_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Read a SQLite varint from data at offset.

    Bytes are big-endian groups of 7 bits, terminated by the first byte with
    a clear high bit. The 9th byte, if reached, contributes all 8 of its bits,
    so a varint never spans more than 9 bytes. The result is not range
    checked: a 9-byte varint decodes to an unsigned 64-bit value.

    Returns:
        Tuple of (value, bytes_consumed)

    Raises:
        DecodeError: the data ends before the varint does
    """
    result = 0

    for i in range(MAX_VARINT_SIZE):
        if offset + i >= len(data):
            raise DecodeError(f"varint at offset {offset} runs past end of data ({len(data)} bytes)")

        byte = data[offset + i]

        if i < MAX_VARINT_SIZE - 1:
            result = (result << 7) | (byte & 0x7F)
            if byte < 0x80:
                return result, i + 1
        else:
            result = (result << 8) | byte

    return result, MAX_VARINT_SIZE


def write_varint(value: int) -> bytes:
    """Encode a non-negative integer below 2**64 as a canonical SQLite varint."""
    if value < 0 or value >= 1 << 64:
        raise ValueError(f"varint out of range: {value}")

    if value >= 1 << 56:
        out = bytearray(MAX_VARINT_SIZE)
        out[8] = value & 0xFF
        value >>= 8
        for i in range(7, -1, -1):
            out[i] = (value & 0x7F) | 0x80
            value >>= 7
        return bytes(out)

    groups = []
    while True:
        groups.append(value & 0x7F)
        value >>= 7
        if not value:
            break
    groups.reverse()

    return bytes([g | 0x80 for g in groups[:-1]] + [groups[-1]])


def decode_serial_type(type_code: int) -> SerialType:
    """Decode a serial type code into type information."""
    if type_code == 0:
        return SerialType(type_code, "NULL", 0)
    if type_code in _INTEGER_SIZES:
        size = _INTEGER_SIZES[type_code]
        return SerialType(type_code, f"INT{size * 8}", size)
    if type_code == 7:
        return SerialType(type_code, "FLOAT64", 8)
    if type_code == 8:
        return SerialType(type_code, "ZERO", 0)
    if type_code == 9:
        return SerialType(type_code, "ONE", 0)
    if type_code >= 12 and type_code % 2 == 0:
        size = (type_code - 12) // 2
        return SerialType(type_code, f"BLOB({size})", size)
    if type_code >= 13 and type_code % 2 == 1:
        size = (type_code - 13) // 2
        return SerialType(type_code, f"TEXT({size})", size)
    return SerialType(type_code, f"RESERVED({type_code})", 0)


def serial_type_size(type_code: int) -> int:
    """Number of bytes a column of this serial type occupies in the record body."""
    return decode_serial_type(type_code).byte_size


def _format_float(value: float) -> str:
    # whole numbers print without a fractional part, as 1.0 -> "1"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def decode_value(raw: bytes, type_code: int, rowid_fallback: int = DEFAULT_ROWID) -> str:
    """
    Decode one column value and stringify it.

    TEXT and BLOB decode the whole of ``raw``; fixed-width types read their
    leading bytes. Both constant types (8 and 9) decode to ``"0"``. NULL and
    reserved types yield ``rowid_fallback``, which is how the row id shows up
    in an INTEGER PRIMARY KEY column.

    Raises:
        DecodeError: raw is shorter than the serial type's size
    """
    serial_type = decode_serial_type(type_code)
    if len(raw) < serial_type.byte_size:
        raise DecodeError(
            f"serial type {type_code} needs {serial_type.byte_size} bytes, got {len(raw)}"
        )

    if serial_type.is_text:
        return bytes(raw).decode("utf-8", errors="replace")
    if serial_type.is_blob:
        return bytes(raw).hex()
    if type_code in _INTEGER_SIZES:
        return str(int.from_bytes(raw[: serial_type.byte_size], "big", signed=True))
    if type_code == 7:
        return _format_float(struct.unpack(">d", raw[:8])[0])
    if type_code in (8, 9):
        return "0"
    return str(rowid_fallback)


def parse_record(data: bytes, offset: int = 0, rowid_fallback: int = DEFAULT_ROWID) -> List[str]:
    """
    Parse a SQLite record starting at offset into stringified column values.

    Args:
        data: Buffer holding the record
        offset: Start of the record header within data
        rowid_fallback: Value reported for NULL and reserved columns

    Returns:
        Column values in record order

    Raises:
        DecodeError: the serial types overrun the declared header size
        OutOfBoundsError: a column extends past the end of data
    """
    header_size, n = read_varint(data, offset)
    pos = offset + n
    remaining = header_size - n

    serial_types = []
    while remaining > 0:
        type_code, n = read_varint(data, pos)
        serial_types.append(type_code)
        pos += n
        remaining -= n

    if remaining < 0:
        raise DecodeError(
            f"malformed record header at offset {offset}: serial types overrun header size {header_size}"
        )

    values = []
    for type_code in serial_types:
        size = serial_type_size(type_code)
        if pos + size > len(data):
            raise OutOfBoundsError(
                f"column of serial type {type_code} at offset {pos} ends past buffer of {len(data)} bytes"
            )
        values.append(decode_value(data[pos : pos + size], type_code, rowid_fallback))
        pos += size

    return values


def parse_table_leaf_cell(cell: bytes, offset: int = 0) -> List[str]:
    """
    Parse a table leaf cell: varint payload size, varint rowid, record.

    The rowid stands in for NULL columns of the record.
    """
    _payload_size, n1 = read_varint(cell, offset)
    rowid, n2 = read_varint(cell, offset + n1)
    return parse_record(cell, offset + n1 + n2, rowid)


def parse_index_leaf_cell(cell: bytes, offset: int = 0) -> IndexLeafCell:
    """Parse an index leaf cell: varint payload size, then a (value, rowid) record."""
    _payload_size, n = read_varint(cell, offset)
    values = parse_record(cell, offset + n)

    if len(values) < 2:
        raise DecodeError(f"malformed index cell at offset {offset}: expected 2 columns, got {len(values)}")

    return IndexLeafCell(indexed_value=values[0], id=values[1])
