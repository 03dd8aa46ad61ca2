import pytest
from dbinfo.errors import OutOfBoundsError, TruncatedPageError
from dbinfo.page import (
    INTERIOR_INDEX,
    INTERIOR_TABLE,
    LEAF_INDEX,
    LEAF_TABLE,
    get_cell_pointers,
    page_header_size,
    parse_page_header,
)

LEAF_TABLE_HEADER = bytes([0x0D, 0x00, 0x00, 0x00, 0x02, 0x0F, 0xF0, 0x00])
INTERIOR_TABLE_HEADER = bytes([0x05, 0x00, 0x10, 0x00, 0x01, 0x00, 0x00, 0x03, 0x00, 0x00, 0x00, 0x07])


@pytest.mark.parametrize(
    "page_type,size",
    [(LEAF_TABLE, 8), (LEAF_INDEX, 8), (INTERIOR_INDEX, 12), (INTERIOR_TABLE, 12)],
)
def test_page_header_size(page_type, size):
    assert page_header_size(page_type) == size


@pytest.mark.parametrize("page_type", [LEAF_TABLE, LEAF_INDEX])
def test_leaf_header_has_no_rightmost_pointer(page_type):
    header = parse_page_header(bytes([page_type]) + LEAF_TABLE_HEADER[1:])

    assert header.header_size == 8
    assert header.rightmost_ptr is None
    assert header.rightmost_index is None
    assert header.is_leaf


@pytest.mark.parametrize("page_type", [INTERIOR_INDEX, INTERIOR_TABLE])
def test_interior_header_has_rightmost_pointer(page_type):
    header = parse_page_header(bytes([page_type]) + INTERIOR_TABLE_HEADER[1:])

    assert header.header_size == 12
    assert header.rightmost_ptr == 7
    assert header.rightmost_index == 6
    assert header.is_interior


def test_parse_leaf_table_header():
    header = parse_page_header(LEAF_TABLE_HEADER)

    assert header.page_type == LEAF_TABLE
    assert header.type_name == "leaf table"
    assert header.first_freeblock == 0
    assert header.cell_count == 2
    assert header.cell_content_start == 4080
    assert header.fragmented_bytes == 0
    assert header.is_table
    assert not header.is_index


def test_parse_interior_table_header():
    header = parse_page_header(INTERIOR_TABLE_HEADER)

    assert header.type_name == "interior table"
    assert header.first_freeblock == 16
    assert header.cell_count == 1
    assert header.cell_content_start == 65536
    assert header.fragmented_bytes == 3


def test_parse_header_at_offset():
    header = parse_page_header(bytes(100) + LEAF_TABLE_HEADER, 100)
    assert header.cell_count == 2


def test_unknown_page_type():
    header = parse_page_header(bytes([0x07]) + INTERIOR_TABLE_HEADER[1:])

    assert header.type_name == "unknown (0x07)"
    assert header.header_size == 12


@pytest.mark.parametrize(
    "data,offset",
    [
        (b"", 0),
        (LEAF_TABLE_HEADER[:7], 0),
        (INTERIOR_TABLE_HEADER[:8], 0),
        (bytes(100) + LEAF_TABLE_HEADER[:4], 100),
        (bytes(100), 100),
    ],
)
def test_truncated_page_header(data, offset):
    with pytest.raises(TruncatedPageError):
        parse_page_header(data, offset)


def test_get_cell_pointers():
    data = LEAF_TABLE_HEADER + bytes([0x0F, 0xF0, 0x0F, 0xE0])
    assert get_cell_pointers(data, 0, 8, 2) == [4080, 4064]


def test_get_cell_pointers_after_database_header():
    data = bytes(100) + INTERIOR_TABLE_HEADER + bytes([0x01, 0x00])
    assert get_cell_pointers(data, 100, 12, 1) == [256]


def test_get_cell_pointers_empty_page():
    assert get_cell_pointers(LEAF_TABLE_HEADER, 0, 8, 0) == []


def test_get_cell_pointers_short_buffer():
    data = LEAF_TABLE_HEADER + bytes([0x0F, 0xF0, 0x0F])

    with pytest.raises(OutOfBoundsError):
        get_cell_pointers(data, 0, 8, 2)
