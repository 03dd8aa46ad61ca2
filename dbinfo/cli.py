"""
Show what the schema page of a SQLite database says about it.

Usage:
    dbinfo <db-file> .dbinfo           # Page size, page count, tables
    dbinfo <db-file> .tables           # Table names only
    dbinfo <db-file> .header           # Every database header field
    dbinfo <db-file> .page             # Root page header and cell pointers
    dbinfo <db-file> .dbinfo --strict  # Reject malformed database headers
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .errors import Error
from .file import DatabaseFile
from .parser import DatabaseParser

logger = logging.getLogger(__name__)

COMMANDS = (".dbinfo", ".tables", ".header", ".page")


def setup_logging(level: Optional[int] = None) -> None:
    level = level or logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s", force=True)


def cmd_dbinfo(parser: DatabaseParser) -> None:
    info = parser.parse()

    print(f"Page size: {info.page_size}")
    print(f"Page count: {info.page_count}")
    print(f"Number of tables: {info.number_of_tables}")
    print(f"Table names: {', '.join(info.table_names)}")


def cmd_tables(parser: DatabaseParser) -> None:
    print(" ".join(parser.parse().table_names))


def cmd_header(parser: DatabaseParser) -> None:
    header = parser.header()

    for name, value in header._asdict().items():
        if name == "reserved_expansion":
            value = value.hex()
        elif name == "magic":
            value = repr(value)
        print(f"{name}: {value}")

    print(f"usable_page_size: {header.usable_page_size}")
    print(f"encoding_name: {header.encoding_name}")


def cmd_page(parser: DatabaseParser) -> None:
    header, pointers = parser.root_page()

    print("Page 1")
    print("=" * 60)
    print(f"  Type:            0x{header.page_type:02x} ({header.type_name})")
    print(f"  Cell count:      {header.cell_count}")
    print(f"  Content start:   {header.cell_content_start}")
    print(f"  First freeblock: {header.first_freeblock}")
    print(f"  Fragmented:      {header.fragmented_bytes} bytes")

    if header.rightmost_ptr is not None:
        print(f"  Rightmost ptr:   {header.rightmost_ptr}")

    print(f"\nCell Pointers ({len(pointers)}):")
    print("-" * 40)
    for i, ptr in enumerate(pointers):
        print(f"  [{i:3d}] offset {ptr}")


HANDLERS = {
    ".dbinfo": cmd_dbinfo,
    ".tables": cmd_tables,
    ".header": cmd_header,
    ".page": cmd_page,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Show what the schema page of a SQLite database says about it")
    parser.add_argument("db_path", help="Path to database file")
    parser.add_argument("command", choices=COMMANDS, help="Command to run against the database")
    parser.add_argument("--strict", action="store_true", help="Reject malformed database headers")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log parsing steps")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if not os.path.exists(args.db_path):
        print(f"Error: Database not found: {args.db_path}", file=sys.stderr)
        return 1

    try:
        with DatabaseFile(args.db_path) as db_file:
            HANDLERS[args.command](DatabaseParser(db_file, strict=args.strict))
    except (Error, OSError) as e:
        logger.debug("Failed to run %s on %s", args.command, args.db_path, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
