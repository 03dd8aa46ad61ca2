"""
Exception hierarchy for database file decoding.

Every error raised while decoding a database file derives from ``Error``, so
callers that only care about "the file could not be parsed" can catch that.
I/O failures from the byte source are not wrapped and surface as ``OSError``.
"""


class Error(Exception):
    pass


class TruncatedHeaderError(Error):
    """Fewer bytes were available than a fixed-layout header needs."""


class TruncatedPageError(Error):
    """A b-tree page header was read short."""


class OutOfBoundsError(Error):
    """A computed offset or size points past the end of its buffer."""


class DecodeError(Error):
    """Bytes could not be decoded (bad varint, malformed record or cell)."""


class InvalidHeaderError(DecodeError):
    """The database header failed strict validation."""
