"""Exceptions raised while scraping an apcupsd daemon."""


class NISError(Exception):
    """Base class for every fatal scrape error."""


class NISConnectionError(NISError, ConnectionError):
    """Dial, socket read/write failure, or an exceeded read deadline."""


class ProtocolError(NISError):
    """The daemon's frame stream could not be decoded.

    Raised when a frame length cannot be read or the peer closes the
    connection mid-frame or before the zero-length terminator.
    """


class FieldParseError(NISError, ValueError):
    """A recognised numeric or duration key held a malformed value."""

    def __init__(self, key: str, value: str, reason: str = ""):
        self.key = key
        self.value = value
        message = f"Cannot parse {key or 'field'} value {value!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
