"""Thin TCP socket wrapper for talking to an apcupsd NIS server."""

import time
import socket
import logging

from apcupsd_exporter.core.errors import NISConnectionError, ProtocolError
from apcupsd_exporter.protocol.constants import CONNECT_TIMEOUT, READ_TIMEOUT

logger = logging.getLogger(__name__)


class NISConnection:
    """Socket wrapper for one NIS request/response exchange.

    Usable as a context manager so the socket is closed on every exit path.
    Every read is bounded: by the remaining time until ``deadline`` (a
    ``time.monotonic()`` value) when one is given, otherwise by
    ``read_timeout`` per read.
    """

    def __init__(self, connect_timeout: float = CONNECT_TIMEOUT,
                 read_timeout: float = READ_TIMEOUT,
                 deadline: float | None = None):
        self._sock: socket.socket | None = None
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.deadline = deadline

    def __enter__(self) -> "NISConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def open(self, host: str, port: int) -> None:
        """Dial the daemon. Any failure is raised as NISConnectionError."""
        if self._sock is not None:
            self.close()

        timeout = self.connect_timeout
        if self.deadline is not None:
            timeout = min(timeout, self._remaining())
        try:
            self._sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as e:
            raise NISConnectionError(
                f"Unable to connect to {host}:{port}: {e}") from e
        logger.debug("Connected to %s:%s", host, port)

    def close(self) -> None:
        """Close the socket. Safe to call more than once."""
        if self._sock is None:
            return
        try:
            self._sock.close()
        except OSError as e:
            logger.debug("Error closing NIS connection: %s", e)
        finally:
            self._sock = None

    def write(self, data: bytes) -> None:
        """Send all of `data` to the daemon."""
        if self._sock is None:
            raise NISConnectionError("NIS connection is not open")
        self._sock.settimeout(self._read_timeout())
        try:
            self._sock.sendall(data)
        except OSError as e:
            raise NISConnectionError(f"Error writing to daemon: {e}") from e

    def read_exact(self, size: int) -> bytes:
        """Read exactly `size` bytes.

        Raises NISConnectionError on a socket error or timeout, and
        ProtocolError if the peer closes before `size` bytes arrived.
        """
        if self._sock is None:
            raise NISConnectionError("NIS connection is not open")
        buf = bytearray()
        while len(buf) < size:
            self._sock.settimeout(self._read_timeout())
            try:
                chunk = self._sock.recv(size - len(buf))
            except socket.timeout as e:
                raise NISConnectionError(
                    "Timed out waiting for daemon response") from e
            except OSError as e:
                raise NISConnectionError(
                    f"Error reading from daemon: {e}") from e
            if not chunk:
                raise ProtocolError(
                    f"Connection closed by daemon after {len(buf)} of {size} bytes")
            buf.extend(chunk)
        return bytes(buf)

    def _remaining(self) -> float:
        remaining = self.deadline - time.monotonic()
        if remaining <= 0:
            raise NISConnectionError("Scrape deadline exceeded")
        return remaining

    def _read_timeout(self) -> float:
        if self.deadline is None:
            return self.read_timeout
        return self._remaining()
