"""apcupsd NIS protocol handler: length-prefixed request and response frames."""

import struct
import logging
from typing import Callable, Iterator

from apcupsd_exporter.core.errors import ProtocolError
from apcupsd_exporter.protocol.nis_conn import NISConnection
from apcupsd_exporter.protocol.constants import (
    FRAME_LENGTH_FORMAT, FRAME_LENGTH_SIZE, MAX_FRAME_SIZE,
)

logger = logging.getLogger(__name__)

IOCallback = Callable[[str, str], None]  # (direction "TX"/"RX", data)


def encode_frame(command: str) -> bytes:
    """Encode `command` as a 2-byte big-endian length followed by ASCII bytes.

    >>> encode_frame("status")
    b'\\x00\\x06status'
    """
    try:
        data = command.encode("ascii")
    except UnicodeEncodeError as e:
        raise ValueError(f"NIS command must be ASCII: {command!r}") from e
    if len(data) > MAX_FRAME_SIZE:
        raise ValueError(f"NIS command too long ({len(data)} bytes)")
    return struct.pack(FRAME_LENGTH_FORMAT, len(data)) + data


def _format_payload(data: bytes) -> str:
    """Render a payload for protocol logging without the trailing newline."""
    return data.decode("ascii", errors="replace").rstrip()


class NISProtocol:
    """Sends a command and iterates the daemon's response frames."""

    def __init__(self, conn: NISConnection,
                 io_callback: IOCallback | None = None):
        self._conn = conn
        self._io_callback = io_callback

    def _log_tx(self, data: str) -> None:
        logger.debug("TX: %s", data)
        if self._io_callback:
            self._io_callback("TX", data)

    def _log_rx(self, data: str) -> None:
        logger.debug("RX: %s", data)
        if self._io_callback:
            self._io_callback("RX", data)

    def send_command(self, command: str) -> None:
        """Write one request frame for `command`."""
        frame = encode_frame(command)
        self._log_tx(command)
        self._conn.write(frame)

    def read_frames(self) -> Iterator[bytes]:
        """Yield response payloads in order until the zero-length terminator.

        The iterator is single-pass: frames are read off the socket as it
        advances. Transport failures propagate out of the iteration.
        """
        while True:
            header = self._conn.read_exact(FRAME_LENGTH_SIZE)
            try:
                (size,) = struct.unpack(FRAME_LENGTH_FORMAT, header)
            except struct.error as e:
                raise ProtocolError(f"Cannot decode frame length {header!r}") from e

            if size == 0:
                self._log_rx("(end of response)")
                return

            payload = self._conn.read_exact(size)
            self._log_rx(_format_payload(payload))
            yield payload

    def query(self, command: str) -> Iterator[bytes]:
        """Send `command` now and return a lazy iterator over its response."""
        self.send_command(command)
        return self.read_frames()
