"""High-level scrape orchestrator: query, decode, classify, map."""

import time
import logging

from apcupsd_exporter.protocol.nis_conn import NISConnection
from apcupsd_exporter.protocol.nis_protocol import NISProtocol
from apcupsd_exporter.protocol.status_text import decode_status
from apcupsd_exporter.protocol.constants import STATUS_CMD
from apcupsd_exporter.core.ups_snapshot import build_snapshot
from apcupsd_exporter.core.status_classifier import classify_status
from apcupsd_exporter.core.metrics import MetricSet, map_snapshot

logger = logging.getLogger(__name__)


def parse_target(target: str) -> tuple[str, int]:
    """Split "<host>:<port>" into its parts.

    The rightmost colon separates the port, and an IPv6 host may be
    bracketed ("[::1]:3551"). Raises ValueError on malformed input.
    """
    host, sep, port = target.rpartition(":")
    if not sep or not host or not port:
        raise ValueError(f"Target must look like host:port, got {target!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port_num = int(port)
    except ValueError:
        raise ValueError(f"Invalid port in target {target!r}") from None
    if not 0 < port_num < 65536:
        raise ValueError(f"Port out of range in target {target!r}")
    return host, port_num


def retrieve_status(host: str, port: int,
                    deadline: float | None = None) -> dict[str, str]:
    """Query the daemon's status report and return the RawStatus mapping.

    The connection is closed before returning, whether or not the
    exchange succeeded.
    """
    with NISConnection(deadline=deadline) as conn:
        conn.open(host, port)
        protocol = NISProtocol(conn)
        return decode_status(protocol.query(STATUS_CMD))


def scrape(target: str, timeout: float | None = None) -> MetricSet:
    """Scrape one apcupsd daemon and return its MetricSet.

    Args:
        target: "<host>:<port>" of the NIS server.
        timeout: Optional bound in seconds for the whole retrieval.

    Raises NISConnectionError, ProtocolError or FieldParseError; no
    partial result is ever returned.
    """
    host, port = parse_target(target)
    logger.info("Connecting to UPS at %s", target)

    start = time.monotonic()
    deadline = start + timeout if timeout is not None else None
    raw = retrieve_status(host, port, deadline)
    collect_seconds = time.monotonic() - start

    snapshot = build_snapshot(raw)
    logger.debug("Snapshot from %s: %r", target, snapshot)

    ordinal = classify_status(snapshot.status)
    if ordinal is None:
        logger.info("Unclassified UPS status %r from %s", snapshot.status, target)
    return map_snapshot(snapshot, ordinal, collect_seconds)
