"""Decode apcupsd status report frames into a flat KEY -> value mapping."""

import re
from typing import Iterable

# "BCHARGE  : 100.0 Percent" -> ("BCHARGE", "100.0 Percent")
_LINE_RE = re.compile(r"^([A-Z]+)[ \t]*:[ \t]*(.*)$", re.MULTILINE)


def decode_frame(payload: bytes) -> tuple[str, str] | None:
    """Return the (key, value) pair of the first matching line in a frame.

    Only the first matching line is used; the daemon sends one line per
    frame. Returns None for frames with no KEY:VALUE line.
    """
    text = payload.decode("ascii", errors="replace")
    match = _LINE_RE.search(text)
    if not match:
        return None
    return match.group(1).strip(), match.group(2).strip()


def decode_status(frames: Iterable[bytes]) -> dict[str, str]:
    """Accumulate decoded frames into a RawStatus mapping.

    Later frames overwrite earlier values for the same key.
    """
    raw: dict[str, str] = {}
    for payload in frames:
        pair = decode_frame(payload)
        if pair is None:
            continue
        key, value = pair
        raw[key] = value
    return raw
