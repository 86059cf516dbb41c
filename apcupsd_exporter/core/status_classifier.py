"""Map a UPS status string onto the canonical status vocabulary."""

from apcupsd_exporter.protocol.constants import STATUS_VOCABULARY


def classify_status(status: str,
                    vocabulary: tuple[str, ...] = STATUS_VOCABULARY) -> int | None:
    """Return the ordinal of `status` in `vocabulary`, or None if unclassified.

    Matching is exact after lowercasing: "trim" never matches "trim online"
    and composite strings such as "online replacebatt" stay unclassified.
    """
    wanted = status.lower()
    for index, entry in enumerate(vocabulary):
        if entry == wanted:
            return index
    return None
