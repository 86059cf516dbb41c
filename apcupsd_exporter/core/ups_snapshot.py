"""Typed, immutable snapshot of one apcupsd status report."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from apcupsd_exporter.protocol.status_fields import STATUS_FIELDS
from apcupsd_exporter.util.field_parsers import (
    ZERO_TIMESTAMP, parse_duration, parse_magnitude, parse_timestamp,
)


@dataclass(frozen=True)
class UpsSnapshot:
    """All readings decoded from a single scrape.

    Built once by build_snapshot() and never modified afterwards.
    """
    status: str = ""                              # lowercased STATUS

    # Numeric readings, units stripped
    nominal_power_watts: float = 0.0              # W
    battery_charge_percent: float = 0.0           # %
    load_percent: float = 0.0                     # %
    battery_voltage: float = 0.0                  # V
    line_voltage: float = 0.0                     # V
    nominal_battery_voltage: float = 0.0          # V
    nominal_input_voltage: float = 0.0            # V
    transfer_count: float = 0.0

    # Durations
    time_on_battery: timedelta = timedelta(0)
    time_left: timedelta = timedelta(0)
    cumulative_time_on_battery: timedelta = timedelta(0)

    # Transfer timestamps (ZERO_TIMESTAMP when unknown)
    transfer_to_battery_at: datetime = ZERO_TIMESTAMP
    transfer_from_battery_at: datetime = ZERO_TIMESTAMP

    # Identity
    hostname: str = ""
    ups_name: str = ""
    ups_model: str = ""
    last_transfer_reason: str = ""
    battery_install_date: str = ""


def build_snapshot(raw: dict[str, str]) -> UpsSnapshot:
    """Build an UpsSnapshot from a RawStatus mapping.

    Absent keys take the field defaults. A malformed numeric or duration
    value raises FieldParseError and no snapshot is produced.
    """
    values = {}
    for key, field_def in STATUS_FIELDS.items():
        value = raw.get(key, "")
        if field_def.kind == "status":
            values[field_def.attr] = value.lower()
        elif field_def.kind == "magnitude":
            values[field_def.attr] = parse_magnitude(value, key)
        elif field_def.kind == "duration":
            values[field_def.attr] = parse_duration(value, key)
        elif field_def.kind == "timestamp":
            values[field_def.attr] = parse_timestamp(value)
        else:
            values[field_def.attr] = value
    return UpsSnapshot(**values)
