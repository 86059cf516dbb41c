"""Registry of the apcupsd status keys the exporter understands."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StatusField:
    """Definition of a single recognised status report key."""
    key: str                # Key as sent by the daemon, e.g. "BCHARGE"
    attr: str               # UpsSnapshot attribute it populates
    kind: str               # "text", "status", "magnitude", "duration", "timestamp"


# All status keys consumed by the snapshot builder. Other keys are ignored.
STATUS_FIELDS: dict[str, StatusField] = {
    "STATUS": StatusField("STATUS", "status", "status"),
    "NOMPOWER": StatusField("NOMPOWER", "nominal_power_watts", "magnitude"),
    "BCHARGE": StatusField("BCHARGE", "battery_charge_percent", "magnitude"),
    "TONBATT": StatusField("TONBATT", "time_on_battery", "duration"),
    "TIMELEFT": StatusField("TIMELEFT", "time_left", "duration"),
    "CUMONBATT": StatusField("CUMONBATT", "cumulative_time_on_battery", "duration"),
    "LOADPCT": StatusField("LOADPCT", "load_percent", "magnitude"),
    "BATTV": StatusField("BATTV", "battery_voltage", "magnitude"),
    "LINEV": StatusField("LINEV", "line_voltage", "magnitude"),
    "NOMBATTV": StatusField("NOMBATTV", "nominal_battery_voltage", "magnitude"),
    "NOMINV": StatusField("NOMINV", "nominal_input_voltage", "magnitude"),
    "HOSTNAME": StatusField("HOSTNAME", "hostname", "text"),
    "UPSNAME": StatusField("UPSNAME", "ups_name", "text"),
    "MODEL": StatusField("MODEL", "ups_model", "text"),
    "LASTXFER": StatusField("LASTXFER", "last_transfer_reason", "text"),
    "XONBATT": StatusField("XONBATT", "transfer_to_battery_at", "timestamp"),
    "XOFFBATT": StatusField("XOFFBATT", "transfer_from_battery_at", "timestamp"),
    "NUMXFERS": StatusField("NUMXFERS", "transfer_count", "magnitude"),
    "BATTDATE": StatusField("BATTDATE", "battery_install_date", "text"),
}
