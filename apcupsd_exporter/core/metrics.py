"""Project a UpsSnapshot into the metric observations exposed to Prometheus.

Metric names and label sets below are relied on by dashboards and alerting
rules; treat them as a public interface.
"""

from dataclasses import dataclass, field
from typing import Iterator

from apcupsd_exporter.core.ups_snapshot import UpsSnapshot
from apcupsd_exporter.protocol.constants import STATUS_VOCABULARY
from apcupsd_exporter.util.field_parsers import format_timestamp

UPS_LABELS = ("hostname", "upsname")
STATUS_LABELS = UPS_LABELS + ("status", "model", "batterydate")
TRANSFER_LABELS = UPS_LABELS + (
    "lasttransfer", "timetransfertobattery", "timetransferfrombattery",
)


@dataclass(frozen=True)
class MetricDef:
    """Definition of one exported metric family (all are gauges)."""
    id: str
    name: str
    help: str
    labels: tuple[str, ...] = UPS_LABELS


# Exposition order of the metric families.
METRICS: tuple[MetricDef, ...] = (
    MetricDef("status", "apcups_status",
              "Current status of UPS", STATUS_LABELS),
    MetricDef("statusNumeric", "apc_status_numeric",
              "Current status of UPS", STATUS_LABELS),
    MetricDef("collectSeconds", "apcups_collect_time_seconds",
              "Time to collect stats for last poll of UPS network interface"),
    MetricDef("nominalPower", "apcups_nominal_power_watts",
              "Nominal UPS Power"),
    MetricDef("batteryChargePercent", "apcups_battery_charge_percent",
              "Percentage Battery Charge"),
    MetricDef("loadPercent", "apcups_load_percent",
              "Percentage Battery Load"),
    MetricDef("timeOnBattery", "apcups_time_on_battery_seconds",
              "Total time on UPS battery"),
    MetricDef("timeLeft", "apcups_time_left_seconds",
              "Time on UPS battery"),
    MetricDef("cumTimeOnBattery", "apcups_cum_time_on_battery_seconds",
              "Cumulative Time on UPS battery"),
    MetricDef("batteryVoltage", "apcups_battery_volts",
              "UPS Battery Voltage"),
    MetricDef("lineVoltage", "apcups_line_volts",
              "UPS Line Voltage"),
    MetricDef("nomBatteryVoltage", "apcups_nom_battery_volts",
              "UPS Nominal Battery Voltage"),
    MetricDef("nomInputVoltage", "apcups_nom_input_volts",
              "UPS Nominal Input Voltage"),
    MetricDef("numTransfers", "apcups_numtransfers",
              "Number of transfers to battery since apcupsd startup",
              TRANSFER_LABELS),
)

METRICS_BY_ID: dict[str, MetricDef] = {m.id: m for m in METRICS}


@dataclass(frozen=True)
class MetricObservation:
    """One sample: metric name, value and label values in family order."""
    name: str
    value: float
    labels: tuple[str, ...] = ()


@dataclass
class MetricSet:
    """All observations produced by one scrape."""
    observations: list[MetricObservation] = field(default_factory=list)

    def __iter__(self) -> Iterator[MetricObservation]:
        return iter(self.observations)

    def add(self, metric_id: str, value: float, *labels: str) -> None:
        """Append an observation for the family registered as `metric_id`."""
        definition = METRICS_BY_ID[metric_id]
        if len(labels) != len(definition.labels):
            raise ValueError(
                f"{definition.name} expects {len(definition.labels)} labels, "
                f"got {len(labels)}")
        self.observations.append(
            MetricObservation(definition.name, float(value), tuple(labels)))

    def family(self, name: str) -> list[MetricObservation]:
        """Return the observations of the family called `name`, in order."""
        return [obs for obs in self.observations if obs.name == name]


def map_snapshot(snapshot: UpsSnapshot, ordinal: int | None,
                 collect_seconds: float) -> MetricSet:
    """Build the MetricSet for one scrape.

    Args:
        snapshot: The decoded UPS readings.
        ordinal: Result of classify_status(); None when unclassified.
        collect_seconds: Wall-clock time spent retrieving the report.
    """
    metrics = MetricSet()
    host, ups = snapshot.hostname, snapshot.ups_name
    model, battdate = snapshot.ups_model, snapshot.battery_install_date

    for index, status in enumerate(STATUS_VOCABULARY):
        metrics.add("status", 1 if index == ordinal else 0,
                    host, ups, status, model, battdate)

    if ordinal is not None:
        metrics.add("statusNumeric", ordinal,
                    host, ups, STATUS_VOCABULARY[ordinal], model, battdate)

    metrics.add("collectSeconds", collect_seconds, host, ups)
    metrics.add("nominalPower", snapshot.nominal_power_watts, host, ups)
    metrics.add("batteryChargePercent", snapshot.battery_charge_percent, host, ups)
    metrics.add("loadPercent", snapshot.load_percent, host, ups)
    metrics.add("timeOnBattery", snapshot.time_on_battery.total_seconds(), host, ups)
    metrics.add("timeLeft", snapshot.time_left.total_seconds(), host, ups)
    metrics.add("cumTimeOnBattery",
                snapshot.cumulative_time_on_battery.total_seconds(), host, ups)
    metrics.add("batteryVoltage", snapshot.battery_voltage, host, ups)
    metrics.add("lineVoltage", snapshot.line_voltage, host, ups)
    metrics.add("nomBatteryVoltage", snapshot.nominal_battery_voltage, host, ups)
    metrics.add("nomInputVoltage", snapshot.nominal_input_voltage, host, ups)

    metrics.add("numTransfers", snapshot.transfer_count, host, ups,
                snapshot.last_transfer_reason,
                format_timestamp(snapshot.transfer_to_battery_at),
                format_timestamp(snapshot.transfer_from_battery_at))
    return metrics
