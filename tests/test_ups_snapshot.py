"""Tests for building a typed UpsSnapshot from a raw status mapping."""

import dataclasses
import unittest
from datetime import datetime, timedelta, timezone

from tests.mock_nis import SAMPLE_REPORT
from apcupsd_exporter.core.errors import FieldParseError
from apcupsd_exporter.core.ups_snapshot import UpsSnapshot, build_snapshot
from apcupsd_exporter.protocol.status_fields import STATUS_FIELDS
from apcupsd_exporter.protocol.status_text import decode_status
from apcupsd_exporter.util.field_parsers import ZERO_TIMESTAMP


def _sample_raw() -> dict[str, str]:
    return decode_status(line.encode("ascii") for line in SAMPLE_REPORT)


class TestBuildSnapshot(unittest.TestCase):

    def test_sample_report(self):
        snap = build_snapshot(_sample_raw())
        self.assertEqual(snap.status, "online")
        self.assertEqual(snap.nominal_power_watts, 480.0)
        self.assertEqual(snap.battery_charge_percent, 100.0)
        self.assertEqual(snap.load_percent, 5.0)
        self.assertEqual(snap.battery_voltage, 13.5)
        self.assertEqual(snap.line_voltage, 242.0)
        self.assertEqual(snap.nominal_battery_voltage, 12.0)
        self.assertEqual(snap.nominal_input_voltage, 230.0)
        self.assertEqual(snap.transfer_count, 2.0)
        self.assertEqual(snap.time_on_battery, timedelta(0))
        self.assertAlmostEqual(snap.time_left.total_seconds(), 6276.0)
        self.assertEqual(snap.cumulative_time_on_battery, timedelta(seconds=18))
        self.assertEqual(snap.transfer_to_battery_at,
                         datetime(2016, 8, 30, 17, 19, 40,
                                  tzinfo=timezone(timedelta(hours=2))))
        self.assertEqual(snap.transfer_from_battery_at,
                         datetime(2016, 8, 30, 17, 19, 49,
                                  tzinfo=timezone(timedelta(hours=2))))
        self.assertEqual(snap.hostname, "beaker.murf.org")
        self.assertEqual(snap.ups_name, "backups-950")
        self.assertEqual(snap.ups_model, "Back-UPS XS 950U")
        self.assertEqual(snap.last_transfer_reason, "Unacceptable line voltage changes")
        self.assertEqual(snap.battery_install_date, "2014-10-21")

    def test_empty_mapping_defaults(self):
        self.assertEqual(build_snapshot({}), UpsSnapshot())

    def test_empty_values_default_to_zero(self):
        raw = {key: "" for key in STATUS_FIELDS}
        snap = build_snapshot(raw)
        self.assertEqual(snap.battery_charge_percent, 0.0)
        self.assertEqual(snap.time_left, timedelta(0))
        self.assertEqual(snap.transfer_to_battery_at, ZERO_TIMESTAMP)

    def test_status_lowercased(self):
        self.assertEqual(build_snapshot({"STATUS": "TRIM ONLINE"}).status, "trim online")
        self.assertEqual(build_snapshot({"STATUS": "OnBatt"}).status, "onbatt")

    def test_bad_timestamp_is_not_fatal(self):
        snap = build_snapshot({"XOFFBATT": "N/A", "BCHARGE": "50.0 Percent"})
        self.assertEqual(snap.transfer_from_battery_at, ZERO_TIMESTAMP)
        self.assertEqual(snap.battery_charge_percent, 50.0)

    def test_bad_magnitude_aborts(self):
        raw = _sample_raw()
        raw["LINEV"] = "abc Volts"
        with self.assertRaises(FieldParseError) as ctx:
            build_snapshot(raw)
        self.assertEqual(ctx.exception.key, "LINEV")

    def test_bad_duration_aborts(self):
        raw = _sample_raw()
        raw["TIMELEFT"] = "104.6 fortnights"
        with self.assertRaises(FieldParseError) as ctx:
            build_snapshot(raw)
        self.assertEqual(ctx.exception.key, "TIMELEFT")

    def test_unrecognised_keys_ignored(self):
        snap = build_snapshot({"SELFTEST": "not a number", "STATUS": "ONLINE"})
        self.assertEqual(snap.status, "online")

    def test_snapshot_is_immutable(self):
        snap = build_snapshot({"STATUS": "ONLINE"})
        with self.assertRaises(dataclasses.FrozenInstanceError):
            snap.status = "onbatt"

    def test_every_field_maps_to_snapshot_attribute(self):
        attrs = {f.name for f in dataclasses.fields(UpsSnapshot)}
        for field_def in STATUS_FIELDS.values():
            self.assertIn(field_def.attr, attrs, field_def.key)

    def test_registry_entries(self):
        kinds = {"status", "magnitude", "duration", "timestamp", "text"}
        for key, field_def in STATUS_FIELDS.items():
            self.assertEqual(field_def.key, key)
            self.assertIn(field_def.kind, kinds, key)
        self.assertEqual([f.name for f in dataclasses.fields(field_def)],
                         ["key", "attr", "kind"])


if __name__ == "__main__":
    unittest.main()
