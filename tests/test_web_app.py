"""Tests for the Flask exposition endpoints."""

import unittest
from unittest.mock import patch

from tests.mock_nis import MockNISServer, unused_port
from apcupsd_exporter.core.errors import NISConnectionError
from apcupsd_exporter.web.app import (
    create_app, main, parse_listen_address, scrape_timeout,
)


class TestApcupsdEndpoint(unittest.TestCase):

    def setUp(self):
        self.client = create_app(timeout=5).test_client()

    def test_index_form(self):
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertIn(b'action="/apcupsd"', resp.data)

    def test_missing_target(self):
        resp = self.client.get("/apcupsd?port=3551")
        self.assertEqual(resp.status_code, 400)
        self.assertIn(b"'target' parameter must be specified once", resp.data)

    def test_duplicate_target(self):
        resp = self.client.get("/apcupsd?target=a&target=b&port=3551")
        self.assertEqual(resp.status_code, 400)

    def test_missing_port(self):
        resp = self.client.get("/apcupsd?target=127.0.0.1")
        self.assertEqual(resp.status_code, 400)
        self.assertIn(b"'port' parameter must be specified once", resp.data)

    def test_invalid_port(self):
        resp = self.client.get("/apcupsd?target=127.0.0.1&port=abc")
        self.assertEqual(resp.status_code, 400)

    def test_scrape(self):
        with MockNISServer() as server:
            host, port = server.address.split(":")
            resp = self.client.get(f"/apcupsd?target={host}&port={port}")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.content_type.startswith("text/plain"))
        text = resp.get_data(as_text=True)
        self.assertIn("apcups_status{", text)
        self.assertIn('status="online"', text)
        self.assertIn("apcups_numtransfers{", text)

    def test_unreachable_daemon(self):
        resp = self.client.get(f"/apcupsd?target=127.0.0.1&port={unused_port()}")
        self.assertEqual(resp.status_code, 503)
        self.assertIn(b"Error collecting UPS data", resp.data)

    def test_prometheus_timeout_header(self):
        with patch("apcupsd_exporter.web.app.scrape",
                   side_effect=NISConnectionError("boom")) as mock_scrape:
            resp = self.client.get("/apcupsd?target=ups&port=3551",
                                   headers={"X-Prometheus-Scrape-Timeout-Seconds": "2.5"})
        self.assertEqual(resp.status_code, 503)
        mock_scrape.assert_called_once_with("ups:3551", timeout=2.5)

    def test_exporter_metrics(self):
        resp = self.client.get("/metrics")
        self.assertEqual(resp.status_code, 200)


class TestHelpers(unittest.TestCase):

    def test_scrape_timeout(self):
        self.assertEqual(scrape_timeout(None, 30), 30)
        self.assertEqual(scrape_timeout("10", 30), 10)
        self.assertEqual(scrape_timeout("60", 30), 30)
        self.assertEqual(scrape_timeout("junk", 30), 30)
        self.assertEqual(scrape_timeout("0", 30), 30)

    def test_parse_listen_address(self):
        self.assertEqual(parse_listen_address(":9099"), ("0.0.0.0", 9099))
        self.assertEqual(parse_listen_address("127.0.0.1:8080"), ("127.0.0.1", 8080))
        with self.assertRaises(ValueError):
            parse_listen_address("9099")

    def test_listen_port_out_of_range(self):
        for address in (":99999", ":0", ":-1"):
            with self.assertRaises(ValueError, msg=address):
                parse_listen_address(address)

    def test_listen_port_not_a_number(self):
        with self.assertRaises(ValueError):
            parse_listen_address("localhost:http")

    def test_main_rejects_bad_listen_address(self):
        with self.assertRaises(SystemExit):
            main(["--listen-address", ":99999"])


if __name__ == "__main__":
    unittest.main()
