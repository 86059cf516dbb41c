"""Flask application serving apcupsd scrapes to Prometheus."""

import time
import logging
import argparse

from flask import Flask, Response, request
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

from apcupsd_exporter.core.errors import NISError
from apcupsd_exporter.core.scraper import scrape
from apcupsd_exporter.web.exposition import render_metric_set
from apcupsd_exporter.protocol.constants import (
    DEFAULT_LISTEN_ADDRESS, DEFAULT_NIS_PORT, DEFAULT_SCRAPE_TIMEOUT,
    SCRAPE_TIMEOUT_HEADER,
)

logger = logging.getLogger(__name__)

INDEX_HTML = f"""<html>
<head>
<title>apcupsd Exporter</title>
<style>
label {{ display: inline-block; width: 75px; }}
form label, form input {{ margin: 10px; }}
</style>
</head>
<body>
<h1>apcupsd Exporter</h1>
<form action="/apcupsd">
<label>Target:</label> <input type="text" name="target" placeholder="X.X.X.X" value="1.2.3.4"><br>
<label>Port:</label> <input type="text" name="port" placeholder="{DEFAULT_NIS_PORT}" value="{DEFAULT_NIS_PORT}"><br>
<input type="submit" value="Submit">
</form>
<p><a href="/metrics">Exporter metrics</a></p>
</body>
</html>
"""


def _plain(text: str, status: int) -> Response:
    return Response(text + "\n", status=status, mimetype="text/plain")


def _single_param(name: str) -> str | None:
    """Return query parameter `name` if given exactly once and non-empty."""
    values = request.args.getlist(name)
    if len(values) != 1 or not values[0]:
        return None
    return values[0]


def scrape_timeout(header_value: str | None, configured: float) -> float:
    """Pick the scrape deadline: the configured limit or Prometheus' own, if lower."""
    if not header_value:
        return configured
    try:
        requested = float(header_value)
    except ValueError:
        logger.warning("Ignoring invalid %s header: %r",
                       SCRAPE_TIMEOUT_HEADER, header_value)
        return configured
    if requested <= 0:
        return configured
    return min(configured, requested)


def create_app(timeout: float = DEFAULT_SCRAPE_TIMEOUT) -> Flask:
    """Build the exporter's Flask app."""
    app = Flask(__name__)

    @app.get("/")
    def index():
        return Response(INDEX_HTML, mimetype="text/html")

    @app.get("/metrics")
    def exporter_metrics():
        return Response(generate_latest(REGISTRY), content_type=CONTENT_TYPE_LATEST)

    @app.get("/apcupsd")
    def apcupsd():
        target = _single_param("target")
        if target is None:
            return _plain("'target' parameter must be specified once", 400)
        port = _single_param("port")
        if port is None:
            return _plain("'port' parameter must be specified once", 400)

        ups_addr = f"{target}:{port}"
        start = time.monotonic()
        try:
            metric_set = scrape(
                ups_addr,
                timeout=scrape_timeout(request.headers.get(SCRAPE_TIMEOUT_HEADER), timeout))
        except NISError as e:
            logger.error("Error collecting UPS data from %s: %s", ups_addr, e)
            return _plain(f"Error collecting UPS data: {e}", 503)
        except ValueError as e:
            return _plain(str(e), 400)

        body = render_metric_set(metric_set)
        logger.info("Finished scrape of %s in %f duration_seconds",
                    ups_addr, time.monotonic() - start)
        return Response(body, content_type=CONTENT_TYPE_LATEST)

    return app


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split "[host]:port"; an empty host listens on all interfaces."""
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ValueError(f"Listen address must look like [host]:port, got {address!r}")
    try:
        port_num = int(port)
    except ValueError:
        raise ValueError(f"Invalid port in listen address {address!r}") from None
    if not 0 < port_num < 65536:
        raise ValueError(f"Port out of range in listen address {address!r}")
    return host.strip("[]") or "0.0.0.0", port_num


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Prometheus exporter for apcupsd")
    parser.add_argument("--listen-address", default=DEFAULT_LISTEN_ADDRESS,
                        help="The address to listen on for HTTP requests")
    parser.add_argument("--scrape-timeout", type=float, default=DEFAULT_SCRAPE_TIMEOUT,
                        help="Upper bound in seconds for one apcupsd query")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging verbosity")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Application entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")

    try:
        host, port = parse_listen_address(args.listen_address)
    except ValueError as e:
        raise SystemExit(str(e))

    logger.info("Metric listener at: %s", args.listen_address)
    app = create_app(timeout=args.scrape_timeout)
    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":
    main()
