# -------------------------------------------------------------------------------
# MIT License
#
# Copyright (c) 2023 - 2026 Advanced Micro Devices, Inc. All Rights Reserved.
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
# -------------------------------------------------------------------------------

# Prometheus exporter for MikroTik RouterOS devices.
#
# Command-line entry point: parses options, builds the runtime configuration
# and serves the metrics endpoint through gunicorn.
# --

import argparse
import logging
import sys
import time

import gunicorn.app.base
from flask import Flask, Response, request
from prometheus_client import CONTENT_TYPE_LATEST

from mikrotik_exporter import utils
from mikrotik_exporter.config import FEATURES, buildConfig, loadConfigFile
from mikrotik_exporter.exceptions import ConfigError
from mikrotik_exporter.monitor import Monitor

EXIT_CONFIG_ERROR = 3

# Subtracted from the scraper's timeout to leave room for rendering and transfer.
SCRAPE_TIMEOUT_OFFSET = 0.5
SCRAPE_TIMEOUT_HEADER = "X-Prometheus-Scrape-Timeout-Seconds"

LANDING_PAGE = """<html>
<head><title>MikroTik Exporter</title></head>
<body>
<h1>MikroTik Exporter</h1>
<p><a href="{path}">Metrics</a></p>
</body>
</html>
"""


class ExporterServer(gunicorn.app.base.BaseApplication):
    def __init__(self, app, options=None):
        self.options = options or {}
        self.application = app
        super().__init__()

    def load_config(self):
        config = {key: value for key, value in self.options.items() if key in self.cfg.settings and value is not None}
        for key, value in config.items():
            self.cfg.set(key.lower(), value)

    def load(self):
        return self.application


def scrapeDeadline(headers):
    """Monotonic deadline derived from the scraper's timeout header, if any."""
    value = headers.get(SCRAPE_TIMEOUT_HEADER)
    if not value:
        return None
    try:
        timeout = float(value)
    except ValueError:
        logging.warning(f"ignoring invalid {SCRAPE_TIMEOUT_HEADER} header: {value!r}")
        return None
    if timeout <= 0:
        return None
    if timeout > SCRAPE_TIMEOUT_OFFSET:
        timeout -= SCRAPE_TIMEOUT_OFFSET
    return time.monotonic() + timeout


def registerRoutes(app, monitor, metricsPath):
    def metrics():
        payload = monitor.updateAllMetrics(scrapeDeadline(request.headers))
        return Response(payload, mimetype=CONTENT_TYPE_LATEST)

    app.add_url_rule(metricsPath, "metrics", metrics)
    app.add_url_rule("/healthz", "healthz", lambda: Response("ok", mimetype="text/plain"))
    if metricsPath != "/":
        app.add_url_rule("/", "index", lambda: Response(LANDING_PAGE.format(path=metricsPath), mimetype="text/html"))
    return app


def bindAddress(listen):
    """Turn a ":9436" style listen address into a gunicorn bind string."""
    host, _, port = listen.rpartition(":")
    if not port.isdigit():
        raise ConfigError(f"invalid listen address {listen!r}")
    return f"{host or '0.0.0.0'}:{port}"


def buildParser():
    parser = argparse.ArgumentParser(description="Prometheus exporter for MikroTik RouterOS devices")
    parser.add_argument("--address", help="address of the device to monitor")
    parser.add_argument("--config-file", help="runtime configuration file (INI, or YAML when named .yml or .yaml)")
    parser.add_argument("--device", help="single device name to monitor")
    parser.add_argument("--user", help="user for authentication with a single device (or MIKROTIK_USER)")
    parser.add_argument("--password", help="password for authentication with a single device (or MIKROTIK_PASSWORD)")
    parser.add_argument("--deviceport", help="port of the single device API")
    parser.add_argument("--port", help="address to listen on for metrics requests (default :9436)")
    parser.add_argument("--path", help="path to answer metrics requests on (default /metrics)")
    parser.add_argument("--timeout", help="timeout when connecting to and scraping devices (default 10s)")
    parser.add_argument("--tls", action="store_true", default=None, help="use TLS to connect to the devices")
    parser.add_argument("--insecure", action="store_true", default=None, help="skip TLS certificate verification")
    parser.add_argument(
        "--reuse-connections", action="store_true", default=None, help="keep device sessions open between scrapes"
    )
    parser.add_argument("--max-workers", type=int, default=None, help="maximum number of devices scraped concurrently")
    parser.add_argument("--log-format", choices=["json", "text"], default=None, help="log format (default json)")
    parser.add_argument("--log-level", default=None, help="log level (default info)")
    parser.add_argument("--version", action="store_true", help="print version and exit")

    features = parser.add_argument_group("features")
    for feature in FEATURES:
        features.add_argument(f"--with-{feature}", action="store_true", help=f"enable the {feature} collector")
    return parser


def main(argv=None):
    args = buildParser().parse_args(argv)
    if args.version:
        print(f"mikrotik-exporter {utils.getVersion()}")
        sys.exit(0)

    try:
        fileConfig = loadConfigFile(args.config_file) if args.config_file else None
        config = buildConfig(args, fileConfig)
        bind = bindAddress(config.listen)
        monitor = Monitor(config)
    except ConfigError as e:
        logging.error(f"could not load config: {e}")
        sys.exit(EXIT_CONFIG_ERROR)

    monitor.initMetrics()
    app = registerRoutes(Flask("mikrotik_exporter"), monitor, config.metrics_path)

    def worker_exit(server, worker):
        monitor.shutdown()

    options = {
        "bind": bind,
        "workers": 1,
        "worker_class": "gthread",
        "threads": 4,
        "timeout": max(30, int(config.options.timeout * 3)),
        "worker_exit": worker_exit,
    }
    logging.info(f"Listening on {bind}, serving metrics at {config.metrics_path}")
    ExporterServer(app, options).run()


if __name__ == "__main__":
    main()
