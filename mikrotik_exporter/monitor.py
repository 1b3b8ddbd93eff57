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
# Supporting monitor class: loads the enabled feature collectors, wires them
# into the collection engine and renders one exposition per scrape.
# --

import importlib
import logging
import os
import sys
import time

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from mikrotik_exporter import utils
from mikrotik_exporter.client import DeviceClient
from mikrotik_exporter.collector_definitions import COLLECTORS
from mikrotik_exporter.engine import CollectionEngine
from mikrotik_exporter.exceptions import ConfigError
from mikrotik_exporter.metrics import MetricSink
from mikrotik_exporter.pool import SessionPool

# logrus style level names accepted on the command line
LOG_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "panic": logging.CRITICAL,
}


def configureLogging(level, logFormat, logFile=None):
    level = os.environ.get("MIKROTIK_EXPORTER_LOG_LEVEL", level).lower()
    if level not in LOG_LEVELS:
        raise ConfigError(f"invalid log level {level!r}")

    handler = logging.FileHandler(logFile) if logFile else logging.StreamHandler(sys.stdout)
    if logFormat == "json":
        handler.setFormatter(utils.JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s", datefmt="%H:%M:%S"))
    logging.basicConfig(level=LOG_LEVELS[level], handlers=[handler], force=True)


class Monitor:
    def __init__(self, config, logFile=None, client=None):

        self.config = config  # cache runtime configuration

        configureLogging(config.log_level, config.log_format, logFile)

        logging.info(f"Monitoring {len(config.devices)} device(s): {', '.join(d.name for d in config.devices)}")
        logging.info(f"Enabled features: {', '.join(sorted(config.allFeatures())) or 'none'}")

        # exporter self metrics
        self.__registry = CollectorRegistry()

        # initialize collection of data collectors
        self.__collectors = []
        self.__engine = None

        self.__client = client if client is not None else DeviceClient(config.options)
        self.__pool = SessionPool(self.__client, reuse=config.options.reuse_connections)

        logging.debug("Completed collector initialization (base class)")
        return

    @property
    def engine(self):
        return self.__engine

    def initMetrics(self):
        enabled = self.config.allFeatures()
        for collector in COLLECTORS:
            feature = collector["feature"]
            if feature is None or feature in enabled:
                module = importlib.import_module(collector["file"])
                cls = getattr(module, collector["className"])
                self.__collectors.append(cls(config=self.config))

        # Initialize all metrics
        prefix_filter = utils.PrefixFilter("   ")
        for collector in self.__collectors:
            logging.info("Registering metrics for collector: %s" % collector.__class__.__name__)
            logging.getLogger().addFilter(prefix_filter)
            collector.registerMetrics()
            logging.getLogger().removeFilter(prefix_filter)

        self.__engine = CollectionEngine(self.config, self.__collectors, self.__pool)

        info = Gauge("mikrotik_exporter_build_info", "Exporter version", labelnames=["version"], registry=self.__registry)
        info.labels(version=utils.getVersion()).set(1)
        self.__perfMetric = Gauge(
            "mikrotik_exporter_scrape_runtime_seconds",
            "Time to complete one collection pass over all devices in seconds",
            registry=self.__registry,
        )

    def updateAllMetrics(self, deadline=None):
        """Run one collection pass and return the exposition text (bytes)."""
        start_time_total = time.perf_counter()

        sink = MetricSink()
        sink.extend(self.__engine.collectAll(deadline))

        elapsed_time_total = time.perf_counter() - start_time_total
        self.__perfMetric.set(elapsed_time_total)

        return generate_latest(self.__registry) + generate_latest(sink)

    def shutdown(self):
        self.__pool.close()
