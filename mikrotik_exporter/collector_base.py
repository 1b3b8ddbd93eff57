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

"""Base class for RouterOS feature collectors"""

import logging
from abc import ABC, abstractmethod

from mikrotik_exporter import utils
from mikrotik_exporter.exceptions import ParseError
from mikrotik_exporter.metrics import DEVICE_LABELS, PREFIX, MetricDesc


class Collector(ABC):
    # Feature name used in flags and configuration ("health", "dhcp", ...).
    domain = None

    def __init__(self, config):
        """Initialize the collector.

        Args:
            config (ExporterConfig): Immutable runtime configuration.
        """
        logging.debug(f"Initializing {self.__class__.__name__} data collector")
        self._config = config
        self._metrics = {}

    # --------------------------------------------------------------------------------------
    # Required child methods

    @abstractmethod
    def registerMetrics(self):
        """Declare the metrics this collector emits"""
        pass

    @abstractmethod
    def collectMetrics(self, session):
        """Query one device session and return a list of observations"""
        pass

    # --------------------------------------------------------------------------------------
    # Shared helpers

    def _register(self, metric, description, labels=(), kind="gauge"):
        """Declare a device scoped metric named mikrotik_<metric>."""
        desc = MetricDesc(PREFIX + metric, description, DEVICE_LABELS + list(labels), kind)
        self._metrics[metric] = desc
        logging.info(f"--> [registered] {desc.name} -> {description} ({kind})")
        return desc

    def _registerTable(self, table, labels=()):
        for item in table:
            self._register(item["metricName"], item["description"], labels, item.get("kind", "gauge"))

    def _observe(self, session, metric, value, *labels):
        return self._metrics[metric].observe(value, session.device.name, session.address, *labels)

    def _observeTable(self, session, row, table, *labels):
        """Map the RouterOS properties listed in table onto observations.

        Properties absent from the reply are skipped (not every RouterOS
        release or board reports them); unparsable values are logged.
        """
        observations = []
        for item in table:
            value = row.get(item["property"])
            if value is None or value == "":
                continue
            parse = item.get("parse", utils.parseFloat)
            try:
                number = parse(value)
            except ParseError as e:
                logging.warning(f"{session.device.name}: {self.domain}: unable to parse {item['property']}: {e}")
                continue
            observations.append(self._observe(session, item["metricName"], number, *labels))
        return observations

    def metrics(self):
        return list(self._metrics.values())


def stateValue(state, good):
    """1 when a RouterOS state string equals the healthy state, 0 otherwise."""
    return 1 if str(state).lower() == good else 0


def txOf(value):
    return utils.splitPair(value)[0]


def rxOf(value):
    return utils.splitPair(value)[1]
