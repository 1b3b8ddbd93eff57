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

"""Metric descriptors, observations and the per-scrape metric sink

Collectors describe their metrics once with MetricDesc and emit Observation
tuples while scraping. The MetricSink gathers observations from many worker
threads and renders them as prometheus_client metric families, so it can be
handed directly to prometheus_client.generate_latest().
"""

import logging
import threading
from collections import namedtuple

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily

GAUGE = "gauge"
COUNTER = "counter"

PREFIX = "mikrotik_"

# Labels carried by every device scoped metric, always first.
DEVICE_LABELS = ["name", "address"]


class Observation(namedtuple("Observation", ["desc", "labels", "value"])):
    """One labeled data point; labels are ordered as desc.labelnames."""

    __slots__ = ()

    @property
    def name(self):
        return self.desc.name

    def labelDict(self):
        return dict(zip(self.desc.labelnames, self.labels))


class MetricDesc:
    def __init__(self, name, description, labelnames=(), kind=GAUGE):
        if kind not in (GAUGE, COUNTER):
            raise ValueError(f"unsupported metric type {kind}")
        self.name = name
        self.description = description
        self.labelnames = tuple(labelnames)
        self.kind = kind

    def __repr__(self):
        return f"MetricDesc({self.name!r}, {self.kind})"

    def observe(self, value, *labels):
        """Build an observation; label values are given in labelnames order."""
        if len(labels) != len(self.labelnames):
            raise ValueError(f"{self.name}: expected {len(self.labelnames)} label values, got {len(labels)}")
        return Observation(self, tuple("" if label is None else str(label) for label in labels), float(value))

    def family(self):
        if self.kind == COUNTER:
            return CounterMetricFamily(self.name, self.description, labels=self.labelnames)
        return GaugeMetricFamily(self.name, self.description, labels=self.labelnames)


class MetricSink:
    """Thread-safe collection of observations for one scrape."""

    def __init__(self):
        self.__lock = threading.Lock()
        self.__observations = {}

    def __len__(self):
        with self.__lock:
            return len(self.__observations)

    def add(self, observation):
        key = (observation.desc.name, observation.labels)
        with self.__lock:
            if key in self.__observations:
                logging.debug("duplicate observation for %s%s ignored" % key)
                return
            self.__observations[key] = observation

    def extend(self, observations):
        for observation in observations:
            self.add(observation)

    def observations(self):
        with self.__lock:
            return [self.__observations[key] for key in sorted(self.__observations)]

    def collect(self):
        families = {}
        for observation in self.observations():
            desc = observation.desc
            family = families.get(desc.name)
            if family is None:
                family = families[desc.name] = desc.family()
            family.add_metric(list(observation.labels), observation.value)
        for name in sorted(families):
            yield families[name]
