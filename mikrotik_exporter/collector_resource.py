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

"""System resource monitoring

Always enabled. Reports /system/resource values for each device, labeled with
the RouterOS version and board name:

mikrotik_system_uptime_seconds{name="core",address="192.0.2.1",version="7.15.2",boardname="CCR2004-16G-2S+"} 3.1e+06
mikrotik_system_free_memory_bytes{...} 3.9e+09
mikrotik_system_cpu_load{...} 3.0
"""

import logging

from mikrotik_exporter import utils
from mikrotik_exporter.collector_base import Collector


class RESOURCE(Collector):
    domain = "resource"

    # fmt: off
    __properties = [
        {"property": "uptime",          "metricName": "system_uptime_seconds",        "description": "Time since boot in seconds", "parse": utils.parseDuration},
        {"property": "free-memory",     "metricName": "system_free_memory_bytes",     "description": "Unused memory in bytes"},
        {"property": "total-memory",    "metricName": "system_total_memory_bytes",    "description": "Total memory in bytes"},
        {"property": "cpu-load",        "metricName": "system_cpu_load",              "description": "CPU load in percent"},
        {"property": "cpu-count",       "metricName": "system_cpu_count",             "description": "Number of CPUs"},
        {"property": "cpu-frequency",   "metricName": "system_cpu_frequency_mhz",     "description": "CPU frequency in MHz"},
        {"property": "free-hdd-space",  "metricName": "system_free_hdd_space_bytes",  "description": "Free storage space in bytes"},
        {"property": "total-hdd-space", "metricName": "system_total_hdd_space_bytes", "description": "Total storage space in bytes"},
        {"property": "bad-blocks",      "metricName": "system_bad_blocks",            "description": "Percentage of bad storage blocks"},
    ]
    # fmt: on

    def registerMetrics(self):
        """Register metrics of interest"""
        self._registerTable(self.__properties, ["version", "boardname"])

    def collectMetrics(self, session):
        """Collect system resource values"""
        observations = []
        for row in session.query("/system/resource"):
            version = str(row.get("version", "")).split(" ", 1)[0]
            board = row.get("board-name", "")
            observations += self._observeTable(session, row, self.__properties, version, board)
        logging.debug(f"{session.device.name}: resource -> {len(observations)} observations")
        return observations
