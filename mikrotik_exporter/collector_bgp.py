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

"""BGP session monitoring

RouterOS 7 lists sessions under /routing/bgp/session, RouterOS 6 lists peers
under /routing/bgp/peer with slightly different property names. The v7 menu
is tried first.
"""

import logging

from mikrotik_exporter import utils
from mikrotik_exporter.collector_base import Collector
from mikrotik_exporter.exceptions import QueryError

# fmt: off
COUNTERS = [
    {"metricName": "bgp_prefix_count",        "description": "Number of prefixes received",  "v6": "prefix-count",       "v7": "prefix-count",          "kind": "gauge"},
    {"metricName": "bgp_updates_sent",        "description": "Update messages sent",         "v6": "updates-sent",       "v7": "local.messages",        "kind": "counter"},
    {"metricName": "bgp_updates_received",    "description": "Update messages received",     "v6": "updates-received",   "v7": "remote.messages",       "kind": "counter"},
    {"metricName": "bgp_withdrawn_sent",      "description": "Withdraw messages sent",       "v6": "withdrawn-sent",     "v7": None,                    "kind": "counter"},
    {"metricName": "bgp_withdrawn_received",  "description": "Withdraw messages received",   "v6": "withdrawn-received", "v7": None,                    "kind": "counter"},
]
# fmt: on


class BGP(Collector):
    domain = "bgp"

    def registerMetrics(self):
        """Register metrics of interest"""
        labels = ["session", "asn"]
        self._register("bgp_up", "BGP session is established (1) or not (0)", labels + ["state"])
        for item in COUNTERS:
            self._register(item["metricName"], item["description"], labels, item["kind"])

    def __sessionsV7(self, session):
        rows = session.query("/routing/bgp/session")
        for row in rows:
            established = utils.parseBool(row.get("established", False))
            yield row, row.get("remote.as", ""), established, "established" if established else "down", "v7"

    def __sessionsV6(self, session):
        rows = session.query("/routing/bgp/peer", where={"disabled": "false"})
        for row in rows:
            state = str(row.get("state", "unknown"))
            yield row, row.get("remote-as", ""), state == "established", state, "v6"

    def collectMetrics(self, session):
        """Collect BGP session state and counters"""
        try:
            sessions = list(self.__sessionsV7(session))
        except QueryError as e:
            logging.debug(f"{session.device.name}: bgp: falling back to /routing/bgp/peer ({e})")
            sessions = list(self.__sessionsV6(session))

        observations = []
        for row, asn, established, state, layout in sessions:
            name = row.get("name", "")
            observations.append(self._observe(session, "bgp_up", 1 if established else 0, name, asn, state))
            for item in COUNTERS:
                prop = item[layout]
                if prop is None or row.get(prop) in (None, ""):
                    continue
                observations.append(self._observe(session, item["metricName"], utils.parseFloat(row[prop]), name, asn))
        return observations
