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

"""CAPsMAN monitoring

Per-client values from the CAPsMAN registration table of a controller.
"""

from mikrotik_exporter import utils
from mikrotik_exporter.collector_base import Collector, rxOf, txOf


class CAPSMAN(Collector):
    domain = "capsman"

    # fmt: off
    __properties = [
        {"property": "uptime",    "metricName": "capsman_clients_uptime_seconds", "description": "Client association time in seconds", "parse": utils.parseDuration},
        {"property": "tx-signal", "metricName": "capsman_clients_tx_signal_dbm",  "description": "Signal strength reported by the client in dBm"},
        {"property": "rx-signal", "metricName": "capsman_clients_rx_signal_dbm",  "description": "Signal strength of the client in dBm"},
        {"property": "packets",   "metricName": "capsman_clients_tx_packets",     "description": "Packets sent to the client",       "parse": txOf, "kind": "counter"},
        {"property": "packets",   "metricName": "capsman_clients_rx_packets",     "description": "Packets received from the client", "parse": rxOf, "kind": "counter"},
        {"property": "bytes",     "metricName": "capsman_clients_tx_bytes",       "description": "Bytes sent to the client",         "parse": txOf, "kind": "counter"},
        {"property": "bytes",     "metricName": "capsman_clients_rx_bytes",       "description": "Bytes received from the client",   "parse": rxOf, "kind": "counter"},
    ]
    # fmt: on

    def registerMetrics(self):
        """Register metrics of interest"""
        self._registerTable(self.__properties, ["interface", "mac_address", "ssid"])

    def collectMetrics(self, session):
        """Collect per-client values"""
        proplist = ["interface", "mac-address", "ssid", "uptime", "tx-signal", "rx-signal", "packets", "bytes"]
        observations = []
        for row in session.query("/caps-man/registration-table", proplist=proplist):
            labels = (row.get("interface", ""), row.get("mac-address", ""), row.get("ssid", ""))
            observations += self._observeTable(session, row, self.__properties, *labels)
        return observations
