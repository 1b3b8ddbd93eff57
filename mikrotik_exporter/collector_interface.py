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

"""Interface traffic monitoring

Always enabled. Exports the /interface traffic and error counters, one series
per interface, plus a running gauge:

mikrotik_interface_rx_bytes_total{name="core",address="192.0.2.1",interface="ether1",type="ether",comment="uplink"} 8.1e+12
mikrotik_interface_running{name="core",address="192.0.2.1",interface="ether1",type="ether",comment="uplink"} 1.0
"""

from mikrotik_exporter import utils
from mikrotik_exporter.collector_base import Collector


class INTERFACE(Collector):
    domain = "interface"

    # fmt: off
    __counters = [
        {"property": "rx-byte",    "metricName": "interface_rx_bytes",   "description": "Bytes received",              "kind": "counter"},
        {"property": "tx-byte",    "metricName": "interface_tx_bytes",   "description": "Bytes transmitted",           "kind": "counter"},
        {"property": "rx-packet",  "metricName": "interface_rx_packets", "description": "Packets received",            "kind": "counter"},
        {"property": "tx-packet",  "metricName": "interface_tx_packets", "description": "Packets transmitted",         "kind": "counter"},
        {"property": "rx-error",   "metricName": "interface_rx_errors",  "description": "Receive errors",              "kind": "counter"},
        {"property": "tx-error",   "metricName": "interface_tx_errors",  "description": "Transmit errors",             "kind": "counter"},
        {"property": "rx-drop",    "metricName": "interface_rx_drops",   "description": "Received packets dropped",    "kind": "counter"},
        {"property": "tx-drop",    "metricName": "interface_tx_drops",   "description": "Transmitted packets dropped", "kind": "counter"},
        {"property": "link-downs", "metricName": "interface_link_downs", "description": "Number of link down events",  "kind": "counter"},
        {"property": "actual-mtu", "metricName": "interface_actual_mtu", "description": "Effective MTU"},
        {"property": "running",    "metricName": "interface_running",    "description": "Interface is running (1) or not (0)", "parse": utils.parseBool},
        {"property": "disabled",   "metricName": "interface_disabled",   "description": "Interface is administratively disabled (1) or not (0)", "parse": utils.parseBool},
    ]
    # fmt: on

    def registerMetrics(self):
        """Register metrics of interest"""
        self._registerTable(self.__counters, ["interface", "type", "comment"])

    def collectMetrics(self, session):
        """Collect per-interface counters"""
        proplist = ["name", "type", "comment"] + [item["property"] for item in self.__counters]
        observations = []
        for row in session.query("/interface", proplist=proplist):
            labels = (row.get("name", ""), row.get("type", ""), row.get("comment", ""))
            observations += self._observeTable(session, row, self.__counters, *labels)
        return observations
