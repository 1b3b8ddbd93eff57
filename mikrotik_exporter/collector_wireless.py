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

"""Wireless monitoring

  wlansta  per-station values from the wireless registration table
  wlanif   per-interface values from the wireless monitor
  w60g     60 GHz (wireless wire) link values

mikrotik_wlan_station_signal_strength_dbm{name="ap1",address="192.0.2.7",interface="wlan1",mac_address="AA:BB:CC:00:11:22"} -61.0
mikrotik_wlan_interface_registered_clients{name="ap1",address="192.0.2.7",interface="wlan1",channel="2412/20-Ce/gn"} 12.0
"""

import logging

from mikrotik_exporter import utils
from mikrotik_exporter.collector_base import Collector, rxOf, txOf
from mikrotik_exporter.exceptions import QueryError


class WLANSTA(Collector):
    domain = "wlansta"

    # fmt: off
    __properties = [
        {"property": "signal-strength",  "metricName": "wlan_station_signal_strength_dbm", "description": "Signal strength in dBm"},
        {"property": "signal-to-noise",  "metricName": "wlan_station_signal_to_noise_db",  "description": "Signal to noise ratio in dB"},
        {"property": "tx-ccq",           "metricName": "wlan_station_tx_ccq",              "description": "Transmit client connection quality in percent"},
        {"property": "packets",          "metricName": "wlan_station_tx_packets",          "description": "Packets sent to the station",       "parse": txOf, "kind": "counter"},
        {"property": "packets",          "metricName": "wlan_station_rx_packets",          "description": "Packets received from the station", "parse": rxOf, "kind": "counter"},
        {"property": "bytes",            "metricName": "wlan_station_tx_bytes",            "description": "Bytes sent to the station",         "parse": txOf, "kind": "counter"},
        {"property": "bytes",            "metricName": "wlan_station_rx_bytes",            "description": "Bytes received from the station",   "parse": rxOf, "kind": "counter"},
        {"property": "uptime",           "metricName": "wlan_station_uptime_seconds",      "description": "Station association time in seconds", "parse": utils.parseDuration},
    ]
    # fmt: on

    def registerMetrics(self):
        """Register metrics of interest"""
        self._registerTable(self.__properties, ["interface", "mac_address"])

    def collectMetrics(self, session):
        """Collect per-station values"""
        proplist = ["interface", "mac-address"] + sorted({item["property"] for item in self.__properties})
        observations = []
        for row in session.query("/interface/wireless/registration-table", proplist=proplist):
            labels = (row.get("interface", ""), row.get("mac-address", ""))
            observations += self._observeTable(session, row, self.__properties, *labels)
        return observations


class WLANIF(Collector):
    domain = "wlanif"

    # fmt: off
    __properties = [
        {"property": "registered-clients", "metricName": "wlan_interface_registered_clients", "description": "Number of registered clients"},
        {"property": "noise-floor",        "metricName": "wlan_interface_noise_floor_dbm",    "description": "Noise floor in dBm"},
        {"property": "overall-tx-ccq",     "metricName": "wlan_interface_overall_tx_ccq",     "description": "Overall transmit CCQ in percent"},
    ]
    # fmt: on

    def registerMetrics(self):
        """Register metrics of interest"""
        self._registerTable(self.__properties, ["interface", "channel"])

    def collectMetrics(self, session):
        """Collect per-interface values"""
        observations = []
        for iface in session.query("/interface/wireless", proplist=["name"], where={"disabled": "false"}):
            name = iface.get("name", "")
            proplist = ["channel"] + [item["property"] for item in self.__properties]
            for row in session.query("/interface/wireless", command="monitor", numbers=name, once="", proplist=proplist):
                observations += self._observeTable(session, row, self.__properties, name, row.get("channel", ""))
        return observations


class W60G(Collector):
    domain = "w60g"

    # fmt: off
    __properties = [
        {"property": "signal",                "metricName": "w60g_signal",                "description": "Signal quality in percent"},
        {"property": "rssi",                  "metricName": "w60g_rssi_dbm",              "description": "Received signal strength in dBm"},
        {"property": "tx-mcs",                "metricName": "w60g_tx_mcs",                "description": "Transmit modulation and coding scheme"},
        {"property": "tx-phy-rate",           "metricName": "w60g_tx_phy_rate",           "description": "Transmit PHY rate in bits per second", "parse": utils.parseRate},
        {"property": "frequency",             "metricName": "w60g_frequency_mhz",         "description": "Operating frequency in MHz"},
        {"property": "tx-sector",             "metricName": "w60g_tx_sector",             "description": "Transmit sector"},
        {"property": "distance",              "metricName": "w60g_distance_meters",       "description": "Link distance in meters"},
        {"property": "tx-packet-error-rate",  "metricName": "w60g_tx_packet_error_rate",  "description": "Transmit packet error rate in percent"},
    ]
    # fmt: on

    def registerMetrics(self):
        """Register metrics of interest"""
        self._registerTable(self.__properties, ["interface"])

    def collectMetrics(self, session):
        """Collect 60 GHz link values"""
        try:
            interfaces = session.query("/interface/w60g", proplist=["name"], where={"disabled": "false"})
        except QueryError as e:
            # Boards without a 60 GHz radio have no such menu.
            logging.debug(f"{session.device.name}: w60g: {e}")
            return []

        names = [row["name"] for row in interfaces if "name" in row]
        if not names:
            return []
        proplist = ["name"] + [item["property"] for item in self.__properties]
        observations = []
        for row in session.query("/interface/w60g", command="monitor", numbers=",".join(names), once="", proplist=proplist):
            observations += self._observeTable(session, row, self.__properties, row.get("name", ""))
        return observations
