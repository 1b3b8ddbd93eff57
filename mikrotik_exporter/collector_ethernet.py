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

"""Ethernet port monitoring

Three features built on the "monitor" commands of the ethernet menus:

  monitor  link status, rate and duplex of every enabled ethernet port
  optics   SFP diagnostics (DDM) of SFP/SFP+/QSFP ports
  poe      PoE output status and power of PoE capable ports

Each monitor command is issued once with all port names to keep the number
of API round trips per device constant.
"""

from mikrotik_exporter import utils
from mikrotik_exporter.collector_base import Collector, stateValue


def _ethernetPorts(session):
    return session.query("/interface/ethernet", proplist=["name", "default-name"], where={"disabled": "false"})


def _monitor(session, path, names, proplist):
    if not names:
        return []
    return session.query(path, command="monitor", numbers=",".join(names), once="", proplist=proplist)


class MONITOR(Collector):
    domain = "monitor"

    def registerMetrics(self):
        """Register metrics of interest"""
        self._register("monitor_status", "Ethernet link is up (1) or not (0)", ["interface", "status"])
        self._register("monitor_rate", "Negotiated link rate in bits per second", ["interface"])
        self._register("monitor_full_duplex", "Link is full duplex (1) or not (0)", ["interface"])

    def collectMetrics(self, session):
        """Collect link state of ethernet ports"""
        names = [row["name"] for row in _ethernetPorts(session) if "name" in row]
        rows = _monitor(session, "/interface/ethernet", names, ["name", "status", "rate", "full-duplex"])

        observations = []
        for row in rows:
            name = row.get("name", "")
            status = str(row.get("status", "unknown"))
            observations.append(self._observe(session, "monitor_status", stateValue(status, "link-ok"), name, status))
            if row.get("rate"):
                observations.append(self._observe(session, "monitor_rate", utils.parseRate(row["rate"]), name))
            if "full-duplex" in row:
                observations.append(self._observe(session, "monitor_full_duplex", utils.parseBool(row["full-duplex"]), name))
        return observations


class OPTICS(Collector):
    domain = "optics"

    # fmt: off
    __properties = [
        {"property": "sfp-temperature",         "metricName": "optics_temperature_celsius", "description": "Module temperature in degrees Celsius"},
        {"property": "sfp-supply-voltage",      "metricName": "optics_voltage",             "description": "Module supply voltage in volts"},
        {"property": "sfp-tx-bias-current",     "metricName": "optics_tx_bias_milliamperes", "description": "Transmit bias current in mA"},
        {"property": "sfp-tx-power",            "metricName": "optics_tx_power_dbm",        "description": "Transmit power in dBm"},
        {"property": "sfp-rx-power",            "metricName": "optics_rx_power_dbm",        "description": "Receive power in dBm"},
        {"property": "sfp-rx-loss",             "metricName": "optics_rx_loss",             "description": "Receive loss of signal (1) or not (0)", "parse": utils.parseBool},
        {"property": "sfp-tx-fault",            "metricName": "optics_tx_fault",            "description": "Transmit fault (1) or not (0)",         "parse": utils.parseBool},
    ]
    # fmt: on

    def registerMetrics(self):
        """Register metrics of interest"""
        self._registerTable(self.__properties, ["interface"])

    def collectMetrics(self, session):
        """Collect SFP diagnostics"""
        names = [
            row["name"]
            for row in _ethernetPorts(session)
            if "sfp" in str(row.get("default-name", row.get("name", ""))).lower()
        ]
        proplist = ["name"] + [item["property"] for item in self.__properties]
        observations = []
        for row in _monitor(session, "/interface/ethernet", names, proplist):
            # Empty cages report no DDM values at all
            observations += self._observeTable(session, row, self.__properties, row.get("name", ""))
        return observations


class POE(Collector):
    domain = "poe"

    # fmt: off
    __properties = [
        {"property": "poe-out-voltage", "metricName": "poe_voltage",         "description": "PoE output voltage in volts"},
        {"property": "poe-out-current", "metricName": "poe_current_milliamperes", "description": "PoE output current in mA"},
        {"property": "poe-out-power",   "metricName": "poe_wattage",         "description": "PoE output power in watts"},
    ]
    # fmt: on

    def registerMetrics(self):
        """Register metrics of interest"""
        self._registerTable(self.__properties, ["interface"])
        self._register("poe_powered", "Port is delivering power (1) or not (0)", ["interface", "status"])

    def collectMetrics(self, session):
        """Collect PoE output values"""
        ports = session.query("/interface/ethernet/poe", proplist=["name", "poe-out"])
        names = [row["name"] for row in ports if "name" in row and row.get("poe-out") != "off"]
        proplist = ["name", "poe-out-status"] + [item["property"] for item in self.__properties]

        observations = []
        for row in _monitor(session, "/interface/ethernet/poe", names, proplist):
            name = row.get("name", "")
            status = str(row.get("poe-out-status", "unknown"))
            observations.append(self._observe(session, "poe_powered", stateValue(status, "powered-on"), name, status))
            observations += self._observeTable(session, row, self.__properties, name)
        return observations
