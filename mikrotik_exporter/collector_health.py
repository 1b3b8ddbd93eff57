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

"""Board health monitoring

Reads /system/health. RouterOS 7 reports one row per sensor (name, value,
type); RouterOS 6 reports a single row with one property per sensor. Both
layouts are mapped onto the same fixed set of metrics.
"""

import logging

from mikrotik_exporter import utils
from mikrotik_exporter.collector_base import Collector, stateValue
from mikrotik_exporter.exceptions import ParseError


class HEALTH(Collector):
    domain = "health"

    # fmt: off
    __sensors = [
        {"property": "voltage",            "metricName": "health_voltage",                 "description": "Supply voltage in volts"},
        {"property": "current",            "metricName": "health_current",                 "description": "Current draw in milliamperes"},
        {"property": "power-consumption",  "metricName": "health_power_consumption_watts", "description": "Power consumption in watts"},
        {"property": "temperature",        "metricName": "health_temperature_celsius",     "description": "System temperature in degrees Celsius"},
        {"property": "cpu-temperature",    "metricName": "health_cpu_temperature_celsius", "description": "CPU temperature in degrees Celsius"},
        {"property": "board-temperature1", "metricName": "health_board_temperature_celsius", "description": "Board temperature in degrees Celsius"},
        {"property": "phy-temperature",    "metricName": "health_phy_temperature_celsius", "description": "PHY temperature in degrees Celsius"},
        {"property": "sfp-temperature",    "metricName": "health_sfp_temperature_celsius", "description": "SFP cage temperature in degrees Celsius"},
        {"property": "switch-temperature", "metricName": "health_switch_temperature_celsius", "description": "Switch chip temperature in degrees Celsius"},
        {"property": "psu1-voltage",       "metricName": "health_psu1_voltage",            "description": "PSU 1 voltage in volts"},
        {"property": "psu2-voltage",       "metricName": "health_psu2_voltage",            "description": "PSU 2 voltage in volts"},
    ]
    # fmt: on

    __fans = ("fan1-speed", "fan2-speed", "fan3-speed", "fan4-speed")
    __psus = ("psu1-state", "psu2-state")

    def registerMetrics(self):
        """Register metrics of interest"""
        self._registerTable(self.__sensors)
        self._register("health_fan_speed_rpm", "Fan speed in RPM", ["fan"])
        self._register("health_psu_ok", "PSU state is ok (1) or not (0)", ["psu", "state"])

    @staticmethod
    def __flatten(rows):
        """Turn RouterOS 7 name/value rows into a RouterOS 6 style property dict."""
        values = {}
        for row in rows:
            if "name" in row and "value" in row:
                values[row["name"]] = row["value"]
            else:
                values.update(row)
        return values

    def collectMetrics(self, session):
        """Collect health sensor values"""
        values = self.__flatten(session.query("/system/health"))
        observations = self._observeTable(session, values, self.__sensors)

        for fan in self.__fans:
            if fan in values:
                try:
                    speed = utils.parseFloat(values[fan])
                except ParseError as e:
                    logging.warning(f"{session.device.name}: health: unable to parse {fan}: {e}")
                    continue
                observations.append(self._observe(session, "health_fan_speed_rpm", speed, fan.split("-")[0]))

        for psu in self.__psus:
            if psu in values:
                state = str(values[psu])
                observations.append(self._observe(session, "health_psu_ok", stateValue(state, "ok"), psu.split("-")[0], state))

        return observations
