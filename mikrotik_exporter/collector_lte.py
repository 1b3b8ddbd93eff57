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

"""LTE modem monitoring

Signal quality of every enabled LTE interface, labeled with the serving cell
and primary band. RouterOS 6 exposes it through "info", RouterOS 7 through
"monitor".
"""

import logging

from mikrotik_exporter.collector_base import Collector
from mikrotik_exporter.exceptions import QueryError


class LTE(Collector):
    domain = "lte"

    # fmt: off
    __properties = [
        {"property": "rssi", "metricName": "lte_interface_rssi", "description": "Received signal strength indicator (dBm)"},
        {"property": "rsrp", "metricName": "lte_interface_rsrp", "description": "Reference signal received power (dBm)"},
        {"property": "rsrq", "metricName": "lte_interface_rsrq", "description": "Reference signal received quality (dB)"},
        {"property": "sinr", "metricName": "lte_interface_sinr", "description": "Signal to interference plus noise ratio (dB)"},
    ]
    # fmt: on

    def registerMetrics(self):
        """Register metrics of interest"""
        self._registerTable(self.__properties, ["interface", "cell_id", "primary_band"])

    def __signal(self, session, interface):
        try:
            return session.query("/interface/lte", command="info", number=interface, once="")
        except QueryError as e:
            logging.debug(f"{session.device.name}: lte: info unavailable for {interface}, using monitor ({e})")
            return session.query("/interface/lte", command="monitor", numbers=interface, once="")

    def collectMetrics(self, session):
        """Collect LTE signal values"""
        observations = []
        for iface in session.query("/interface/lte", proplist=["name"], where={"disabled": "false"}):
            name = iface.get("name", "")
            for row in self.__signal(session, name):
                cell = row.get("current-cellid", "")
                band = str(row.get("primary-band", "")).split(" ", 1)[0]
                observations += self._observeTable(session, row, self.__properties, name, cell, band)
        return observations
