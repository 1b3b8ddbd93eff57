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

"""Connection tracking monitoring"""

from mikrotik_exporter.collector_base import Collector


class CONNTRACK(Collector):
    domain = "conntrack"

    # fmt: off
    __properties = [
        {"property": "total-entries", "metricName": "ip_conntrack_entries",     "description": "Number of tracked connections"},
        {"property": "max-entries",   "metricName": "ip_conntrack_max_entries", "description": "Maximum number of tracked connections"},
    ]
    # fmt: on

    def registerMetrics(self):
        self._registerTable(self.__properties)

    def collectMetrics(self, session):
        observations = []
        for row in session.query("/ip/firewall/connection/tracking", proplist=["total-entries", "max-entries"]):
            observations += self._observeTable(session, row, self.__properties)
        return observations
