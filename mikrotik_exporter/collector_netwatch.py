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

"""Netwatch monitoring

One gauge per enabled netwatch entry: 1 while the host is up, 0 otherwise,
with the reported status kept as a label.
"""

from mikrotik_exporter.collector_base import Collector, stateValue


class NETWATCH(Collector):
    domain = "netwatch"

    def registerMetrics(self):
        """Register metrics of interest"""
        self._register("netwatch_status", "Netwatch host is up (1) or not (0)", ["host", "comment", "status"])

    def collectMetrics(self, session):
        """Collect netwatch host states"""
        rows = session.query("/tool/netwatch", proplist=["host", "comment", "status"], where={"disabled": "false"})
        observations = []
        for row in rows:
            status = str(row.get("status", "unknown"))
            observations.append(
                self._observe(session, "netwatch_status", stateValue(status, "up"), row.get("host", ""), row.get("comment", ""), status)
            )
        return observations
