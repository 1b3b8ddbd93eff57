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

"""Routing table monitoring

Counts enabled IPv4 and IPv6 routes, in total and per routing protocol.
"""

from mikrotik_exporter.collector_base import Collector

PROTOCOLS = ("bgp", "static", "ospf", "dynamic", "connect", "rip")

# menu path per IP version
ROUTE_PATHS = {"4": "/ip/route", "6": "/ipv6/route"}


class ROUTES(Collector):
    domain = "routes"

    def registerMetrics(self):
        """Register metrics of interest"""
        self._register("routes_total_routes", "Number of enabled routes", ["ip_version"])
        self._register("routes_protocol", "Number of enabled routes per protocol", ["ip_version", "protocol"])

    def collectMetrics(self, session):
        """Count routes per IP version and protocol"""
        observations = []
        for version, path in ROUTE_PATHS.items():
            rows = session.query(path, proplist=list(PROTOCOLS) + ["disabled"], where={"disabled": "false"})
            observations.append(self._observe(session, "routes_total_routes", len(rows), version))
            for protocol in PROTOCOLS:
                count = sum(1 for row in rows if row.get(protocol) in (True, "true", "yes"))
                observations.append(self._observe(session, "routes_protocol", count, version, protocol))
        return observations
