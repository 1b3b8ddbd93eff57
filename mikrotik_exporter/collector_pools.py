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

"""IP address pool monitoring

For every IPv4 and IPv6 pool, reports how many addresses are in use, and for
IPv4 pools the number of addresses the pool ranges hold.
"""

import ipaddress
import logging

from mikrotik_exporter.collector_base import Collector
from mikrotik_exporter.exceptions import ParseError

POOL_PATHS = {"4": "/ip/pool", "6": "/ipv6/pool"}


def poolSize(ranges):
    """Number of addresses in a RouterOS IPv4 pool range list ("10.0.0.10-10.0.0.99,10.0.1.0/28")."""
    total = 0
    for item in str(ranges).split(","):
        item = item.strip()
        if not item:
            continue
        try:
            if "-" in item:
                first, last = (ipaddress.IPv4Address(part.strip()) for part in item.split("-", 1))
                if last < first:
                    raise ParseError(f"invalid pool range {item!r}")
                total += int(last) - int(first) + 1
            elif "/" in item:
                total += ipaddress.IPv4Network(item, strict=False).num_addresses
            else:
                ipaddress.IPv4Address(item)
                total += 1
        except ValueError as e:
            raise ParseError(f"invalid pool range {item!r}: {e}")
    return total


class POOLS(Collector):
    domain = "pools"

    def registerMetrics(self):
        """Register metrics of interest"""
        self._register("ip_pool_used_count", "Number of used addresses per IP pool", ["ip_version", "pool"])
        self._register("ip_pool_size", "Number of addresses in an IPv4 pool", ["ip_version", "pool"])

    def collectMetrics(self, session):
        """Collect pool usage"""
        observations = []
        for version, path in POOL_PATHS.items():
            pools = session.query(path, proplist=["name", "ranges", "prefix"])
            used = session.query(path + "/used", proplist=["pool"])
            for pool in pools:
                name = pool.get("name", "")
                count = sum(1 for row in used if row.get("pool") == name)
                observations.append(self._observe(session, "ip_pool_used_count", count, version, name))
                if version == "4" and pool.get("ranges"):
                    try:
                        observations.append(self._observe(session, "ip_pool_size", poolSize(pool["ranges"]), version, name))
                    except ParseError as e:
                        logging.warning(f"{session.device.name}: pools: {e}")
        return observations
