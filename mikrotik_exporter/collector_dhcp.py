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

"""DHCP server monitoring

Three independent features share this module:

  dhcp    active lease count per DHCPv4 server
  dhcpl   details of every bound DHCPv4 lease
  dhcpv6  binding count per DHCPv6 server

mikrotik_dhcp_leases_active_count{name="core",address="192.0.2.1",server="lan"} 42.0
mikrotik_dhcpl_expires_after_seconds{...,server="lan",mac_address="AA:BB:CC:00:11:22",lease_address="10.0.0.23",hostname="printer"} 512.0
mikrotik_dhcpv6_binding_count{name="core",address="192.0.2.1",server="lan6"} 3.0
"""

from collections import Counter

from mikrotik_exporter import utils
from mikrotik_exporter.collector_base import Collector


def _countPerServer(session, serverPath, itemPath, where=None):
    """Count rows of itemPath per server, including servers without any rows."""
    counts = Counter({row["name"]: 0 for row in session.query(serverPath, proplist=["name"]) if "name" in row})
    for row in session.query(itemPath, proplist=["server"], where=where):
        counts[row.get("server", "")] += 1
    return counts


class DHCP(Collector):
    domain = "dhcp"

    def registerMetrics(self):
        """Register metrics of interest"""
        self._register("dhcp_leases_active_count", "Number of bound leases per DHCP server", ["server"])

    def collectMetrics(self, session):
        """Count bound leases per server"""
        counts = _countPerServer(session, "/ip/dhcp-server", "/ip/dhcp-server/lease", where={"status": "bound"})
        return [self._observe(session, "dhcp_leases_active_count", count, server) for server, count in counts.items()]


class DHCPL(Collector):
    domain = "dhcpl"

    # fmt: off
    __properties = [
        {"property": "expires-after", "metricName": "dhcpl_expires_after_seconds", "description": "Seconds until the lease expires", "parse": utils.parseDuration},
        {"property": "last-seen",     "metricName": "dhcpl_last_seen_seconds",     "description": "Seconds since the client was last seen", "parse": utils.parseDuration},
    ]
    # fmt: on

    def registerMetrics(self):
        """Register metrics of interest"""
        self._registerTable(self.__properties, ["server", "mac_address", "lease_address", "hostname"])

    def collectMetrics(self, session):
        """Collect details of bound leases"""
        proplist = ["server", "active-mac-address", "active-address", "host-name", "expires-after", "last-seen"]
        observations = []
        for row in session.query("/ip/dhcp-server/lease", proplist=proplist, where={"status": "bound"}):
            labels = (
                row.get("server", ""),
                row.get("active-mac-address", ""),
                row.get("active-address", ""),
                row.get("host-name", ""),
            )
            observations += self._observeTable(session, row, self.__properties, *labels)
        return observations


class DHCPV6(Collector):
    domain = "dhcpv6"

    def registerMetrics(self):
        """Register metrics of interest"""
        self._register("dhcpv6_binding_count", "Number of bindings per DHCPv6 server", ["server"])

    def collectMetrics(self, session):
        """Count bindings per server"""
        counts = _countPerServer(session, "/ipv6/dhcp-server", "/ipv6/dhcp-server/binding")
        return [self._observe(session, "dhcpv6_binding_count", count, server) for server, count in counts.items()]
