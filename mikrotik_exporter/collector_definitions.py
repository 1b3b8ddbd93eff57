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

# Data collector definitions (metadata to support dynamic loading)
#
# Entries without a feature flag are always enabled.

COLLECTORS = [
    {"feature": None, "file": "mikrotik_exporter.collector_resource", "className": "RESOURCE"},
    {"feature": None, "file": "mikrotik_exporter.collector_interface", "className": "INTERFACE"},
    {"feature": "bgp", "file": "mikrotik_exporter.collector_bgp", "className": "BGP"},
    {"feature": "conntrack", "file": "mikrotik_exporter.collector_conntrack", "className": "CONNTRACK"},
    {"feature": "routes", "file": "mikrotik_exporter.collector_routes", "className": "ROUTES"},
    {"feature": "dhcp", "file": "mikrotik_exporter.collector_dhcp", "className": "DHCP"},
    {"feature": "dhcpl", "file": "mikrotik_exporter.collector_dhcp", "className": "DHCPL"},
    {"feature": "dhcpv6", "file": "mikrotik_exporter.collector_dhcp", "className": "DHCPV6"},
    {"feature": "firmware", "file": "mikrotik_exporter.collector_firmware", "className": "FIRMWARE"},
    {"feature": "health", "file": "mikrotik_exporter.collector_health", "className": "HEALTH"},
    {"feature": "poe", "file": "mikrotik_exporter.collector_ethernet", "className": "POE"},
    {"feature": "pools", "file": "mikrotik_exporter.collector_pools", "className": "POOLS"},
    {"feature": "optics", "file": "mikrotik_exporter.collector_ethernet", "className": "OPTICS"},
    {"feature": "w60g", "file": "mikrotik_exporter.collector_wireless", "className": "W60G"},
    {"feature": "wlansta", "file": "mikrotik_exporter.collector_wireless", "className": "WLANSTA"},
    {"feature": "wlanif", "file": "mikrotik_exporter.collector_wireless", "className": "WLANIF"},
    {"feature": "capsman", "file": "mikrotik_exporter.collector_capsman", "className": "CAPSMAN"},
    {"feature": "monitor", "file": "mikrotik_exporter.collector_ethernet", "className": "MONITOR"},
    {"feature": "ipsec", "file": "mikrotik_exporter.collector_ipsec", "className": "IPSEC"},
    {"feature": "lte", "file": "mikrotik_exporter.collector_lte", "className": "LTE"},
    {"feature": "netwatch", "file": "mikrotik_exporter.collector_netwatch", "className": "NETWATCH"},
]
