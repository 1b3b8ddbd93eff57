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

"""IPsec monitoring

Exports the phase 2 state of configured IPsec policies and the traffic
counters of active peers.
"""

from mikrotik_exporter import utils
from mikrotik_exporter.collector_base import Collector, stateValue


class IPSEC(Collector):
    domain = "ipsec"

    # fmt: off
    __peerCounters = [
        {"property": "rx-bytes",   "metricName": "ipsec_peer_rx_bytes",   "description": "Bytes received from the peer",   "kind": "counter"},
        {"property": "tx-bytes",   "metricName": "ipsec_peer_tx_bytes",   "description": "Bytes sent to the peer",         "kind": "counter"},
        {"property": "rx-packets", "metricName": "ipsec_peer_rx_packets", "description": "Packets received from the peer", "kind": "counter"},
        {"property": "tx-packets", "metricName": "ipsec_peer_tx_packets", "description": "Packets sent to the peer",       "kind": "counter"},
        {"property": "uptime",     "metricName": "ipsec_peer_uptime_seconds", "description": "Peer uptime in seconds", "parse": utils.parseDuration},
    ]
    # fmt: on

    def registerMetrics(self):
        """Register metrics of interest"""
        policy = ["src_dst", "comment"]
        self._register("ipsec_policy_ph2_established", "Phase 2 of the policy is established (1) or not (0)", policy + ["state"])
        self._register("ipsec_policy_active", "Policy is active (1) or not (0)", policy)
        self._register("ipsec_policy_invalid", "Policy is invalid (1) or not (0)", policy)
        self._register("ipsec_peer_established", "Peer is established (1) or not (0)", ["peer", "state"])
        self._registerTable(self.__peerCounters, ["peer"])

    def collectMetrics(self, session):
        """Collect policy states and peer counters"""
        observations = []
        policies = session.query(
            "/ip/ipsec/policy",
            proplist=["src-address", "dst-address", "ph2-state", "active", "invalid", "comment", "template"],
            where={"disabled": "false"},
        )
        for row in policies:
            if utils.parseBool(row.get("template", False)):
                continue
            labels = (f"{row.get('src-address', '')}-{row.get('dst-address', '')}", row.get("comment", ""))
            state = str(row.get("ph2-state", "no-phase2"))
            observations.append(self._observe(session, "ipsec_policy_ph2_established", stateValue(state, "established"), *labels, state))
            observations.append(self._observe(session, "ipsec_policy_active", utils.parseBool(row.get("active", False)), *labels))
            observations.append(self._observe(session, "ipsec_policy_invalid", utils.parseBool(row.get("invalid", False)), *labels))

        for row in session.query("/ip/ipsec/active-peers"):
            peer = row.get("remote-address", "")
            state = str(row.get("state", "unknown"))
            observations.append(self._observe(session, "ipsec_peer_established", stateValue(state, "established"), peer, state))
            observations += self._observeTable(session, row, self.__peerCounters, peer)
        return observations
