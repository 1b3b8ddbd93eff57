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

import socket
from types import SimpleNamespace
from unittest.mock import patch

import dns.exception
import dns.resolver
import pytest
from librouteros.exceptions import ConnectionClosed, TrapError

from mikrotik_exporter.client import DeviceClient, Session, resolveAddress
from mikrotik_exporter.config import DnsServer, Options, SrvRecord
from mikrotik_exporter.exceptions import AuthError, DeviceTimeoutError, NetworkError, QueryError
from test.fakes import FakeApi, FakeConnector, makeDevice


class TestDeviceClient:
    def test_connect(self):
        api = FakeApi()
        connector = FakeConnector({"192.0.2.1": api})
        session = DeviceClient(Options(), connector=connector).connect(makeDevice("core", "192.0.2.1"), 5.0)

        assert session.address == "192.0.2.1"
        assert session.device.name == "core"
        assert session.usable
        call = connector.calls[0]
        assert call["port"] == 8728
        assert call["username"] == "prometheus"
        assert call["ssl"] is False
        assert 0 < call["timeout"] <= 5.0

    def test_connect_tls(self):
        connector = FakeConnector({"192.0.2.1": FakeApi()})
        DeviceClient(Options(tls=True, insecure=True), connector=connector).connect(makeDevice("core", "192.0.2.1"), 5.0)
        assert connector.calls[0]["port"] == 8729
        assert connector.calls[0]["ssl"] is True

    def test_device_overrides(self):
        connector = FakeConnector({"192.0.2.1": FakeApi()})
        device = makeDevice("core", "192.0.2.1", port=18729, tls=True)
        DeviceClient(Options(tls=False), connector=connector).connect(device, 5.0)
        assert connector.calls[0]["port"] == 18729
        assert connector.calls[0]["ssl"] is True

    @pytest.mark.parametrize(
        "error, expected",
        [
            (TrapError("invalid user name or password (6)"), AuthError),
            (socket.timeout("timed out"), DeviceTimeoutError),
            (ConnectionRefusedError(111, "Connection refused"), NetworkError),
            (ConnectionClosed("socket closed"), NetworkError),
        ],
    )
    def test_connect_errors(self, error, expected):
        client = DeviceClient(Options(), connector=FakeConnector({"192.0.2.1": error}))
        with pytest.raises(expected) as info:
            client.connect(makeDevice("core", "192.0.2.1"), 1.0)
        assert info.value.device == "core"


class TestResolveAddress:
    def srvDevice(self, dns=None):
        return makeDevice("branch", None, srv=SrvRecord("_api._tcp.branch.example.net", dns))

    def test_static_address(self):
        assert resolveAddress(makeDevice("core", "192.0.2.1"), False, 1.0) == ("192.0.2.1", 8728)

    def test_srv_record(self):
        answer = SimpleNamespace(target="router.branch.example.net.", port=18728)
        with patch("dns.resolver.Resolver") as resolver:
            resolver.return_value.resolve.return_value = [answer]
            host, port = resolveAddress(self.srvDevice(DnsServer("192.0.2.53", 5353)), False, 1.0)

        assert (host, port) == ("router.branch.example.net", 18728)
        resolver.assert_called_once_with(configure=False)
        assert resolver.return_value.nameservers == ["192.0.2.53"]
        assert resolver.return_value.port == 5353

    def test_srv_multiple_answers(self):
        answers = [SimpleNamespace(target="a.example.net.", port=8728), SimpleNamespace(target="b.example.net.", port=8728)]
        with patch("dns.resolver.Resolver") as resolver:
            resolver.return_value.resolve.return_value = answers
            with pytest.raises(NetworkError):
                resolveAddress(self.srvDevice(), False, 1.0)

    def test_srv_failures(self):
        with patch("dns.resolver.Resolver") as resolver:
            resolver.return_value.resolve.side_effect = dns.resolver.NXDOMAIN()
            with pytest.raises(NetworkError):
                resolveAddress(self.srvDevice(), False, 1.0)

            resolver.return_value.resolve.side_effect = dns.exception.Timeout()
            with pytest.raises(DeviceTimeoutError):
                resolveAddress(self.srvDevice(), False, 1.0)

    def test_missing_system_resolver(self):
        with patch("dns.resolver.Resolver", side_effect=dns.resolver.NoResolverConfiguration()):
            with pytest.raises(NetworkError):
                resolveAddress(self.srvDevice(), False, 1.0)


class TestSession:
    def test_query_words(self):
        api = FakeApi({"/ip/dhcp-server/lease/print": [{"server": "lan"}]})
        session = Session(makeDevice("core", "192.0.2.1"), "192.0.2.1", api)

        rows = session.query("/ip/dhcp-server/lease", proplist=["server", "host-name"], where={"status": "bound"})
        assert rows == [{"server": "lan"}]
        assert api.calls[-1] == ("/ip/dhcp-server/lease/print", ("=.proplist=server,host-name", "?status=bound"))

        session.query("/interface/wireless", command="monitor", numbers="wlan1", once="")
        assert api.calls[-1] == ("/interface/wireless/monitor", ("=numbers=wlan1", "=once="))

    def test_trap_keeps_session(self):
        api = FakeApi({"/routing/bgp/session/print": TrapError("no such command prefix")})
        session = Session(makeDevice("core", "192.0.2.1"), "192.0.2.1", api)
        with pytest.raises(QueryError):
            session.query("/routing/bgp/session")
        assert session.usable

    @pytest.mark.parametrize("error", [ConnectionClosed("socket closed"), BrokenPipeError(), socket.timeout()])
    def test_transport_error_breaks_session(self, error):
        api = FakeApi({"/system/resource/print": error})
        session = Session(makeDevice("core", "192.0.2.1"), "192.0.2.1", api)
        with pytest.raises(QueryError):
            session.query("/system/resource")
        assert not session.usable
        assert not session.closed

    def test_close(self):
        api = FakeApi()
        session = Session(makeDevice("core", "192.0.2.1"), "192.0.2.1", api)
        session.close()
        session.close()
        assert api.closed == 1
        assert session.closed
        with pytest.raises(QueryError):
            session.query("/system/resource")
