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

import pytest

from mikrotik_exporter.client import DeviceClient
from mikrotik_exporter.config import Options
from mikrotik_exporter.exceptions import DeviceBusyError, DeviceTimeoutError, NetworkError, QueryError
from mikrotik_exporter.pool import SessionPool
from test.fakes import FakeApi, FakeConnector, makeDevice


class CountingConnector(FakeConnector):
    """Hands out a fresh FakeApi for every connection."""

    def __init__(self):
        super().__init__({})
        self.created = []

    def __call__(self, host, **kwargs):
        api = FakeApi()
        self.created.append(api)
        self.apis[host] = api
        return super().__call__(host, **kwargs)


@pytest.fixture
def connector():
    return CountingConnector()


@pytest.fixture
def device():
    return makeDevice("core", "192.0.2.1")


class TestSessionPool:
    def test_no_reuse(self, connector, device):
        pool = SessionPool(DeviceClient(Options(), connector=connector))
        first = pool.acquire(device, 1.0)
        pool.release(first)
        second = pool.acquire(device, 1.0)
        pool.release(second)

        assert first is not second
        assert len(connector.created) == 2
        assert all(api.closed == 1 for api in connector.created)

    def test_reuse(self, connector, device):
        pool = SessionPool(DeviceClient(Options(), connector=connector), reuse=True)
        first = pool.acquire(device, 1.0)
        pool.release(first)
        second = pool.acquire(device, 1.0)
        pool.release(second)

        assert first is second
        assert len(connector.created) == 1
        assert connector.created[0].closed == 0

        pool.close()
        assert connector.created[0].closed == 1

    def test_discarded_session_not_reused(self, connector, device):
        pool = SessionPool(DeviceClient(Options(), connector=connector), reuse=True)
        first = pool.acquire(device, 1.0)
        pool.release(first, discard=True)
        second = pool.acquire(device, 1.0)
        pool.release(second)

        assert first is not second
        assert first.closed

    def test_broken_session_not_reused(self, connector, device):
        pool = SessionPool(DeviceClient(Options(), connector=connector), reuse=True)
        first = pool.acquire(device, 1.0)
        connector.created[0].replies["/system/resource/print"] = ConnectionResetError()
        with pytest.raises(QueryError):
            first.query("/system/resource")
        pool.release(first)

        second = pool.acquire(device, 1.0)
        assert second is not first
        assert first.closed

    def test_stale_session_replaced(self, connector, device):
        pool = SessionPool(DeviceClient(Options(), connector=connector), reuse=True, max_idle_seconds=0)
        first = pool.acquire(device, 1.0)
        pool.release(first)
        second = pool.acquire(device, 1.0)
        assert second is not first
        assert first.closed

    def test_device_busy(self, connector, device):
        pool = SessionPool(DeviceClient(Options(), connector=connector), reuse=True)
        held = pool.acquire(device, 1.0)
        with pytest.raises(DeviceBusyError):
            pool.acquire(device, 0.05)
        pool.release(held)
        pool.release(pool.acquire(device, 0.05))

    def test_failed_connect_releases_device(self, device):
        connector = FakeConnector({"192.0.2.1": ConnectionRefusedError(111, "Connection refused")})
        pool = SessionPool(DeviceClient(Options(), connector=connector), reuse=True)
        for _ in range(2):
            with pytest.raises(NetworkError):
                pool.acquire(device, 0.05)
        assert len(connector.calls) == 2

    @pytest.mark.parametrize("reuse", [False, True])
    @pytest.mark.parametrize("timeout", [0, -0.01])
    def test_exhausted_timeout(self, connector, device, reuse, timeout):
        pool = SessionPool(DeviceClient(Options(), connector=connector), reuse=reuse)
        with pytest.raises(DeviceTimeoutError):
            pool.acquire(device, timeout)
        assert connector.created == []

        # the device is not left locked
        pool.release(pool.acquire(device, 0.05))
