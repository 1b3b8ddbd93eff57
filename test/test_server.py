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

import time
from unittest.mock import MagicMock, patch

import pytest
from flask import Flask

from mikrotik_exporter import server
from mikrotik_exporter.client import DeviceClient
from mikrotik_exporter.exceptions import ConfigError
from mikrotik_exporter.monitor import Monitor
from test.fakes import FakeApi, FakeConnector, makeConfig, makeDevice, samples


@pytest.fixture
def monitor(monkeypatch):
    monkeypatch.setenv("MIKROTIK_EXPORTER_LOG_LEVEL", "warning")
    config = makeConfig([makeDevice("core", "192.0.2.1")])
    api = FakeApi({"/system/resource/print": [{"cpu-load": 4, "version": "7.15.2", "board-name": "RB5009"}]})
    monitor = Monitor(config, client=DeviceClient(config.options, connector=FakeConnector({"192.0.2.1": api})))
    monitor.initMetrics()
    return monitor


class TestRoutes:
    def test_metrics(self, monitor):
        client = server.registerRoutes(Flask("test"), monitor, "/metrics").test_client()
        response = client.get("/metrics")
        assert response.status_code == 200
        assert response.content_type.startswith("text/plain")
        values = {(name, labels.get("name")): value for name, labels, value in samples(response.data)}
        assert values[("mikrotik_up", "core")] == 1
        assert values[("mikrotik_system_cpu_load", "core")] == 4

    def test_custom_path(self, monitor):
        client = server.registerRoutes(Flask("test"), monitor, "/scrape").test_client()
        assert client.get("/scrape").status_code == 200
        assert client.get("/metrics").status_code == 404
        assert b'href="/scrape"' in client.get("/").data

    def test_healthz(self):
        client = server.registerRoutes(Flask("test"), MagicMock(), "/metrics").test_client()
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.data == b"ok"

    def test_scrape_timeout_header(self):
        monitor = MagicMock()
        monitor.updateAllMetrics.return_value = b""
        client = server.registerRoutes(Flask("test"), monitor, "/metrics").test_client()

        before = time.monotonic()
        client.get("/metrics", headers={"X-Prometheus-Scrape-Timeout-Seconds": "4"})
        deadline = monitor.updateAllMetrics.call_args.args[0]
        assert before + 3.0 < deadline <= time.monotonic() + 3.5

        client.get("/metrics")
        assert monitor.updateAllMetrics.call_args.args[0] is None


class TestScrapeDeadline:
    @pytest.mark.parametrize("value", [None, "", "abc", "0", "-2"])
    def test_ignored(self, value):
        headers = {} if value is None else {server.SCRAPE_TIMEOUT_HEADER: value}
        assert server.scrapeDeadline(headers) is None

    def test_short_timeout_kept(self):
        deadline = server.scrapeDeadline({server.SCRAPE_TIMEOUT_HEADER: "0.2"})
        assert 0 < deadline - time.monotonic() <= 0.2


class TestCommandLine:
    def test_bind_address(self):
        assert server.bindAddress(":9436") == "0.0.0.0:9436"
        assert server.bindAddress("127.0.0.1:9000") == "127.0.0.1:9000"
        with pytest.raises(ConfigError):
            server.bindAddress("localhost")

    def test_feature_flags(self):
        args = server.buildParser().parse_args(["--with-bgp", "--with-netwatch"])
        assert args.with_bgp and args.with_netwatch
        assert not args.with_health
        assert args.tls is None

    def test_config_error_exit_code(self, capsys):
        with pytest.raises(SystemExit) as info:
            server.main(["--device", "core"])
        assert info.value.code == server.EXIT_CONFIG_ERROR

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as info:
            server.main(["--version"])
        assert info.value.code == 0
        assert "mikrotik-exporter" in capsys.readouterr().out

    def test_main_starts_server(self, monkeypatch):
        monkeypatch.setenv("MIKROTIK_EXPORTER_LOG_LEVEL", "warning")
        with patch.object(server.ExporterServer, "run") as run:
            server.main(["--device", "core", "--address", "192.0.2.1", "--user", "u", "--password", "p", "--port", ":19436"])
        run.assert_called_once()
