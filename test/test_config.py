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

import argparse

import pytest

from mikrotik_exporter.config import buildConfig, loadConfigFile, parseTimeout
from mikrotik_exporter.exceptions import ConfigError
from mikrotik_exporter.server import buildParser

SINGLE_DEVICE = ["--device", "core", "--address", "192.0.2.1", "--user", "prometheus", "--password", "secret"]

RUNTIME_CONFIG = """
[mikrotik_exporter]
timeout = 5s
reuse_connections = yes

[mikrotik_exporter.features]
health = True
bgp = False

[device.core]
address = 192.0.2.1
user = prometheus
password = "secret"

[device.branch]
srv = _api._tcp.branch.example.net
dns_address = 192.0.2.53
dns_port = 5353
user = prometheus
password = secret
tls = yes
features = wlansta, dhcp
"""


def parse(*argv):
    return buildParser().parse_args(list(argv))


@pytest.fixture
def runtime_file(tmp_path):
    path = tmp_path / "mikrotik.ini"
    path.write_text(RUNTIME_CONFIG)
    return str(path)


class TestCommandLine:
    def test_single_device(self):
        config = buildConfig(parse(*SINGLE_DEVICE, "--with-health", "--with-dhcp", "--timeout", "2.5"))
        assert len(config.devices) == 1
        device = config.devices[0]
        assert (device.name, device.address, device.user) == ("core", "192.0.2.1", "prometheus")
        assert device.features is None
        assert config.features == {"health", "dhcp"}
        assert config.options.timeout == 2.5
        assert config.options.tls is False
        assert config.listen == ":9436"
        assert config.metrics_path == "/metrics"

    def test_defaults(self):
        config = buildConfig(parse(*SINGLE_DEVICE))
        assert config.features == frozenset()
        assert config.options.timeout == 10.0
        assert config.options.reuse_connections is False
        assert config.log_format == "json"

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("MIKROTIK_PASSWORD", raising=False)
        with pytest.raises(ConfigError):
            buildConfig(parse("--device", "core", "--address", "192.0.2.1", "--user", "prometheus"))

    def test_credentials_from_environment(self, monkeypatch):
        monkeypatch.setenv("MIKROTIK_USER", "envuser")
        monkeypatch.setenv("MIKROTIK_PASSWORD", "envsecret")
        config = buildConfig(parse("--device", "core", "--address", "192.0.2.1"))
        assert config.devices[0].user == "envuser"
        assert config.devices[0].password == "envsecret"

    def test_device_port(self):
        config = buildConfig(parse(*SINGLE_DEVICE, "--deviceport", "18728"))
        assert config.devices[0].apiPort(False) == 18728

    def test_invalid_device_port(self):
        with pytest.raises(ConfigError):
            buildConfig(parse(*SINGLE_DEVICE, "--deviceport", "70000"))

    def test_unknown_attributes_tolerated(self):
        args = argparse.Namespace(device="core", address="192.0.2.1", user="u", password="p", deviceport=None)
        config = buildConfig(args)
        assert config.devices[0].name == "core"


class TestTimeout:
    @pytest.mark.parametrize("value, expected", [("10", 10.0), ("2.5", 2.5), ("500ms", 0.5), ("1m", 60.0), (3, 3.0)])
    def test_valid(self, value, expected):
        assert parseTimeout(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", ["0", "-1", "soon"])
    def test_invalid(self, value):
        with pytest.raises(ConfigError):
            parseTimeout(value)


class TestRuntimeFile:
    def test_devices(self, runtime_file):
        config = buildConfig(parse(), loadConfigFile(runtime_file))
        core, branch = config.devices
        assert core.address == "192.0.2.1"
        assert core.password == "secret"
        assert core.srv is None
        assert branch.address is None
        assert branch.srv.record == "_api._tcp.branch.example.net"
        assert (branch.srv.dns.address, branch.srv.dns.port) == ("192.0.2.53", 5353)
        assert branch.useTLS(False) is True
        assert branch.apiPort(True) == 8729
        assert config.options.timeout == 5.0
        assert config.options.reuse_connections is True

    def test_features_merge(self, runtime_file):
        config = buildConfig(parse("--with-routes"), loadConfigFile(runtime_file))
        assert config.features == {"health", "routes"}

        core, branch = config.devices
        assert core.enabledFeatures(config.features) == {"health", "routes"}
        assert branch.enabledFeatures(config.features) == {"wlansta", "dhcp"}
        assert config.allFeatures() == {"health", "routes", "wlansta", "dhcp"}

    def test_command_line_overrides(self, runtime_file):
        config = buildConfig(parse("--timeout", "1s", "--log-format", "text"), loadConfigFile(runtime_file))
        assert config.options.timeout == 1.0
        assert config.log_format == "text"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            loadConfigFile(str(tmp_path / "absent.ini"))

    def test_duplicate_device(self, tmp_path):
        path = tmp_path / "duplicate.ini"
        path.write_text("[device.core]\naddress = a\nuser = u\npassword = p\n[device.core]\naddress = b\n")
        with pytest.raises(ConfigError):
            loadConfigFile(str(path))

    @pytest.mark.parametrize(
        "section",
        [
            "[device.core]\naddress = 192.0.2.1\nsrv = _api._tcp.example.net\nuser = u\npassword = p\n",
            "[device.core]\nuser = u\npassword = p\n",
            "[device.core]\naddress = 192.0.2.1\nuser = u\n",
            "[device.core]\naddress = 192.0.2.1\nuser = u\npassword = p\nfeatures = health, teleport\n",
            "[mikrotik_exporter.features]\nteleport = true\n[device.core]\naddress = 192.0.2.1\nuser = u\npassword = p\n",
            "[mikrotik_exporter]\ntimeout = 0\n[device.core]\naddress = 192.0.2.1\nuser = u\npassword = p\n",
            "[mikrotik_exporter]\n",
        ],
    )
    def test_invalid(self, tmp_path, section):
        path = tmp_path / "invalid.ini"
        path.write_text(section)
        with pytest.raises(ConfigError):
            buildConfig(parse(), loadConfigFile(str(path)))


YAML_CONFIG = """
devices:
  - name: core
    address: 192.0.2.1
    user: prometheus
    password: secret
    port: 18728
  - name: branch
    srv:
      record: _api._tcp.branch.example.net
      dns:
        address: 192.0.2.53
        port: 5353
    user: prometheus
    password: secret
features:
  health: true
  dhcp: true
  bgp: false
"""


class TestYamlFile:
    @pytest.fixture
    def yaml_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(YAML_CONFIG)
        return str(path)

    def test_devices(self, yaml_file):
        config = buildConfig(parse(), loadConfigFile(yaml_file))
        core, branch = config.devices
        assert (core.name, core.address, core.user, core.password) == ("core", "192.0.2.1", "prometheus", "secret")
        assert core.apiPort(False) == 18728
        assert core.srv is None
        assert branch.address is None
        assert branch.srv.record == "_api._tcp.branch.example.net"
        assert (branch.srv.dns.address, branch.srv.dns.port) == ("192.0.2.53", 5353)
        assert branch.apiPort(False) == 8728

    def test_features(self, yaml_file):
        config = buildConfig(parse("--with-routes"), loadConfigFile(yaml_file))
        assert config.features == {"health", "dhcp", "routes"}

    def test_srv_without_dns_server(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("devices:\n  - name: ap\n    srv:\n      record: _api._tcp.example.net\n    user: u\n    password: p\n")
        (device,) = buildConfig(parse(), loadConfigFile(str(path))).devices
        assert device.srv.record == "_api._tcp.example.net"
        assert device.srv.dns is None

    def test_empty_port_ignored(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text('devices:\n  - name: core\n    address: 192.0.2.1\n    port: ""\n    user: u\n    password: p\n')
        (device,) = buildConfig(parse(), loadConfigFile(str(path))).devices
        assert device.apiPort(False) == 8728

    @pytest.mark.parametrize(
        "content",
        [
            "devices: [unclosed\n",
            "- just\n- a list\n",
            "devices:\n  core: 192.0.2.1\n",
            "devices:\n  - name: core\n    address: 192.0.2.1\n    user: u\n    password: p\nfeatures: [health]\n",
            "devices:\n  - name: core\n    address: 192.0.2.1\n    user: u\n    password: p\n"
            "  - name: core\n    address: 192.0.2.2\n    user: u\n    password: p\n",
            "devices:\n  - address: 192.0.2.1\n    user: u\n    password: p\n",
            "devices:\n  - name: core\n    address: 192.0.2.1\n    user: u\n    password: p\nfeatures:\n  teleport: true\n",
            "features:\n  health: true\n",
        ],
    )
    def test_invalid(self, tmp_path, content):
        path = tmp_path / "invalid.yaml"
        path.write_text(content)
        with pytest.raises(ConfigError):
            buildConfig(parse(), loadConfigFile(str(path)))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            loadConfigFile(str(tmp_path / "absent.yml"))
