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

"""Runtime configuration

Builds the immutable exporter configuration once at startup from an optional
INI runtime file and the command-line options. Example file:

[mikrotik_exporter]
timeout = 10s
tls = False

[mikrotik_exporter.features]
health = True
dhcp = True

[device.core-router]
address = 192.0.2.1
user = prometheus
password = secret

[device.branch-ap]
srv = _api._tcp.branch.example.net
dns_address = 192.0.2.53
user = prometheus
password = secret
features = wlansta

Files ending in .yml or .yaml are read in the YAML layout instead:

devices:
  - name: core-router
    address: 192.0.2.1
    user: prometheus
    password: secret
  - name: branch-ap
    srv:
      record: _api._tcp.branch.example.net
      dns:
        address: 192.0.2.53
        port: 53
    user: prometheus
    password: secret
features:
  health: true
  dhcp: true
"""

import configparser
import os
from dataclasses import dataclass, field
from typing import Optional

import yaml

from mikrotik_exporter import utils
from mikrotik_exporter.exceptions import ConfigError, ParseError

# Feature flags, in the order they are listed by --help.
FEATURES = (
    "bgp",
    "conntrack",
    "routes",
    "dhcp",
    "dhcpl",
    "dhcpv6",
    "firmware",
    "health",
    "poe",
    "pools",
    "optics",
    "w60g",
    "wlansta",
    "wlanif",
    "capsman",
    "monitor",
    "ipsec",
    "lte",
    "netwatch",
)

DEFAULT_TIMEOUT = 10.0
DEFAULT_API_PORT = 8728
DEFAULT_API_TLS_PORT = 8729
DEFAULT_LISTEN = ":9436"
DEFAULT_METRICS_PATH = "/metrics"

GLOBAL_SECTION = "mikrotik_exporter"
FEATURES_SECTION = "mikrotik_exporter.features"
DEVICE_SECTION_PREFIX = "device."
YAML_SUFFIXES = (".yml", ".yaml")


@dataclass(frozen=True)
class DnsServer:
    address: str
    port: int = 53


@dataclass(frozen=True)
class SrvRecord:
    record: str
    dns: Optional[DnsServer] = None


@dataclass(frozen=True)
class Device:
    """A RouterOS device to scrape."""

    name: str
    user: str
    password: str = field(repr=False)
    address: Optional[str] = None
    srv: Optional[SrvRecord] = None
    port: Optional[int] = None
    tls: Optional[bool] = None
    features: Optional[frozenset] = None

    def useTLS(self, default):
        return default if self.tls is None else self.tls

    def apiPort(self, tls):
        if self.port is not None:
            return self.port
        return DEFAULT_API_TLS_PORT if tls else DEFAULT_API_PORT

    def enabledFeatures(self, default):
        """Device-specific feature list when configured, otherwise the global set."""
        return default if self.features is None else self.features


@dataclass(frozen=True)
class Options:
    timeout: float = DEFAULT_TIMEOUT
    tls: bool = False
    insecure: bool = False
    reuse_connections: bool = False
    max_workers: Optional[int] = None


@dataclass(frozen=True)
class ExporterConfig:
    devices: tuple
    features: frozenset
    options: Options
    log_level: str = "info"
    log_format: str = "json"
    listen: str = DEFAULT_LISTEN
    metrics_path: str = DEFAULT_METRICS_PATH

    def allFeatures(self):
        """Union of every feature enabled globally or for any single device."""
        enabled = set(self.features)
        for device in self.devices:
            enabled |= device.enabledFeatures(self.features)
        return frozenset(enabled)


def loadConfigFile(path):
    """Read a runtime configuration file, INI or (by extension) YAML."""
    if str(path).lower().endswith(YAML_SUFFIXES):
        return loadYamlConfig(path)

    config = configparser.ConfigParser(interpolation=None)
    try:
        with open(path, "r") as f:
            config.read_file(f)
    except OSError as e:
        raise ConfigError(f"unable to read config file {path}: {e}")
    except configparser.Error as e:
        raise ConfigError(f"malformed config file {path}: {e}")
    return config


def loadYamlConfig(path):
    """Read a YAML file with a devices list and a features map.

    The content is mapped onto the INI section layout so both formats share
    the same validation.
    """
    try:
        with open(path, "r") as f:
            document = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"unable to read config file {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"malformed config file {path}: {e}")

    if not isinstance(document, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    devices = document.get("devices") or []
    features = document.get("features") or {}
    if not isinstance(devices, list) or not all(isinstance(d, dict) for d in devices):
        raise ConfigError(f"{path}: devices must be a list of mappings")
    if not isinstance(features, dict):
        raise ConfigError(f"{path}: features must be a mapping")

    config = configparser.ConfigParser(interpolation=None)
    config.add_section(GLOBAL_SECTION)
    config.add_section(FEATURES_SECTION)
    for key, value in features.items():
        config.set(FEATURES_SECTION, str(key).lower(), str(value))

    for entry in devices:
        name = str(entry.get("name") or "").strip()
        section = DEVICE_SECTION_PREFIX + name
        try:
            config.add_section(section)
        except configparser.DuplicateSectionError:
            raise ConfigError("device names must be unique")
        values = {
            "address": entry.get("address"),
            "user": entry.get("user"),
            "password": entry.get("password"),
            "port": entry.get("port"),
        }
        srv = entry.get("srv") or {}
        if not isinstance(srv, dict):
            raise ConfigError(f"device {name}: srv must be a mapping")
        dns = srv.get("dns") or {}
        if not isinstance(dns, dict):
            raise ConfigError(f"device {name}: srv.dns must be a mapping")
        values["srv"] = srv.get("record")
        values["dns_address"] = dns.get("address")
        values["dns_port"] = dns.get("port")
        for key, value in values.items():
            if value not in (None, ""):
                config.set(section, key, str(value))
    return config


def parseTimeout(value):
    """Accept plain seconds ("2.5") or RouterOS style durations ("500ms", "10s")."""
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        try:
            seconds = float(value)
        except ValueError:
            try:
                seconds = utils.parseDuration(value)
            except ParseError as e:
                raise ConfigError(f"invalid timeout: {e}")
    if seconds <= 0:
        raise ConfigError(f"timeout must be positive, got {value!r}")
    return seconds


def _parsePort(value, where):
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{where}: invalid port {value!r}")
    if not 0 < port < 65536:
        raise ConfigError(f"{where}: port {port} out of range")
    return port


def _parseFeatureList(value, where):
    names = {item.strip().lower() for item in value.split(",") if item.strip()}
    unknown = names - set(FEATURES)
    if unknown:
        raise ConfigError(f"{where}: unknown feature(s) {', '.join(sorted(unknown))}")
    return frozenset(names)


def _getBoolean(section, key, where):
    try:
        return section.getboolean(key)
    except ValueError:
        raise ConfigError(f"{where}: invalid boolean for {key}")


def _deviceFromSection(name, section):
    where = f"device {name}"
    address = utils.removeQuotes(section.get("address"))
    record = utils.removeQuotes(section.get("srv"))
    if bool(address) == bool(record):
        raise ConfigError(f"{where}: exactly one of address or srv must be set")

    srv = None
    if record:
        dns = None
        dns_address = utils.removeQuotes(section.get("dns_address"))
        if dns_address:
            dns = DnsServer(dns_address, _parsePort(section.get("dns_port", "53"), where))
        srv = SrvRecord(record, dns)

    port = section.get("port")
    features = section.get("features")
    return _validateDevice(
        Device(
            name=name,
            address=address or None,
            srv=srv,
            user=utils.removeQuotes(section.get("user", "")),
            password=utils.removeQuotes(section.get("password", "")),
            port=_parsePort(port, where) if port else None,
            tls=_getBoolean(section, "tls", where) if "tls" in section else None,
            features=_parseFeatureList(features, where) if features is not None else None,
        )
    )


def _validateDevice(device):
    if not device.name:
        raise ConfigError("device without a name")
    if not device.user or not device.password:
        raise ConfigError(f"device {device.name}: user and password are required")
    return device


def devicesFromFile(config):
    devices = []
    for section in config.sections():
        if section.startswith(DEVICE_SECTION_PREFIX):
            name = section[len(DEVICE_SECTION_PREFIX) :].strip()
            devices.append(_deviceFromSection(name, config[section]))
    return devices


def deviceFromArgs(args):
    """Single device defined on the command line, credentials may come from the environment."""
    user = args.user or os.environ.get("MIKROTIK_USER", "")
    password = args.password or os.environ.get("MIKROTIK_PASSWORD", "")
    if not args.device or not args.address or not user or not password:
        raise ConfigError("missing required param for single device configuration")
    port = _parsePort(args.deviceport, "device " + args.device) if args.deviceport else None
    return _validateDevice(Device(name=args.device, address=args.address, user=user, password=password, port=port))


def featuresFromFile(config):
    enabled = set()
    if config.has_section(FEATURES_SECTION):
        section = config[FEATURES_SECTION]
        for key in section:
            if key not in FEATURES:
                raise ConfigError(f"[{FEATURES_SECTION}]: unknown feature {key}")
            if _getBoolean(section, key, FEATURES_SECTION):
                enabled.add(key)
    return enabled


def featuresFromArgs(args):
    return {feature for feature in FEATURES if getattr(args, f"with_{feature}", False)}


def buildConfig(args, fileConfig=None):
    """Merge command-line options and the optional runtime file into an ExporterConfig.

    A feature is enabled when either the CLI flag or the file toggle enables it.
    Global options given on the command line take precedence over the file.
    """
    if fileConfig is None:
        fileConfig = configparser.ConfigParser(interpolation=None)

    section = fileConfig[GLOBAL_SECTION] if fileConfig.has_section(GLOBAL_SECTION) else {}

    def option(name, fallback):
        value = getattr(args, name, None)
        if value is not None:
            return value
        return section.get(name, fallback)

    if fileConfig.has_section(GLOBAL_SECTION) or any(s.startswith(DEVICE_SECTION_PREFIX) for s in fileConfig.sections()):
        devices = devicesFromFile(fileConfig)
    else:
        devices = [deviceFromArgs(args)]

    if not devices:
        raise ConfigError("no devices configured")
    names = [device.name for device in devices]
    if len(set(names)) != len(names):
        raise ConfigError("device names must be unique")

    try:
        tls = utils.parseBool(option("tls", False))
        insecure = utils.parseBool(option("insecure", False))
        reuse = utils.parseBool(option("reuse_connections", False))
    except ParseError as e:
        raise ConfigError(str(e))

    max_workers = option("max_workers", None)
    if max_workers is not None:
        try:
            max_workers = int(max_workers)
        except ValueError:
            raise ConfigError(f"invalid max_workers {max_workers!r}")
        if max_workers < 1:
            raise ConfigError("max_workers must be at least 1")

    options = Options(
        timeout=parseTimeout(option("timeout", DEFAULT_TIMEOUT)),
        tls=tls,
        insecure=insecure,
        reuse_connections=reuse,
        max_workers=max_workers,
    )
    log_format = str(option("log_format", "json")).lower()
    if log_format not in ("json", "text"):
        raise ConfigError(f"invalid log format {log_format!r}")

    return ExporterConfig(
        devices=tuple(devices),
        features=frozenset(featuresFromArgs(args) | featuresFromFile(fileConfig)),
        options=options,
        log_level=str(option("log_level", "info")),
        log_format=log_format,
        listen=str(option("port", DEFAULT_LISTEN)),
        metrics_path=str(option("path", DEFAULT_METRICS_PATH)),
    )
