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

"""Exporter error taxonomy

Startup errors (ConfigError) are fatal. Device-level errors (ConnectError and
its children) mark a device as down for one scrape. Feature-level errors
(QueryError, ParseError) only drop the metrics of one collector.
"""


class ExporterError(Exception):
    """Base class for all exporter errors."""


class ConfigError(ExporterError):
    """Malformed or incomplete runtime configuration."""


class ConnectError(ExporterError):
    """A session to a device could not be established."""

    def __init__(self, device, message):
        self.device = device
        super().__init__(f"{device}: {message}")


class AuthError(ConnectError):
    """The device rejected the configured credentials."""


class DeviceTimeoutError(ConnectError, TimeoutError):
    """Connect, login or query exceeded the configured timeout."""


class NetworkError(ConnectError):
    """Endpoint unresolvable, unreachable, or the connection was reset."""


class DeviceBusyError(ConnectError):
    """A previous scrape still holds the session for this device."""


class QueryError(ExporterError):
    """A RouterOS API command failed."""

    def __init__(self, path, message):
        self.path = path
        super().__init__(f"{path}: {message}")


class ParseError(ExporterError):
    """A value returned by the device could not be interpreted."""
