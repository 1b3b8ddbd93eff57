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

"""RouterOS API device client

Opens authenticated API sessions to RouterOS devices (plain on 8728 or TLS on
8729) using librouteros, resolving the device endpoint either from its static
address or from a DNS SRV record. A Session serializes access to its socket so
that several feature collectors can share it from different threads.
"""

import functools
import logging
import ssl
import threading
import time

import dns.exception
import dns.resolver
import librouteros
from librouteros.exceptions import FatalError, LibRouterosError, MultiTrapError, TrapError

from mikrotik_exporter.exceptions import AuthError, DeviceTimeoutError, NetworkError, QueryError


def _word(prefix, key, value):
    if isinstance(value, bool):
        value = "yes" if value else "no"
    elif value is None:
        value = ""
    return f"{prefix}{key}={value}"


def resolveAddress(device, tls, timeout):
    """Return the (host, port) endpoint to use for a device.

    SRV records must resolve to exactly one target, anything else is treated
    as a network error for this collection attempt.
    """
    if device.srv is None:
        return device.address, device.apiPort(tls)

    try:
        if device.srv.dns is not None:
            resolver = dns.resolver.Resolver(configure=False)
            resolver.nameservers = [device.srv.dns.address]
            resolver.port = device.srv.dns.port
        else:
            # raises NoResolverConfiguration without a usable resolv.conf
            resolver = dns.resolver.Resolver()
        answers = resolver.resolve(device.srv.record, "SRV", lifetime=timeout)
    except dns.exception.Timeout:
        raise DeviceTimeoutError(device.name, f"SRV lookup of {device.srv.record} timed out")
    except dns.exception.DNSException as e:
        raise NetworkError(device.name, f"SRV lookup of {device.srv.record} failed: {e}")

    records = list(answers)
    if len(records) != 1:
        raise NetworkError(device.name, f"SRV record {device.srv.record} resolved to {len(records)} targets, expected 1")
    target = str(records[0].target).rstrip(".")
    if not target:
        raise NetworkError(device.name, f"SRV record {device.srv.record} has an empty target")
    return target, int(records[0].port)


class Session:
    """A live, authenticated RouterOS API connection to one device."""

    def __init__(self, device, address, api):
        self.device = device
        self.address = address
        self.__api = api
        self.__lock = threading.Lock()
        self.__stateLock = threading.Lock()
        self.__closed = False
        self.__broken = False
        self.created = time.monotonic()

    @property
    def closed(self):
        return self.__closed

    @property
    def usable(self):
        """True while the session may be handed to another scrape."""
        return not self.__closed and not self.__broken

    def query(self, path, command="print", proplist=None, where=None, **arguments):
        """Run one API command and return the reply rows as a list of dicts.

        Args:
            path (str): menu path, e.g. "/ip/dhcp-server/lease".
            command (str): command to run in that menu.
            proplist (list): restrict the returned properties.
            where (dict): "?key=value" query words to filter rows.
            arguments: "=key=value" attribute words ("numbers", "once", ...).
        """
        cmd = path.rstrip("/") + "/" + command
        words = [_word("=", key.replace("_", "-"), value) for key, value in arguments.items()]
        if proplist:
            words.append(_word("=", ".proplist", ",".join(proplist)))
        for key, value in (where or {}).items():
            words.append(_word("?", key, value))

        with self.__lock:
            if self.__closed:
                raise QueryError(cmd, "session already closed")
            try:
                return list(self.__api.rawCmd(cmd, *words))
            except (TrapError, MultiTrapError) as e:
                raise QueryError(cmd, str(e))
            except TimeoutError:
                self.__broken = True
                raise QueryError(cmd, "timed out waiting for reply")
            except (LibRouterosError, OSError) as e:
                self.__broken = True
                raise QueryError(cmd, f"connection failed: {e}")

    def close(self):
        """Release the connection; safe to call repeatedly, never raises.

        Does not wait for a query in progress: closing the socket makes that
        query fail instead.
        """
        with self.__stateLock:
            if self.__closed:
                return
            self.__closed = True
        try:
            self.__api.close()
        except Exception as e:
            logging.debug(f"{self.device.name}: error while closing session: {e}")


class DeviceClient:
    """Factory for device sessions, configured from the global exporter options."""

    def __init__(self, options, connector=librouteros.connect):
        self.__options = options
        self.__connect = connector
        if options.insecure:
            logging.warning("TLS server certificate verification is disabled (insecure)")

    def __sslWrapper(self, host):
        context = ssl.create_default_context()
        if self.__options.insecure:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return functools.partial(context.wrap_socket, server_hostname=host)

    def connect(self, device, timeout):
        """Open and authenticate a session; raises a ConnectError subclass on failure."""
        start = time.monotonic()
        tls = device.useTLS(self.__options.tls)
        host, port = resolveAddress(device, tls, timeout)

        remaining = timeout - (time.monotonic() - start)
        if remaining <= 0:
            raise DeviceTimeoutError(device.name, "timeout elapsed during address resolution")

        arguments = {"port": port, "timeout": remaining}
        if tls:
            arguments["ssl_wrapper"] = self.__sslWrapper(host)

        logging.debug(f"{device.name}: connecting to {host}:{port} (tls={tls})")
        try:
            api = self.__connect(host=host, username=device.user, password=device.password, **arguments)
        except (TrapError, FatalError) as e:
            raise AuthError(device.name, f"login rejected: {e}")
        except TimeoutError:
            raise DeviceTimeoutError(device.name, f"connection to {host}:{port} timed out after {timeout:g}s")
        except (LibRouterosError, OSError) as e:
            raise NetworkError(device.name, f"unable to connect to {host}:{port}: {e}")

        return Session(device, host, api)
