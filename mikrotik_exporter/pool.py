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

"""Session reuse across scrapes

Without reuse every scrape opens and closes its own sessions. With reuse
enabled, an idle session per device is kept between scrapes; a per-device
lock makes sure only one scrape at a time can hold (or close) it.
"""

import logging
import threading
import time

from mikrotik_exporter.exceptions import DeviceBusyError, DeviceTimeoutError


class SessionPool:
    def __init__(self, client, reuse=False, max_idle_seconds=300):
        self.__client = client
        self.__reuse = reuse
        self.__max_idle = max_idle_seconds
        self.__idle = {}  # device name -> (session, released_at)
        self.__locks = {}
        self.__guard = threading.Lock()

    @property
    def reuse(self):
        return self.__reuse

    def __deviceLock(self, name):
        with self.__guard:
            return self.__locks.setdefault(name, threading.Lock())

    def acquire(self, device, timeout):
        """Return a session for device, reusing an idle one when allowed.

        Must be paired with release(), whatever the outcome of the scrape.
        """
        start = time.monotonic()
        if timeout <= 0:
            raise DeviceTimeoutError(device.name, "timeout elapsed before a session was requested")
        if self.__reuse:
            if not self.__deviceLock(device.name).acquire(timeout=timeout):
                raise DeviceBusyError(device.name, "session still held by a previous scrape")

            with self.__guard:
                session, released = self.__idle.pop(device.name, (None, 0.0))
            if session is not None:
                if session.usable and time.monotonic() - released < self.__max_idle:
                    logging.debug(f"{device.name}: reusing session")
                    return session
                session.close()

        remaining = timeout - (time.monotonic() - start)
        try:
            if remaining <= 0:
                raise DeviceTimeoutError(device.name, "timeout elapsed waiting for session")
            return self.__client.connect(device, remaining)
        except Exception:
            if self.__reuse:
                self.__deviceLock(device.name).release()
            raise

    def release(self, session, discard=False):
        """Return a session after use; broken or discarded sessions are closed."""
        name = session.device.name
        try:
            if self.__reuse and not discard and session.usable:
                with self.__guard:
                    self.__idle[name] = (session, time.monotonic())
            else:
                session.close()
        finally:
            if self.__reuse:
                self.__deviceLock(name).release()

    def close(self):
        """Close all idle sessions."""
        with self.__guard:
            idle = list(self.__idle.values())
            self.__idle.clear()
        for session, _ in idle:
            session.close()
