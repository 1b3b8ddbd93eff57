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

"""Firmware monitoring

Reports installed RouterOS packages and, on RouterBOARD hardware, the
current and available bootloader firmware:

mikrotik_system_package_enabled{name="core",address="192.0.2.1",package="routeros",version="7.15.2",build_time="2024-06-27 13:12:46"} 1.0
mikrotik_system_routerboard_upgrade_available{name="core",address="192.0.2.1",model="CCR2004-16G-2S+",current_firmware="7.14",upgrade_firmware="7.15.2"} 1.0
"""

import logging

from mikrotik_exporter import utils
from mikrotik_exporter.collector_base import Collector
from mikrotik_exporter.exceptions import QueryError


class FIRMWARE(Collector):
    domain = "firmware"

    def registerMetrics(self):
        """Register metrics of interest"""
        self._register("system_package_enabled", "Installed package is enabled (1) or disabled (0)", ["package", "version", "build_time"])
        self._register(
            "system_routerboard_upgrade_available",
            "A newer RouterBOARD firmware is available (1) or not (0)",
            ["model", "current_firmware", "upgrade_firmware"],
        )

    def collectMetrics(self, session):
        """Collect package and firmware versions"""
        observations = []
        for row in session.query("/system/package", proplist=["name", "version", "build-time", "disabled"]):
            enabled = 0 if utils.parseBool(row.get("disabled", False)) else 1
            observations.append(
                self._observe(
                    session,
                    "system_package_enabled",
                    enabled,
                    row.get("name", ""),
                    row.get("version", ""),
                    row.get("build-time", ""),
                )
            )

        # Virtual (CHR) and x86 installs have no routerboard menu.
        try:
            boards = session.query("/system/routerboard", proplist=["model", "current-firmware", "upgrade-firmware"])
        except QueryError as e:
            logging.debug(f"{session.device.name}: firmware: no routerboard information ({e})")
            boards = []
        for row in boards:
            current = str(row.get("current-firmware", ""))
            upgrade = str(row.get("upgrade-firmware", ""))
            available = 1 if upgrade and current != upgrade else 0
            observations.append(
                self._observe(session, "system_routerboard_upgrade_available", available, row.get("model", ""), current, upgrade)
            )
        return observations
