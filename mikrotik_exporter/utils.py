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

"""Assorted helpers shared by the exporter modules."""

import json
import logging
import re
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version

from mikrotik_exporter.exceptions import ParseError


def getVersion():
    """Return the installed package version (or "dev" when running from a checkout)."""
    try:
        return version("mikrotik-exporter")
    except PackageNotFoundError:
        return "dev"


def removeQuotes(value):
    """Strip one level of surrounding quotes from a config value."""
    if value is None:
        return value
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


class PrefixFilter(logging.Filter):
    """Prefix every log message, used to indent per-collector registration output."""

    def __init__(self, prefix):
        super().__init__()
        self.prefix = prefix

    def filter(self, record):
        record.msg = self.prefix + str(record.msg)
        return True


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def format(self, record):
        entry = {
            "time": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "msg": record.getMessage(),
        }
        for attr in ("device", "collector", "error"):
            if hasattr(record, attr):
                entry[attr] = getattr(record, attr)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


# --
# RouterOS value parsing
# --

# RouterOS durations look like "3w2d10h5m1s", "1d00:10:02" or "150ms".
_DURATION_RE = re.compile(r"(\d+(?:\.\d+)?)(w|d|h|ms|m|s|us)")
_DURATION_UNITS = {"w": 604800, "d": 86400, "h": 3600, "m": 60, "s": 1, "ms": 0.001, "us": 0.000001}

_RATE_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*([kMGT]?)(bps|b/s)?", re.IGNORECASE)
_RATE_UNITS = {"": 1, "k": 1e3, "m": 1e6, "g": 1e9, "t": 1e12}


def parseDuration(value):
    """Convert a RouterOS duration string into seconds."""
    if value is None or value == "":
        raise ParseError(f"invalid duration: {value!r}")
    value = str(value).strip()

    seconds = 0.0
    # Trailing hh:mm:ss clock part (older RouterOS releases)
    if ":" in value:
        match = re.match(r"^(.*?)(\d+):(\d{2}):(\d{2})$", value)
        if not match:
            raise ParseError(f"invalid duration: {value!r}")
        seconds += int(match.group(2)) * 3600 + int(match.group(3)) * 60 + int(match.group(4))
        value = match.group(1)

    consumed = 0
    for match in _DURATION_RE.finditer(value):
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        consumed += len(match.group(0))
    if consumed != len(value):
        raise ParseError(f"invalid duration: {value!r}")
    return seconds


def parseRate(value):
    """Convert a link or transfer rate such as "1Gbps" or "100M" into bits per second."""
    match = _RATE_RE.match(str(value).strip())
    if not match:
        raise ParseError(f"invalid rate: {value!r}")
    return float(match.group(1)) * _RATE_UNITS[match.group(2).lower()]


def parseFloat(value):
    """Parse numeric RouterOS values, tolerating suffixes like "-64@HT20" or "42C"."""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if value is None:
        raise ParseError("missing numeric value")
    text = str(value).strip().split("@", 1)[0].split(",", 1)[0]
    match = re.match(r"^[-+]?\d+(?:\.\d+)?", text)
    if not match:
        raise ParseError(f"invalid number: {value!r}")
    return float(match.group(0))


def parseBool(value):
    """Interpret RouterOS boolean values ("true", "yes", True, ...)."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "yes", "on", "1"):
        return True
    if text in ("false", "no", "off", "0", ""):
        return False
    raise ParseError(f"invalid boolean: {value!r}")


def splitPair(value):
    """Split RouterOS "a,b" counter pairs (e.g. "bytes" = "tx,rx") into two floats."""
    parts = str(value).split(",")
    if len(parts) != 2:
        raise ParseError(f"invalid counter pair: {value!r}")
    return parseFloat(parts[0]), parseFloat(parts[1])
