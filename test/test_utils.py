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

import json
import logging

import pytest

from mikrotik_exporter import utils
from mikrotik_exporter.exceptions import ParseError


class TestParsing:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("3w2d10h5m1s", 3 * 604800 + 2 * 86400 + 10 * 3600 + 5 * 60 + 1),
            ("1d00:10:02", 86400 + 602),
            ("00:00:30", 30),
            ("150ms", 0.15),
            ("45s", 45),
            ("1h", 3600),
        ],
    )
    def test_duration(self, value, expected):
        assert utils.parseDuration(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", ["", None, "abc", "5x", "1d 2h", "1:2:3"])
    def test_invalid_duration(self, value):
        with pytest.raises(ParseError):
            utils.parseDuration(value)

    @pytest.mark.parametrize(
        "value, expected", [("1Gbps", 1e9), ("100Mbps", 1e8), ("10kbps", 1e4), ("2.5G", 2.5e9), ("64", 64)]
    )
    def test_rate(self, value, expected):
        assert utils.parseRate(value) == pytest.approx(expected)

    def test_invalid_rate(self):
        with pytest.raises(ParseError):
            utils.parseRate("unknown")

    @pytest.mark.parametrize(
        "value, expected", [("-64@HT20", -64.0), ("45.5", 45.5), (12, 12.0), (True, 1.0), ("3,4", 3.0), ("42C", 42.0)]
    )
    def test_float(self, value, expected):
        assert utils.parseFloat(value) == expected

    @pytest.mark.parametrize("value", [None, "n/a", "--"])
    def test_invalid_float(self, value):
        with pytest.raises(ParseError):
            utils.parseFloat(value)

    def test_bool(self):
        assert utils.parseBool("yes") is True
        assert utils.parseBool("true") is True
        assert utils.parseBool(False) is False
        assert utils.parseBool("no") is False
        with pytest.raises(ParseError):
            utils.parseBool("maybe")

    def test_split_pair(self):
        assert utils.splitPair("1024,2048") == (1024.0, 2048.0)
        with pytest.raises(ParseError):
            utils.splitPair("1024")


class TestHelpers:
    def test_remove_quotes(self):
        assert utils.removeQuotes('"secret"') == "secret"
        assert utils.removeQuotes("'secret'") == "secret"
        assert utils.removeQuotes("plain") == "plain"
        assert utils.removeQuotes(None) is None

    def test_json_formatter(self):
        record = logging.LogRecord("root", logging.WARNING, __file__, 1, "router %s down", ("core",), None)
        record.device = "core"
        entry = json.loads(utils.JSONFormatter().format(record))
        assert entry["level"] == "warning"
        assert entry["msg"] == "router core down"
        assert entry["device"] == "core"
        assert entry["time"].endswith("Z")

    def test_prefix_filter(self):
        record = logging.LogRecord("root", logging.INFO, __file__, 1, "registered", None, None)
        assert utils.PrefixFilter("   ").filter(record) is True
        assert record.msg == "   registered"
