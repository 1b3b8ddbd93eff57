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

"""Collection engine

Runs one collection pass per scrape: a worker thread per device opens (or
reuses) a session and runs every collector enabled for that device in its own
thread. All workers share one deadline, the earlier of the scrape deadline
and now + timeout. A device that is not finished by the deadline, either
still connecting or with a collector still running, is reported down and its
partial observations are dropped.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Optional

from mikrotik_exporter.config import FEATURES
from mikrotik_exporter.exceptions import ConnectError, DeviceTimeoutError, ExporterError
from mikrotik_exporter.metrics import DEVICE_LABELS, GAUGE, PREFIX, MetricDesc, MetricSink

# Time granted to device workers to hand in their results after the deadline.
MAX_FINALIZE_GRACE = 0.1


@dataclass
class FeatureResult:
    domain: str
    success: bool
    duration: float
    observations: list = field(default_factory=list)
    error: Optional[Exception] = None


@dataclass
class DeviceResult:
    name: str
    address: str
    up: bool = False
    duration: float = 0.0
    error: Optional[Exception] = None
    features: list = field(default_factory=list)


class CollectionEngine:
    def __init__(self, config, collectors, pool):
        """Initialize the engine.

        Args:
            config (ExporterConfig): Immutable runtime configuration.
            collectors (list): Collector instances, metrics already registered.
            pool (SessionPool): Source of device sessions.
        """
        self.__config = config
        self.__collectors = list(collectors)
        self.__pool = pool
        self.__timeout = config.options.timeout

        # fmt: off
        self.__up = MetricDesc(PREFIX + "up", "Device reachable and authenticated (1) or not (0)", DEVICE_LABELS, GAUGE)
        self.__success = MetricDesc(PREFIX + "scrape_collector_success", "Device scrape succeeded (1) or not (0)", ["device"])
        self.__duration = MetricDesc(PREFIX + "scrape_collector_duration_seconds", "Time spent scraping the device", ["device"])
        self.__featureSuccess = MetricDesc(PREFIX + "scrape_feature_success", "Collector succeeded (1) or not (0)", ["device", "collector"])
        self.__featureDuration = MetricDesc(PREFIX + "scrape_feature_duration_seconds", "Time spent in a collector", ["device", "collector"])
        # fmt: on

    @property
    def collectors(self):
        return list(self.__collectors)

    def collectorsFor(self, device):
        """Collectors to run for a device: base collectors plus its enabled features."""
        enabled = device.enabledFeatures(self.__config.features)
        return [c for c in self.__collectors if c.domain not in FEATURES or c.domain in enabled]

    # --------------------------------------------------------------------------------------
    # Entry point

    def collectAll(self, deadline=None):
        """Scrape every configured device once and return the merged observations.

        Args:
            deadline (float): Optional time.monotonic() value by which the
                scrape must be complete.
        """
        start = time.monotonic()
        end = start + self.__timeout
        if deadline is not None:
            end = min(end, deadline)
        grace = min(MAX_FINALIZE_GRACE, 0.2 * self.__timeout)

        devices = self.__config.devices
        cancelled = threading.Event()
        workers = self.__config.options.max_workers or len(devices)
        executor = ThreadPoolExecutor(max_workers=max(1, workers), thread_name_prefix="mikrotik-device")
        try:
            futures = {executor.submit(self.__collectDevice, device, end, cancelled): device for device in devices}
            done, _ = wait(futures, timeout=max(0.0, end + grace - time.monotonic()))
        finally:
            # Abandon whatever is still running; workers drop their own output.
            cancelled.set()
            executor.shutdown(wait=False, cancel_futures=True)

        sink = MetricSink()
        for future, device in futures.items():
            if future in done:
                result = future.result()
            else:
                result = DeviceResult(device.name, self.__deviceAddress(device))
                result.error = DeviceTimeoutError(device.name, "scrape deadline exceeded")
                result.duration = time.monotonic() - start
                logging.warning(f"{device.name}: {result.error}", extra={"device": device.name})
            self.__record(sink, result)

        logging.debug(f"collection pass finished in {time.monotonic() - start:.3f}s ({len(sink)} observations)")
        return sink.observations()

    # --------------------------------------------------------------------------------------
    # Workers

    @staticmethod
    def __deviceAddress(device):
        return device.address if device.address else device.srv.record

    def __collectDevice(self, device, end, cancelled):
        start = time.monotonic()
        result = DeviceResult(device.name, self.__deviceAddress(device))
        try:
            session = self.__pool.acquire(device, end - start)
        except ConnectError as e:
            logging.warning(f"{device.name}: {e}", extra={"device": device.name, "error": type(e).__name__})
            result.error = e
            result.duration = time.monotonic() - start
            return result
        except Exception as e:
            logging.exception(f"{device.name}: unexpected error while connecting", extra={"device": device.name})
            result.error = e
            result.duration = time.monotonic() - start
            return result

        discard = False
        try:
            result.address = session.address
            result.up = True
            result.features, complete = self.__collectFeatures(session, end, cancelled)
            discard = not complete or cancelled.is_set()
        finally:
            self.__pool.release(session, discard=discard)

        if not complete:
            # A device that overran its budget is down, without partial observations.
            result.up = False
            result.error = DeviceTimeoutError(device.name, "timeout exceeded while collecting features")
            for feature in result.features:
                feature.observations = []

        result.duration = time.monotonic() - start
        return result

    def __collectFeatures(self, session, end, cancelled):
        """Run the device's collectors concurrently on one session.

        Returns the feature results and whether every collector finished.
        """
        collectors = self.collectorsFor(session.device)
        if not collectors:
            return [], True

        name = session.device.name
        start = time.monotonic()
        executor = ThreadPoolExecutor(max_workers=len(collectors), thread_name_prefix=f"mikrotik-{name}")
        try:
            futures = {executor.submit(self.__runCollector, collector, session): collector for collector in collectors}
            done, pending = wait(futures, timeout=max(0.0, end - time.monotonic()))
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        results = []
        for future, collector in futures.items():
            if future in done:
                results.append(future.result())
            else:
                error = DeviceTimeoutError(name, f"collector {collector.domain} did not finish in time")
                if not cancelled.is_set():
                    logging.warning(str(error), extra={"device": name, "collector": collector.domain})
                results.append(FeatureResult(collector.domain, False, time.monotonic() - start, error=error))
        return results, not pending

    @staticmethod
    def __runCollector(collector, session):
        start = time.monotonic()
        name = session.device.name
        try:
            observations = collector.collectMetrics(session)
        except ExporterError as e:
            logging.warning(
                f"{name}: collector {collector.domain} failed: {e}",
                extra={"device": name, "collector": collector.domain, "error": type(e).__name__},
            )
            return FeatureResult(collector.domain, False, time.monotonic() - start, error=e)
        except Exception as e:
            logging.exception(
                f"{name}: collector {collector.domain} failed unexpectedly", extra={"device": name, "collector": collector.domain}
            )
            return FeatureResult(collector.domain, False, time.monotonic() - start, error=e)
        return FeatureResult(collector.domain, True, time.monotonic() - start, observations)

    # --------------------------------------------------------------------------------------
    # Aggregation

    def __record(self, sink, result):
        success = 1 if result.up and all(f.success for f in result.features) else 0
        sink.add(self.__up.observe(1 if result.up else 0, result.name, result.address))
        sink.add(self.__success.observe(success, result.name))
        sink.add(self.__duration.observe(result.duration, result.name))
        for feature in result.features:
            sink.add(self.__featureSuccess.observe(1 if feature.success else 0, result.name, feature.domain))
            sink.add(self.__featureDuration.observe(feature.duration, result.name, feature.domain))
            sink.extend(feature.observations)
