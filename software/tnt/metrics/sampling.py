# tnt/metrics/sampling.py
# -----------------------------------------------------------------------------
# SamplingMetricSource: a gauge adapter that reads the real value only every
# Nth time it is polled.
#
# Noisy or expensive gauges get wrapped so the sampler can still poll every
# loop while only every Nth poll produces a report. The very first poll
# always reports so a baseline value is available immediately.
# Skipped polls return NO_REPORT (None), which can never collide with a real
# reading.
# -----------------------------------------------------------------------------

from __future__ import annotations

import threading
from typing import Optional

from .gauge import Gauge, is_gauge

# Result of read() on a tick that is not reported
NO_REPORT = None


class SamplingMetricSource:
    def __init__(self, real_source: Gauge, sample_frequency: int):
        """
        Parameters
        ----------
        real_source : Gauge
            The wrapped gauge. Only read on reporting ticks.
        sample_frequency : int
            Report on the first read and on every read whose 1-based index
            is a multiple of this value. Must be >= 1.
        """
        if not is_gauge(real_source):
            raise TypeError(f"real_source must provide name() and read(), got {type(real_source).__name__}")
        if isinstance(sample_frequency, bool) or not isinstance(sample_frequency, int):
            raise ValueError(f"sample_frequency must be an int, got {sample_frequency!r}")
        if sample_frequency <= 0:
            raise ValueError(f"sample_frequency must be positive, got {sample_frequency}")

        self._real_source = real_source
        self._sample_frequency = sample_frequency
        self._sample_count = 0
        self._lock = threading.Lock()

    @property
    def sample_frequency(self) -> int:
        return self._sample_frequency

    @property
    def sample_count(self) -> int:
        with self._lock:
            return self._sample_count

    def name(self) -> str:
        return self._real_source.name()

    def _tick(self) -> bool:
        """Count one read; True if this read should report."""
        with self._lock:
            self._sample_count += 1
            count = self._sample_count
        return count == 1 or count % self._sample_frequency == 0

    def read(self) -> Optional[float]:
        if self._tick():
            return float(self._real_source.read())
        return NO_REPORT

    def __repr__(self) -> str:
        return f"SamplingMetricSource({self._real_source!r}, every={self._sample_frequency})"
