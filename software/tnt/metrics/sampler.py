# tnt/metrics/sampler.py
# -----------------------------------------------------------------------------
# MetricsSampler: polls every registered gauge once per pass and hands the
# readings to the reporters.
#
# Call do_samples() once per robot loop. Gauges wrapped in a
# SamplingMetricSource answer None on skipped ticks; those are dropped from
# the pass, so reporters only ever see real readings.
# -----------------------------------------------------------------------------

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .gauge import CallableGauge, Gauge, is_gauge
from .sampling import NO_REPORT, SamplingMetricSource


@dataclass(frozen=True)
class Sample:
    name: str
    value: float
    timestamp: float

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value, "t": self.timestamp}


Reporter = Callable[[List[Sample]], None]


class MetricsSampler:
    def __init__(self, clock: Callable[[], float] = time.time, debug: bool = False):
        self._sources: Dict[str, Gauge] = {}
        self._reporters: List[Reporter] = []
        self._clock = clock
        self._debug = debug
        self.passes = 0

    def add_source(self, source: Gauge) -> Gauge:
        """Register a gauge. Names must be unique within one sampler."""
        if not is_gauge(source):
            raise TypeError(f"Not a gauge (needs name() and read()): {source!r}")
        name = source.name()
        if name in self._sources:
            raise ValueError(f"Duplicate metric source name: {name}")
        self._sources[name] = source
        if self._debug:
            print(f"[Metrics] Added source {source!r}")
        return source

    def add_gauge(
        self,
        name: str,
        fn: Callable[[], float],
        sample_frequency: Optional[int] = None,
    ) -> Gauge:
        """Register a callable as a gauge, decimated when sample_frequency is set."""
        source: Gauge = CallableGauge(name, fn)
        if sample_frequency is not None:
            source = SamplingMetricSource(source, sample_frequency)
        return self.add_source(source)

    def add_reporter(self, reporter: Reporter) -> None:
        if not callable(reporter):
            raise TypeError(f"Reporter must be callable: {reporter!r}")
        self._reporters.append(reporter)

    def source_names(self) -> List[str]:
        return list(self._sources)

    def do_samples(self) -> List[Sample]:
        """Read every source once and publish the reported values."""
        now = self._clock()
        samples: List[Sample] = []
        for name, source in self._sources.items():
            value = source.read()
            if value is NO_REPORT:
                continue
            samples.append(Sample(name, float(value), now))

        self.passes += 1
        if samples:
            for reporter in self._reporters:
                reporter(samples)
        return samples
