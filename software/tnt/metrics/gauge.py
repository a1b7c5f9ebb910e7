# tnt/metrics/gauge.py
# -----------------------------------------------------------------------------
# Gauge: a named source of a single numeric reading, polled on demand.
#
# Anything with `name()` and `read()` is a gauge; sensors, controller axes and
# computed loop metrics all plug into the sampler through this shape. The two
# concrete helpers below cover the common cases so callers rarely need to
# write a class of their own.
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class Gauge(Protocol):
    def name(self) -> str:
        ...

    def read(self) -> float:
        ...


def is_gauge(obj) -> bool:
    """True if `obj` exposes callable name() and read()."""
    return callable(getattr(obj, "name", None)) and callable(getattr(obj, "read", None))


def _check_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"Gauge name must be a non-empty string, got {name!r}")
    return name


class CallableGauge:
    """Gauge backed by a zero-argument callable, e.g. ``lambda: pad.left_stick_y``."""

    def __init__(self, name: str, fn: Callable[[], float]):
        if not callable(fn):
            raise TypeError(f"Gauge {name!r}: reader must be callable")
        self._name = _check_name(name)
        self._fn = fn

    def name(self) -> str:
        return self._name

    def read(self) -> float:
        return float(self._fn())

    def __repr__(self) -> str:
        return f"CallableGauge({self._name!r})"


class ConstantGauge:
    """Gauge that always reads the same value."""

    def __init__(self, name: str, value: float):
        self._name = _check_name(name)
        self._value = float(value)

    def name(self) -> str:
        return self._name

    def read(self) -> float:
        return self._value

    def __repr__(self) -> str:
        return f"ConstantGauge({self._name!r}, {self._value!r})"
