"""
MetricsSampler, gauges and reporters.
"""

from __future__ import annotations

import socket

import pytest

from tnt.metrics.gauge import CallableGauge, ConstantGauge, Gauge, is_gauge
from tnt.metrics.reporter import ConsoleReporter, JsonlReporter, format_samples
from tnt.metrics.sampler import MetricsSampler, Sample
from tnt.metrics.sampling import SamplingMetricSource
from tnt.shared import protocol as P
from tnt.shared.jsonl import recv_lines


class ListReporter:
    def __init__(self):
        self.passes = []

    def __call__(self, samples):
        self.passes.append(list(samples))


def _fixed_clock():
    return 100.0


def test_callable_gauge_reads_as_float():
    g = CallableGauge("pad.left_y", lambda: 1)
    assert g.name() == "pad.left_y"
    assert g.read() == 1.0
    assert isinstance(g.read(), float)


def test_gauges_satisfy_protocol():
    assert isinstance(ConstantGauge("a", 1), Gauge)
    assert is_gauge(SamplingMetricSource(ConstantGauge("a", 1), 2))
    assert not is_gauge("a")


@pytest.mark.parametrize("bad", ["", "   ", None])
def test_gauge_name_required(bad):
    with pytest.raises(ValueError):
        ConstantGauge(bad, 1.0)


def test_callable_gauge_requires_callable():
    with pytest.raises(TypeError):
        CallableGauge("x", 3.0)


def test_do_samples_reads_in_registration_order():
    sampler = MetricsSampler(clock=_fixed_clock)
    sampler.add_source(ConstantGauge("b", 2.0))
    sampler.add_source(ConstantGauge("a", 1.0))

    samples = sampler.do_samples()

    assert samples == [Sample("b", 2.0, 100.0), Sample("a", 1.0, 100.0)]
    assert sampler.source_names() == ["b", "a"]


def test_skipped_ticks_are_dropped():
    rep = ListReporter()
    sampler = MetricsSampler(clock=_fixed_clock)
    sampler.add_gauge("slow", lambda: 5.0, sample_frequency=3)
    sampler.add_gauge("fast", lambda: 7.0)
    sampler.add_reporter(rep)

    names = [[s.name for s in sampler.do_samples()] for _ in range(4)]

    assert names == [["slow", "fast"], ["fast"], ["slow", "fast"], ["fast"]]
    assert len(rep.passes) == 4
    assert sampler.passes == 4


def test_reporters_not_called_on_empty_pass():
    rep = ListReporter()
    sampler = MetricsSampler()
    sampler.add_gauge("slow", lambda: 5.0, sample_frequency=2)
    sampler.add_reporter(rep)

    sampler.do_samples()   # tick 1 reports
    sampler.do_samples()   # tick 2 reports
    sampler.do_samples()   # tick 3 skipped

    assert len(rep.passes) == 2
    assert sampler.passes == 3


def test_duplicate_name_rejected():
    sampler = MetricsSampler()
    sampler.add_source(ConstantGauge("x", 1.0))
    with pytest.raises(ValueError, match="Duplicate"):
        sampler.add_source(SamplingMetricSource(ConstantGauge("x", 2.0), 2))


def test_add_source_rejects_non_gauge():
    with pytest.raises(TypeError):
        MetricsSampler().add_source(42)


def test_add_reporter_rejects_non_callable():
    with pytest.raises(TypeError):
        MetricsSampler().add_reporter("console")


def test_gauge_error_propagates_from_pass():
    def boom():
        raise IOError("i2c timeout")

    sampler = MetricsSampler()
    sampler.add_gauge("imu.heading", boom)
    with pytest.raises(IOError, match="i2c"):
        sampler.do_samples()


def test_console_reporter_line(capsys):
    ConsoleReporter()([Sample("a", 1.0, 0.0), Sample("b", 2.25, 0.0)])
    assert capsys.readouterr().out.strip() == "[Metrics] a=1.000 b=2.250"


def test_format_samples_precision():
    assert format_samples([Sample("a", 1.23456, 0.0)], precision=1) == "a=1.2"


def test_jsonl_reporter_sends_metrics_frame_and_stop():
    robot, dash = socket.socketpair()
    try:
        rep = JsonlReporter(robot)
        rep([Sample("loop.frame_ms", 12.5, 42.0)])
        rep.close()

        msgs, buf = [], b""
        while True:
            got, buf, closed = recv_lines(dash, buf)
            msgs.extend(got)
            if closed:
                break
    finally:
        dash.close()

    assert rep.sent == 1
    assert msgs[0] == {
        "type": P.TYPE_METRICS,
        "t": 42.0,
        "samples": [{"name": "loop.frame_ms", "value": 12.5, "t": 42.0}],
    }
    assert msgs[1] == {"type": P.TYPE_STOP}


def test_dashboard_link_loss_keeps_sampling(capsys):
    robot, dash = socket.socketpair()
    dash.close()
    rep = JsonlReporter(robot)
    sampler = MetricsSampler(clock=_fixed_clock)
    sampler.add_gauge("loop.frames", lambda: 3.0)
    sampler.add_reporter(rep)

    assert sampler.do_samples() == [Sample("loop.frames", 3.0, 100.0)]
    assert rep.closed
    assert rep.sent == 0
    assert "[Metrics] Dashboard link lost" in capsys.readouterr().out

    # later passes skip the dead link quietly
    assert len(sampler.do_samples()) == 1
    assert capsys.readouterr().out == ""
    rep.close()


def test_gauge_error_still_propagates_with_jsonl_reporter():
    robot, dash = socket.socketpair()
    try:
        sampler = MetricsSampler()
        sampler.add_gauge("imu.heading", lambda: 1.0 / 0.0)
        sampler.add_reporter(JsonlReporter(robot))
        with pytest.raises(ZeroDivisionError):
            sampler.do_samples()
    finally:
        robot.close()
        dash.close()
