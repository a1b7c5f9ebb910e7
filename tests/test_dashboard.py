"""
Dashboard dispatch and client handling.
"""

from __future__ import annotations

import socket

from tnt.dashboard.dispatch import MetricsBoard, format_board, process_messages
from tnt.dashboard.server import handle_client
from tnt.shared import protocol as P
from tnt.shared.jsonl import send_json


def _metrics(t, **values):
    return {
        "type": P.TYPE_METRICS,
        "t": t,
        "samples": [{"name": k, "value": v, "t": t} for k, v in values.items()],
    }


def test_board_keeps_latest_and_counts_updates():
    board = MetricsBoard()
    board.apply(_metrics(1.0, a=1.0, b=2.0))
    board.apply(_metrics(2.0, a=3.0))

    assert board.latest == {"a": 3.0, "b": 2.0}
    assert board.updates == {"a": 2, "b": 1}
    assert board.updated_at == {"a": 2.0, "b": 1.0}
    assert board.snapshot()["passes"] == 2


def test_board_skips_bad_samples():
    board = MetricsBoard()
    taken = board.apply({
        "type": P.TYPE_METRICS,
        "t": 5.0,
        "samples": [{"name": "ok", "value": "1.5"}, {"name": "x"}, {"value": 2}, {"name": "y", "value": "nan?"}],
    })
    assert taken == 1
    assert board.latest == {"ok": 1.5}
    assert board.updated_at == {"ok": 5.0}


def test_format_board_sorted():
    board = MetricsBoard()
    board.apply(_metrics(0.0, z=1.0, a=0.5))
    assert format_board(board) == "a=0.500 z=1.000"


def test_process_messages_stop_and_ignore(capsys):
    board = MetricsBoard()
    stop = process_messages(board, [_metrics(0.0, a=1.0), {"type": "TYPE_OTHER"}, {"foo": 1}], debug=True)
    assert not stop
    out = capsys.readouterr().out
    assert "Ignored message type: TYPE_OTHER" in out
    assert "no type" in out

    assert process_messages(board, [{"type": P.TYPE_STOP}])
    assert board.latest == {"a": 1.0}


def test_handle_client_until_stop():
    robot, dash = socket.socketpair()
    board = MetricsBoard()
    try:
        send_json(robot, _metrics(1.0, **{"loop.frames": 1.0}))
        send_json(robot, _metrics(2.0, **{"loop.frames": 10.0}))
        send_json(robot, {"type": P.TYPE_STOP})
        assert handle_client(dash, board) is True
    finally:
        robot.close()
        dash.close()

    assert board.latest == {"loop.frames": 10.0}
    assert board.passes == 2


def test_handle_client_until_disconnect():
    robot, dash = socket.socketpair()
    board = MetricsBoard()
    try:
        send_json(robot, _metrics(1.0, a=4.0))
        robot.close()
        assert handle_client(dash, board) is False
    finally:
        dash.close()

    assert board.latest == {"a": 4.0}


def test_board_ignores_frame_without_sample_list():
    board = MetricsBoard()
    assert board.apply({"type": P.TYPE_METRICS, "samples": None}) == 0
    assert board.apply({"type": P.TYPE_METRICS, "samples": {"name": "a"}}) == 0
    assert board.apply({"type": P.TYPE_METRICS}) == 0
    assert board.passes == 0
    assert board.latest == {}


def test_board_tolerates_bad_timestamps():
    board = MetricsBoard()
    taken = board.apply({
        "type": P.TYPE_METRICS,
        "t": None,
        "samples": [
            {"name": "a", "value": 1.0, "t": None},
            {"name": "b", "value": 2.0},
            "not a sample",
        ],
    })
    assert taken == 1
    assert board.latest == {"b": 2.0}
    assert board.updated_at == {"b": 0.0}


def test_handle_client_survives_garbled_frames():
    robot, dash = socket.socketpair()
    board = MetricsBoard()
    try:
        send_json(robot, {"type": P.TYPE_METRICS, "samples": [{"name": "a", "value": 1.0, "t": None}]})
        send_json(robot, {"type": P.TYPE_METRICS, "samples": None})
        send_json(robot, _metrics(3.0, a=5.0))
        send_json(robot, {"type": P.TYPE_STOP})
        assert handle_client(dash, board) is True
    finally:
        robot.close()
        dash.close()

    assert board.latest == {"a": 5.0}
    assert board.updated_at == {"a": 3.0}
