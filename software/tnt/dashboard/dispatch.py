# tnt/dashboard/dispatch.py
# -----------------------------------------------------------------------------
# Dashboard message dispatcher.
# Folds TYPE_METRICS passes from the robot into a MetricsBoard that keeps the
# latest value of every metric; TYPE_STOP ends the session.
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable

from ..shared import protocol as P


@dataclass
class MetricsBoard:
    latest: Dict[str, float] = field(default_factory=dict)
    updated_at: Dict[str, float] = field(default_factory=dict)
    updates: Dict[str, int] = field(default_factory=dict)
    passes: int = 0

    def apply(self, msg: dict) -> int:
        """Apply one TYPE_METRICS message. Returns the number of samples taken."""
        samples = msg.get("samples")
        if not isinstance(samples, list):
            return 0

        try:
            default_t = float(msg.get("t", 0.0))
        except (TypeError, ValueError):
            default_t = 0.0

        taken = 0
        for sample in samples:
            try:
                name = str(sample["name"])
                value = float(sample["value"])
                t = float(sample.get("t", default_t))
            except (AttributeError, KeyError, TypeError, ValueError):
                continue
            self.latest[name] = value
            self.updated_at[name] = t
            self.updates[name] = self.updates.get(name, 0) + 1
            taken += 1
        self.passes += 1
        return taken

    def snapshot(self) -> dict:
        return {
            "passes": self.passes,
            "latest": dict(self.latest),
            "updates": dict(self.updates),
        }


def format_board(board: MetricsBoard) -> str:
    return " ".join(f"{name}={board.latest[name]:.3f}" for name in sorted(board.latest))


def process_messages(board: MetricsBoard, messages: Iterable[dict], *, debug: bool = False) -> bool:
    """
    Dispatch a batch of messages from the robot.
    Returns:
        stop (bool): True if the robot ended the session.
    """
    stop = False

    for msg in messages:
        mtype = msg.get("type")

        if mtype == P.TYPE_METRICS:
            taken = board.apply(msg)
            if debug:
                print(f"[Dashboard] METRICS pass {board.passes}: {taken} sample(s)")
        elif mtype == P.TYPE_STOP:
            print("[Dashboard] STOP received")
            stop = True
        elif mtype:
            if debug:
                print(f"[Dashboard] Ignored message type: {mtype}")
        else:
            if debug:
                print(f"[Dashboard] Unknown message payload (no type): {msg}")

    return stop
