# tnt/metrics/reporter.py
# -----------------------------------------------------------------------------
# Reporters receive the samples of one MetricsSampler pass.
#   - ConsoleReporter: tagged console line per pass
#   - JsonlReporter:   one TYPE_METRICS frame per pass to the dashboard
# -----------------------------------------------------------------------------

from __future__ import annotations

import socket
import time
from typing import List

from ..shared import protocol as P
from ..shared.jsonl import send_json
from .sampler import Sample


def format_samples(samples: List[Sample], precision: int = 3) -> str:
    return " ".join(f"{s.name}={s.value:.{precision}f}" for s in samples)


class ConsoleReporter:
    def __init__(self, tag: str = "Metrics", precision: int = 3):
        self.tag = tag
        self.precision = precision

    def __call__(self, samples: List[Sample]) -> None:
        print(f"[{self.tag}] {format_samples(samples, self.precision)}")


class JsonlReporter:
    """Send each pass to the dashboard as a TYPE_METRICS JSONL frame."""

    def __init__(self, sock: socket.socket):
        self._sock = sock
        self.sent = 0
        self.closed = False

    def __call__(self, samples: List[Sample]) -> None:
        # Stays disabled once the link has dropped
        if self.closed:
            return
        payload = {
            "type": P.TYPE_METRICS,
            "t": samples[0].timestamp if samples else time.time(),
            "samples": [s.to_dict() for s in samples],
        }
        try:
            send_json(self._sock, payload)
        except (BrokenPipeError, ConnectionResetError, OSError) as exc:
            print(f"[Metrics] Dashboard link lost: {exc}")
            self.closed = True
            self._sock.close()
            return
        self.sent += 1

    def close(self) -> None:
        """Tell the dashboard the session is over, then close the socket."""
        if self.closed:
            return
        self.closed = True
        try:
            send_json(self._sock, {"type": P.TYPE_STOP})
        except OSError as exc:
            print(f"[Metrics] Could not send STOP to dashboard: {exc}")
        finally:
            self._sock.close()


def connect_reporter(host: str, port: int, timeout: float = 3.0) -> JsonlReporter:
    """Connect to the dashboard and return a reporter bound to that socket."""
    s = socket.create_connection((host, int(port)), timeout=timeout)
    s.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    s.settimeout(None)
    print(f"[Metrics] Connected to dashboard at {host}:{port}")
    return JsonlReporter(s)
