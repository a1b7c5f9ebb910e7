# tnt/shared/jsonl.py
# -----------------------------------------------------------------------------
# Newline-delimited JSON (JSONL) framing for the robot -> dashboard link.
#
# TCP has no message boundaries, so every message is one JSON object followed
# by '\n'. The robot's JsonlReporter writes frames with send_json(); the
# dashboard server reads them back with recv_lines(), keeping a persistent
# byte buffer between calls so frames split across reads are reassembled.
#
# Malformed lines are dropped instead of raising: a garbled metrics frame
# should never take the dashboard down.
# -----------------------------------------------------------------------------

from __future__ import annotations

import json
from typing import List, Tuple

RECV_CHUNK = 4096


def encode_line(obj: dict) -> bytes:
    """Serialize one message to a single JSONL frame (UTF-8, trailing newline)."""
    return (json.dumps(obj, separators=(",", ":")) + "\n").encode("utf-8")


def send_json(sock, obj: dict) -> None:
    """Send one JSON message over a connected socket. Raises if the send fails."""
    sock.sendall(encode_line(obj))


def split_lines(buf: bytes) -> Tuple[List[dict], bytes]:
    """
    Split every complete line out of `buf`.

    Returns (messages, remainder) where remainder holds the trailing partial
    frame, if any. Blank and malformed lines are skipped.
    """
    msgs: List[dict] = []
    while b"\n" in buf:
        line, buf = buf.split(b"\n", 1)
        if not line.strip():
            continue
        try:
            decoded = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            continue
        if isinstance(decoded, dict):
            msgs.append(decoded)
    return msgs, buf


def recv_lines(sock, buf: bytes) -> Tuple[List[dict], bytes, bool]:
    """
    Read what is available on `sock` and return complete messages.

    Args:
      sock: connected socket (blocking or non-blocking).
      buf:  the remainder returned by the previous call (b"" initially).

    Returns:
      (messages, remainder_buffer, closed) where closed is True once the
      peer has shut the connection (recv returned b"").
    """
    try:
        data = sock.recv(RECV_CHUNK)
    except BlockingIOError:
        return [], buf, False

    if not data:
        return [], buf, True

    msgs, rest = split_lines(buf + data)
    return msgs, rest, False
