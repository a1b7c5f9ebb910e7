# tnt/dashboard/server.py
# -----------------------------------------------------------------------------
# Single-client JSONL TCP server for the driver-station dashboard.
# - Accepts one robot connection at a time
# - Folds metrics passes into a MetricsBoard and prints it
# - Goes back to accept() when the robot disconnects or sends STOP
# -----------------------------------------------------------------------------

from __future__ import annotations

import socket
from typing import Optional

from ..shared import config as C
from ..shared.jsonl import recv_lines
from .dispatch import MetricsBoard, format_board, process_messages


def _make_server_socket(host: str, port: int) -> socket.socket:
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    s.bind((host, int(port)))
    s.listen(1)
    print(f"[Dashboard] Listening on {host}:{port}")
    return s


def handle_client(conn: socket.socket, board: MetricsBoard, debug: bool = False) -> bool:
    """
    Read messages from one connected robot until it disconnects.
    Returns True if the robot sent STOP, False if the connection just closed.
    """
    buf = b""
    while True:
        try:
            msgs, buf, closed = recv_lines(conn, buf)
        except ConnectionResetError:
            print("[Dashboard] Connection reset by peer.")
            return False

        if msgs:
            passes_before = board.passes
            stop = process_messages(board, msgs, debug=debug)
            if board.passes != passes_before:
                print(f"[Dashboard] {format_board(board)}")
            if stop:
                return True

        if closed:
            print("[Dashboard] Robot disconnected.")
            return False


def serve_forever(
    host: str = C.LISTEN_HOST,
    port: int = C.LISTEN_PORT,
    debug: bool = False,
    max_sessions: Optional[int] = None,
) -> MetricsBoard:
    """Accept robot sessions until interrupted (or `max_sessions` have ended)."""
    board = MetricsBoard()
    server_sock = _make_server_socket(host, port)
    sessions = 0

    try:
        while max_sessions is None or sessions < max_sessions:
            print("[Dashboard] Waiting for robot...")
            conn, addr = server_sock.accept()
            print(f"[Dashboard] Robot connected from {addr[0]}:{addr[1]}")
            try:
                handle_client(conn, board, debug=debug)
            except OSError as e:
                print(f"[Dashboard] Error in client loop: {e}")
            finally:
                conn.close()
            sessions += 1
    finally:
        server_sock.close()
        print("[Dashboard] Server shut down.")

    return board
