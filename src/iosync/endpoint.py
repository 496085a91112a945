#!/usr/bin/env python3
"""Lifecycle of the GET/SET socket path.

Before binding, whatever sits at the path is inspected. Nothing there is
fine. A socket that refuses connections belongs to a server that died
without cleaning up and is unlinked. A socket that accepts a connection
belongs to a running server, and a file of any other kind is not ours to
delete; both stop startup with exit status 1.
"""

from __future__ import annotations

import contextlib
import os
import socket
import stat
import sys
from typing import NoReturn


def _fail(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _endpoint_is_live(socket_path: str) -> bool:
    """Return True if a server currently accepts connections at socket_path."""
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as conn:
        try:
            conn.connect(socket_path)
        except ConnectionRefusedError:
            return False
    return True


def claim_endpoint(socket_path: str) -> None:
    """Make socket_path free for binding.

    Args:
        socket_path: Where the server is about to listen.

    Raises:
        SystemExit: The path holds a live server's socket, a non-socket
            file, or cannot be inspected.
    """
    try:
        mode = os.stat(socket_path).st_mode
    except FileNotFoundError:
        return
    except OSError as e:
        _fail(f"cannot inspect {socket_path}: {e}")
    if not stat.S_ISSOCK(mode):
        _fail(f"{socket_path} exists and is not a socket")

    try:
        live = _endpoint_is_live(socket_path)
    except OSError as e:
        _fail(f"cannot reach socket {socket_path}: {e}")
    if live:
        _fail(f"socket {socket_path} is held by a running server")
    os.unlink(socket_path)


def announce_endpoint(socket_path: str) -> None:
    """Tell the operator where requests are accepted and how to send one."""
    print(f"Listening on {socket_path}", file=sys.stderr)
    print(
        f"Try: echo hello | IOSYNC_SOCKET={socket_path} iosync-xclip",
        file=sys.stderr,
    )


def release_endpoint(socket_path: str) -> None:
    """Unlink socket_path at shutdown; a missing file is not an error."""
    with contextlib.suppress(FileNotFoundError):
        os.unlink(socket_path)
