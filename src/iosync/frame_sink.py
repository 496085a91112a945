#!/usr/bin/env python3
"""Outbound sync frame channel.

Frames leave the process through a FrameSink, a write-only port kept
separate from logging. The clipboard watcher and the socket server's SET
handler both go through propagate(), so local changes and SET requests
share one emission path.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Protocol, TextIO

from iosync.protocol import SyncFrame, encode_frame, validate_content_size

if TYPE_CHECKING:
    from iosync.sync_state import SyncState

logger = logging.getLogger(__name__)


class FrameSink(Protocol):
    """Write-only port for outbound sync frames."""

    def emit(self, frame: SyncFrame) -> None:
        """Send one frame to the peer."""
        ...


class StreamFrameSink:
    """Write frames as lines to a text stream.

    Each frame is written and flushed as exactly one line under a lock, so
    concurrent emitters never interleave partial frames.

    Args:
        stream: The outbound side of the duplex stream (stderr by default).
    """

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self._lock = threading.Lock()

    def emit(self, frame: SyncFrame) -> None:
        line = encode_frame(frame) + "\n"
        with self._lock:
            self.stream.write(line)
            self.stream.flush()


def propagate(state: SyncState, sink: FrameSink, candidate: str) -> bool:
    """Offer a locally produced value and emit a frame if it is new.

    The frame is emitted after try_accept() returns, outside the state
    lock.

    Args:
        state: The shared synchronization state.
        sink: Where accepted values are sent.
        candidate: Clipboard text from the watcher or a socket SET.

    Returns:
        True if the value was accepted and a frame emitted, False if it was
        a duplicate, oversize, or the emit failed.
    """
    if not validate_content_size(candidate):
        logger.warning("Clipboard content exceeds 10 MB limit, skipping")
        return False

    accepted = state.try_accept(candidate)
    if accepted is None:
        logger.debug("Skipping duplicate or echo content")
        return False

    try:
        sink.emit(SyncFrame(content=accepted))
    except OSError as e:
        logger.error("Failed to emit sync frame: %s", e)
        return False
    logger.debug("Emitted sync frame with %d characters", len(accepted))
    return True
