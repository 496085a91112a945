#!/usr/bin/env python3
"""Clipboard watcher.

Polls the native clipboard on a fixed interval and turns genuine external
changes into outbound sync frames. Values that SyncState already knows
about (including ones the stdin bridge just applied from the peer) are
rejected by the dedup gate, which is what keeps applied remote updates
from being echoed back.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import TYPE_CHECKING

from iosync.constants import POLL_INTERVAL
from iosync.frame_sink import propagate

if TYPE_CHECKING:
    from iosync.clipboard import ClipboardPort
    from iosync.frame_sink import FrameSink
    from iosync.sync_state import SyncState

logger = logging.getLogger(__name__)


async def poll_once(
    state: SyncState,
    clipboard: ClipboardPort,
    sink: FrameSink,
) -> bool:
    """Run one watcher tick.

    Reads the clipboard in a worker thread. A failed or empty read skips
    the tick.

    Args:
        state: The shared synchronization state.
        clipboard: The native clipboard.
        sink: Outbound frame channel.

    Returns:
        True if a frame was emitted on this tick.
    """
    try:
        content = await asyncio.to_thread(clipboard.read)
    except Exception as e:
        logger.warning("Clipboard read raised, skipping tick: %s", e)
        return False
    if content is None:
        return False
    return propagate(state, sink, content)


async def run_watcher(
    state: SyncState,
    clipboard: ClipboardPort,
    sink: FrameSink,
    shutdown_requested: asyncio.Event,
    interval: float = POLL_INTERVAL,
) -> None:
    """Poll the clipboard until shutdown is requested.

    The sleep between ticks is a wait on shutdown_requested, so shutdown
    interrupts it immediately.

    Args:
        state: The shared synchronization state.
        clipboard: The native clipboard.
        sink: Outbound frame channel.
        shutdown_requested: Event signaling graceful shutdown.
        interval: Seconds between ticks.
    """
    logger.debug("Clipboard watcher started, polling every %s seconds", interval)
    while not shutdown_requested.is_set():
        with suppress(asyncio.TimeoutError):
            await asyncio.wait_for(shutdown_requested.wait(), timeout=interval)
            break
        await poll_once(state, clipboard, sink)
    logger.debug("Clipboard watcher stopped")
