#!/usr/bin/env python3
"""Composition of the long-lived duties for each endpoint kind.

A relay runs on a machine with a native clipboard: the clipboard watcher
and the stdin bridge run concurrently over one SyncState. A headless
endpoint runs the socket server in place of the watcher, with the stdin
bridge optionally attached so values from the peer become visible to GET.

Either composition stops when shutdown is requested. The relay also stops
when the inbound stream ends, since the peer is gone.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
from typing import TYPE_CHECKING, BinaryIO

from iosync.bridge import run_bridge
from iosync.constants import POLL_INTERVAL
from iosync.server import run_server
from iosync.watcher import run_watcher

if TYPE_CHECKING:
    from iosync.clipboard import ClipboardPort
    from iosync.frame_sink import FrameSink
    from iosync.sync_state import SyncState


async def run_relay(
    state: SyncState,
    clipboard: ClipboardPort,
    sink: FrameSink,
    reader: asyncio.StreamReader,
    output: BinaryIO,
    shutdown_requested: asyncio.Event,
    interval: float = POLL_INTERVAL,
) -> None:
    """Run the clipboard watcher and the stdin bridge together.

    Args:
        state: The shared synchronization state.
        clipboard: The native clipboard.
        sink: Outbound frame channel.
        reader: Inbound side of the duplex stream.
        output: Where pass-through lines are written.
        shutdown_requested: Event signaling graceful shutdown.
        interval: Clipboard poll interval in seconds.
    """
    watcher = asyncio.create_task(
        run_watcher(state, clipboard, sink, shutdown_requested, interval)
    )
    try:
        await run_bridge(state, clipboard, reader, output, shutdown_requested)
    finally:
        shutdown_requested.set()
        await watcher


async def run_headless(
    socket_path: str,
    state: SyncState,
    clipboard: ClipboardPort,
    sink: FrameSink,
    reader: asyncio.StreamReader | None,
    output: BinaryIO,
    shutdown_requested: asyncio.Event,
) -> None:
    """Run the socket server, with the stdin bridge if a reader is given.

    The server keeps running after the inbound stream ends; only
    shutdown_requested stops it.

    Args:
        socket_path: Path to the Unix domain socket to listen on.
        state: The shared synchronization state.
        clipboard: Clipboard port applied to by the bridge.
        sink: Outbound frame channel used by SET.
        reader: Inbound side of the duplex stream, or None for no bridge.
        output: Where pass-through lines are written.
        shutdown_requested: Event signaling graceful shutdown.
    """
    if reader is None:
        await run_server(socket_path, state, sink, shutdown_requested)
        return

    bridge = asyncio.create_task(
        run_bridge(state, clipboard, reader, output, shutdown_requested)
    )
    try:
        await run_server(socket_path, state, sink, shutdown_requested)
    finally:
        bridge.cancel()
        with suppress(asyncio.CancelledError):
            await bridge
