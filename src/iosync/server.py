#!/usr/bin/env python3
"""Socket server mode for iosync.

The server binds a Unix domain socket and answers GET/SET requests from
local tools (the iosync client or the iosync-xclip front end) on behalf of
an endpoint with no native clipboard. A SET that changes the value emits
a sync frame to the peer, exactly as the clipboard watcher does on a
machine with a native clipboard.

On startup a stale socket left by a crashed server is unlinked; a socket
held by a running server is a fatal error. The socket is removed on
shutdown.

Usage:
    iosync --server [--socket PATH]
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from iosync.server_handler import handle_connection
from iosync.endpoint import announce_endpoint, claim_endpoint, release_endpoint

if TYPE_CHECKING:
    from iosync.frame_sink import FrameSink
    from iosync.sync_state import SyncState

logger = logging.getLogger(__name__)


async def start_server(
    socket_path: str,
    state: SyncState,
    sink: FrameSink,
) -> asyncio.AbstractServer:
    """Prepare the endpoint and start accepting connections.

    Args:
        socket_path: Path to the Unix domain socket to listen on.
        state: The shared synchronization state.
        sink: Outbound frame channel used by SET.

    Returns:
        The listening asyncio server.
    """
    claim_endpoint(socket_path)
    server = await asyncio.start_unix_server(
        lambda r, w: handle_connection(state, sink, r, w),
        path=socket_path,
    )
    logger.debug("Listening on the Unix socket: %s", socket_path)
    return server


async def run_server(
    socket_path: str,
    state: SyncState,
    sink: FrameSink,
    shutdown_requested: asyncio.Event,
) -> None:
    """Serve requests until shutdown is requested.

    Args:
        socket_path: Path to the Unix domain socket to listen on.
        state: The shared synchronization state.
        sink: Outbound frame channel used by SET.
        shutdown_requested: Event signaling graceful shutdown.
    """
    server = await start_server(socket_path, state, sink)
    announce_endpoint(socket_path)
    try:
        async with server:
            await shutdown_requested.wait()
            server.close()
    finally:
        release_endpoint(socket_path)
    logger.debug("Socket server stopped")
