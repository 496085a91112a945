#!/usr/bin/env python3
"""Run-mode selection and wiring.

The CLI resolves a Mode once at startup and hands a Settings value to
run_mode(), which builds the shared state, clipboard port and frame sink
and passes them explicitly to the workers for that mode.
"""

from __future__ import annotations

import asyncio
import signal
import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from iosync.constants import DEFAULT_SOCKET_PATH, POLL_INTERVAL


class Mode(Enum):
    """Endpoint role of this process."""

    RELAY = "relay"
    SERVER = "server"
    CLIENT = "client"


class FrameOutput(Enum):
    """Process stream carrying outbound sync frames."""

    STDERR = "stderr"
    STDOUT = "stdout"


@dataclass(frozen=True)
class Settings:
    """Startup configuration resolved by the CLI.

    Attributes:
        mode: Endpoint role.
        socket_path: Path of the local socket endpoint.
        interval: Clipboard poll interval in seconds (relay mode).
        frame_output: Stream carrying outbound sync frames.
        bridge: Whether server mode reads inbound frames from stdin.
        output: Client mode: True for GET, False for SET from stdin.
    """

    mode: Mode
    socket_path: str = DEFAULT_SOCKET_PATH
    interval: float = POLL_INTERVAL
    frame_output: FrameOutput = FrameOutput.STDERR
    bridge: bool = True
    output: bool = False


def install_signal_handlers(shutdown_requested: asyncio.Event) -> None:
    """Set shutdown_requested on SIGINT or SIGTERM."""
    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGINT, shutdown_requested.set)
    loop.add_signal_handler(signal.SIGTERM, shutdown_requested.set)


def _frame_stream(frame_output: FrameOutput) -> TextIO:
    """Return the process stream that outbound frames are written to."""
    if frame_output is FrameOutput.STDOUT:
        return sys.stdout
    return sys.stderr


async def _run_relay_mode(settings: Settings) -> None:
    from iosync.bridge import open_stdin_reader
    from iosync.clipboard import PyperclipClipboard
    from iosync.frame_sink import StreamFrameSink
    from iosync.relay import run_relay
    from iosync.sync_state import SyncState

    shutdown_requested = asyncio.Event()
    install_signal_handlers(shutdown_requested)
    reader = await open_stdin_reader()
    await run_relay(
        SyncState(),
        PyperclipClipboard(),
        StreamFrameSink(_frame_stream(settings.frame_output)),
        reader,
        sys.stdout.buffer,
        shutdown_requested,
        settings.interval,
    )


async def _run_server_mode(settings: Settings) -> None:
    from iosync.bridge import open_stdin_reader
    from iosync.clipboard import HeadlessClipboard
    from iosync.frame_sink import StreamFrameSink
    from iosync.relay import run_headless
    from iosync.sync_state import SyncState

    shutdown_requested = asyncio.Event()
    install_signal_handlers(shutdown_requested)
    reader = await open_stdin_reader() if settings.bridge else None
    await run_headless(
        settings.socket_path,
        SyncState(),
        HeadlessClipboard(),
        StreamFrameSink(_frame_stream(settings.frame_output)),
        reader,
        sys.stdout.buffer,
        shutdown_requested,
    )


def run_mode(settings: Settings) -> None:
    """Run the process in the configured mode until it finishes.

    Args:
        settings: Startup configuration.

    Raises:
        ConnectionError: Client mode, if the request cannot be completed.
    """
    from iosync.client import run_client

    if settings.mode is Mode.RELAY:
        asyncio.run(_run_relay_mode(settings))
    elif settings.mode is Mode.SERVER:
        asyncio.run(_run_server_mode(settings))
    else:
        asyncio.run(run_client(settings.socket_path, settings.output, sys.stdin, sys.stdout))
