#!/usr/bin/env python3
"""Stdin bridge for the duplex stream.

Reads the inbound side of the duplex stream line by line. Lines carrying
the sync frame prefix are decoded and applied to the local clipboard
through the dedup gate. Every other line is forwarded to standard output
byte for byte, in arrival order.

Frames are never forwarded, so pass-through ordering is only preserved
relative to other pass-through lines.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import suppress
from typing import TYPE_CHECKING, BinaryIO

from iosync.clipboard import ClipboardError
from iosync.protocol import FRAME_PREFIX, MAX_LINE_SIZE, ProtocolError, decode_frame

if TYPE_CHECKING:
    from iosync.clipboard import ClipboardPort
    from iosync.sync_state import SyncState

logger = logging.getLogger(__name__)

_FRAME_PREFIX_BYTES = FRAME_PREFIX.encode("ascii")

# Chunk size for feeding stdin from a worker thread.
FEED_CHUNK_SIZE: int = 65536

# Feeder tasks are held here so they are not garbage collected mid-run.
_feeders: set[asyncio.Task] = set()


async def _feed_from_file(reader: asyncio.StreamReader, stream: BinaryIO) -> None:
    """Copy a blocking stream into reader from a worker thread."""
    while True:
        chunk = await asyncio.to_thread(stream.read, FEED_CHUNK_SIZE)
        if not chunk:
            reader.feed_eof()
            return
        reader.feed_data(chunk)


async def open_stdin_reader(
    limit: int = MAX_LINE_SIZE, stream: BinaryIO | None = None
) -> asyncio.StreamReader:
    """Wrap process stdin in an asyncio StreamReader.

    Pipes, sockets and terminals are read by the event loop directly. A
    regular file (stdin redirected from disk) cannot be, so it is read
    from a worker thread instead.

    Args:
        limit: Maximum line length the reader buffers.
        stream: Binary stream to read; defaults to sys.stdin.buffer.

    Returns:
        A StreamReader fed from the stream.
    """
    if stream is None:
        stream = sys.stdin.buffer
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader(limit=limit)
    protocol = asyncio.StreamReaderProtocol(reader)
    try:
        await loop.connect_read_pipe(lambda: protocol, stream)
    except ValueError:
        logger.debug("stdin is not a pipe, reading it from a worker thread")
        task = loop.create_task(_feed_from_file(reader, stream))
        _feeders.add(task)
        task.add_done_callback(_feeders.discard)
    return reader


async def read_line(reader: asyncio.StreamReader) -> bytes | None:
    """Read one newline-terminated line.

    A line longer than the reader's limit is dropped in full, through its
    terminating newline, even when it arrives in several pieces.

    Args:
        reader: Inbound side of the duplex stream.

    Returns:
        The line with its newline, the unterminated remainder at end of
        stream, b"" at end of stream, or None if an over-long line was
        dropped.
    """
    try:
        return await reader.readuntil(b"\n")
    except asyncio.IncompleteReadError as e:
        return e.partial
    except asyncio.LimitOverrunError as e:
        consumed = e.consumed
    while True:
        await reader.readexactly(consumed)
        try:
            await reader.readuntil(b"\n")
            return None
        except asyncio.IncompleteReadError:
            return None
        except asyncio.LimitOverrunError as e:
            consumed = e.consumed


async def apply_frame_line(
    state: SyncState, clipboard: ClipboardPort, line: bytes
) -> bool:
    """Decode a frame line and apply it to the clipboard if it is new.

    Undecodable frames are dropped. A value SyncState already holds is
    neither written nor re-emitted.

    Args:
        state: The shared synchronization state.
        clipboard: The local clipboard.
        line: Raw frame line, including its trailing newline if any.

    Returns:
        True if the clipboard was written.
    """
    try:
        frame = decode_frame(line.decode("utf-8"))
    except (UnicodeDecodeError, ProtocolError) as e:
        logger.debug("Dropping malformed sync frame: %s", e)
        return False

    accepted = state.try_accept(frame.content)
    if accepted is None:
        logger.debug("Received content already known, not applying")
        return False

    try:
        await asyncio.to_thread(clipboard.write, accepted)
    except ClipboardError as e:
        logger.error("%s", e)
        return False
    logger.debug("Received and set %d characters from remote", len(accepted))
    return True


async def handle_line(
    state: SyncState,
    clipboard: ClipboardPort,
    line: bytes,
    output: BinaryIO,
) -> None:
    """Classify one inbound line and act on it.

    Args:
        state: The shared synchronization state.
        clipboard: The local clipboard.
        line: Raw line as read, including its trailing newline if any.
        output: Where pass-through lines are written.
    """
    if line.startswith(_FRAME_PREFIX_BYTES):
        await apply_frame_line(state, clipboard, line)
        return
    output.write(line)
    output.flush()


async def run_bridge(
    state: SyncState,
    clipboard: ClipboardPort,
    reader: asyncio.StreamReader,
    output: BinaryIO,
    shutdown_requested: asyncio.Event,
) -> None:
    """Relay the inbound stream until end of stream or shutdown.

    Waits for either the next line or shutdown_requested, whichever comes
    first.

    Args:
        state: The shared synchronization state.
        clipboard: The local clipboard.
        reader: Inbound side of the duplex stream.
        output: Where pass-through lines are written.
        shutdown_requested: Event signaling graceful shutdown.
    """
    shutdown_task = asyncio.create_task(shutdown_requested.wait())
    read_task = asyncio.create_task(read_line(reader))
    try:
        while True:
            done, _ = await asyncio.wait(
                {read_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED
            )
            if read_task not in done:
                logger.debug("Shutdown requested, stopping stdin bridge")
                return

            line = read_task.result()
            if line is None:
                logger.warning("Dropping over-long inbound line")
                read_task = asyncio.create_task(read_line(reader))
                continue

            if not line:
                logger.debug("Inbound stream closed")
                return
            await handle_line(state, clipboard, line, output)
            read_task = asyncio.create_task(read_line(reader))
    finally:
        for task in (read_task, shutdown_task):
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
