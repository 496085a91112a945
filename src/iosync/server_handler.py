#!/usr/bin/env python3
"""Server connection handler.

Each accepted connection carries one request. The handler reads it under
a deadline, dispatches it against SyncState, writes the reply, and closes
the connection. Unreadable requests are logged and the connection is
closed without a reply.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import TYPE_CHECKING

from iosync.command import REPLY_OK, REPLY_UNKNOWN, Request, Verb, parse_request
from iosync.constants import REQUEST_TIMEOUT
from iosync.frame_sink import propagate
from iosync.protocol import MAX_CONTENT_SIZE, ProtocolError

if TYPE_CHECKING:
    from iosync.frame_sink import FrameSink
    from iosync.sync_state import SyncState

logger = logging.getLogger(__name__)

# Largest request accepted: verb, separator, content and a terminator.
MAX_REQUEST_SIZE: int = MAX_CONTENT_SIZE + 8

READ_CHUNK_SIZE: int = 65536


def _complete_get(data: bytes) -> bool:
    """Return True if data holds a newline-terminated GET line."""
    line, sep, _ = data.partition(b"\n")
    return bool(sep) and line.rstrip(b"\r") == b"GET"


async def read_request(reader: asyncio.StreamReader) -> bytes:
    """Read one request from a connection.

    A request ends at end of stream (client half-close). A GET line ends
    at its newline, for clients that keep their write side open while
    waiting for the reply.

    Args:
        reader: The connection's StreamReader.

    Returns:
        Raw request bytes.

    Raises:
        ProtocolError: If the request exceeds MAX_REQUEST_SIZE.
    """
    data = bytearray()
    while True:
        if _complete_get(data):
            return b"GET\n"
        chunk = await reader.read(READ_CHUNK_SIZE)
        if not chunk:
            return bytes(data)
        data += chunk
        if len(data) > MAX_REQUEST_SIZE:
            raise ProtocolError(f"Request exceeds {MAX_REQUEST_SIZE} bytes")


def dispatch(state: SyncState, sink: FrameSink, request: Request) -> bytes:
    """Execute a request and build its reply.

    Args:
        state: The shared synchronization state.
        sink: Outbound frame channel used by SET.
        request: The parsed request.

    Returns:
        Reply bytes.
    """
    if request.verb is Verb.GET:
        return state.snapshot().encode("utf-8")
    if request.verb is Verb.SET:
        propagate(state, sink, request.payload)
        return REPLY_OK
    return REPLY_UNKNOWN


async def handle_connection(
    state: SyncState,
    sink: FrameSink,
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    timeout: float = REQUEST_TIMEOUT,
) -> None:
    """Handle a single client connection.

    Args:
        state: The shared synchronization state.
        sink: Outbound frame channel used by SET.
        reader: The asyncio StreamReader for the connection.
        writer: The asyncio StreamWriter for the connection.
        timeout: Deadline in seconds for reading the request and writing
            the reply.
    """
    try:
        try:
            raw = await asyncio.wait_for(read_request(reader), timeout=timeout)
            text = raw.decode("utf-8")
        except asyncio.TimeoutError:
            logger.warning("Timed out reading request after %s seconds", timeout)
            return
        except (ProtocolError, UnicodeDecodeError) as e:
            logger.warning("Malformed request: %s", e)
            return
        except ConnectionError as e:
            logger.warning("Connection error reading request: %s", e)
            return

        if not text:
            logger.warning("Empty request, closing connection")
            return

        request = parse_request(text)
        logger.debug("Received %s request", request.verb.value)
        reply = dispatch(state, sink, request)

        try:
            writer.write(reply)
            await asyncio.wait_for(writer.drain(), timeout=timeout)
        except (ConnectionError, asyncio.TimeoutError) as e:
            logger.warning("Failed to send reply: %s", e)
    finally:
        writer.close()
        with suppress(ConnectionError):
            await writer.wait_closed()
