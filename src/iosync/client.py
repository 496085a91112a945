#!/usr/bin/env python3
"""Socket client for iosync.

This module issues a single GET or SET request against the iosync socket
server and returns the reply. It is what headless tools call instead of a
native clipboard: `iosync --client -o` (or `iosync-xclip -o`) prints the
synchronized value, and `iosync --client` (or `iosync-xclip`) sets it from
standard input.

Connection attempts are retried with tenacity's exponential backoff for a
bounded number of attempts, covering a server that is still starting.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import TextIO

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from iosync.command import encode_get, encode_set
from iosync.constants import (
    CONNECT_ATTEMPTS,
    INITIAL_WAIT,
    MAX_WAIT,
    REPLY_TIMEOUT,
    WAIT_MULTIPLIER,
)

logger = logging.getLogger(__name__)


@retry(
    wait=wait_exponential(
        multiplier=WAIT_MULTIPLIER,
        min=INITIAL_WAIT,
        max=MAX_WAIT,
    ),
    retry=retry_if_exception_type(ConnectionError),
    stop=stop_after_attempt(CONNECT_ATTEMPTS),
    reraise=True,
)
async def connect_to_server(
    socket_path: str,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Connect to the iosync server via Unix domain socket.

    Args:
        socket_path: Path to the Unix domain socket.

    Returns:
        Tuple of (StreamReader, StreamWriter) for the connection.

    Raises:
        ConnectionError: If every attempt fails (socket not found, refused,
            etc).
    """
    try:
        return await asyncio.open_unix_connection(socket_path)
    except OSError as e:
        logger.debug("Connection to %s failed: %s", socket_path, e)
        raise ConnectionError(f"Failed to connect to {socket_path}: {e}") from e


async def send_request(
    socket_path: str, request: bytes, timeout: float = REPLY_TIMEOUT
) -> str:
    """Send one request and return the server's full reply.

    The write side is half-closed after sending so the server sees the end
    of the request, then the reply is read until the server closes.

    Args:
        socket_path: Path to the Unix domain socket.
        request: Encoded request bytes.
        timeout: Deadline in seconds for the reply.

    Returns:
        The decoded reply text.

    Raises:
        ConnectionError: On connect failure, I/O failure, or timeout.
    """
    reader, writer = await connect_to_server(socket_path)
    try:
        writer.write(request)
        await writer.drain()
        if writer.can_write_eof():
            writer.write_eof()
        reply = await asyncio.wait_for(reader.read(), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise ConnectionError(f"Timed out waiting for reply from {socket_path}") from e
    except OSError as e:
        raise ConnectionError(f"Request to {socket_path} failed: {e}") from e
    finally:
        writer.close()
        with suppress(OSError):
            await writer.wait_closed()
    return reply.decode("utf-8", errors="replace")


async def get_clipboard(socket_path: str) -> str:
    """Return the synchronized clipboard text held by the server."""
    return await send_request(socket_path, encode_get())


async def set_clipboard(socket_path: str, text: str) -> str:
    """Set the synchronized clipboard text; returns the server reply."""
    return await send_request(socket_path, encode_set(text))


def read_stdin_payload(stream: TextIO) -> str:
    """Read a SET payload from a text stream.

    Lines are joined with newlines, so a trailing newline at end of input
    is not part of the payload and CRLF line endings become LF.

    Args:
        stream: The stream to read, normally sys.stdin.

    Returns:
        The payload text.
    """
    data = stream.read()
    lines = data.split("\n")
    if data.endswith("\n"):
        lines.pop()
    return "\n".join(line.rstrip("\r") for line in lines)


async def run_client(socket_path: str, output: bool, stdin: TextIO, stdout: TextIO) -> None:
    """Run one client request.

    Args:
        socket_path: Path to the Unix domain socket.
        output: True to GET and print the value, False to SET from stdin.
        stdin: Source of the SET payload.
        stdout: Destination of the GET reply.

    Raises:
        ConnectionError: If the request cannot be completed.
    """
    if output:
        stdout.write(await get_clipboard(socket_path))
        stdout.flush()
        return
    reply = await set_clipboard(socket_path, read_stdin_payload(stdin))
    logger.debug("Server replied: %s", reply)
