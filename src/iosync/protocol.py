#!/usr/bin/env python3
"""
Line framing for clipboard sync frames on the duplex stream.

The duplex stream carries ordinary text (passed through untouched) and
sync frames interleaved line by line. A sync frame is one line made of a
fixed prefix followed by a JSON object with a single string field:

    CLIPBOARD_SYNC:{"content": "Hello world!"}

JSON string escaping turns any newline in the content into "\\n", so a
frame is always exactly one line and a partial frame is never observable.
Any line without the prefix is opaque pass-through text.

Content is limited to 10 MB to prevent memory exhaustion.
"""
from __future__ import annotations

import json
from dataclasses import dataclass

# Marks a line as a sync frame rather than pass-through text.
FRAME_PREFIX: str = "CLIPBOARD_SYNC:"

# Maximum size of clipboard content in bytes (10 MB), measured as UTF-8.
MAX_CONTENT_SIZE: int = 10485760

# Longest line the inbound reader accepts. JSON escaping can expand
# content, so this leaves room above MAX_CONTENT_SIZE.
MAX_LINE_SIZE: int = 8 * MAX_CONTENT_SIZE


class ProtocolError(Exception):
    """
    Exception raised for protocol-level errors.

    Raised when a frame line cannot be decoded: missing prefix, invalid
    JSON, wrong shape, or content over the size limit.
    """

    pass


@dataclass(frozen=True)
class SyncFrame:
    """One clipboard value in transit to the peer."""

    content: str


def validate_content_size(content: str) -> bool:
    """
    Check if content size is within the allowed limit.

    Args:
        content: Clipboard text to validate.

    Returns:
        True if the UTF-8 encoding is at most MAX_CONTENT_SIZE bytes.
    """
    return len(content.encode("utf-8")) <= MAX_CONTENT_SIZE


def is_frame_line(line: str) -> bool:
    """Return True if line carries the sync frame prefix."""
    return line.startswith(FRAME_PREFIX)


def encode_frame(frame: SyncFrame) -> str:
    """
    Encode a sync frame as a single line.

    Args:
        frame: The frame to encode.

    Returns:
        The frame line without a trailing newline, e.g.
        'CLIPBOARD_SYNC:{"content":"hi"}'.
    """
    payload = json.dumps({"content": frame.content}, separators=(",", ":"))
    return FRAME_PREFIX + payload


def decode_frame(line: str) -> SyncFrame:
    """
    Decode a sync frame line.

    Args:
        line: A line beginning with FRAME_PREFIX, with or without its
            trailing newline.

    Returns:
        The decoded SyncFrame.

    Raises:
        ProtocolError: On missing prefix, malformed JSON, a payload that is
            not an object with a string "content" field, or oversize content.
    """
    if not is_frame_line(line):
        raise ProtocolError("Line does not start with frame prefix")
    payload = line[len(FRAME_PREFIX):].strip()
    try:
        obj = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"Invalid frame payload: {e}") from e
    if not isinstance(obj, dict):
        raise ProtocolError(f"Frame payload is not an object: {type(obj).__name__}")
    content = obj.get("content")
    if not isinstance(content, str):
        raise ProtocolError("Frame payload has no string 'content' field")
    if not validate_content_size(content):
        raise ProtocolError(f"Content size exceeds limit {MAX_CONTENT_SIZE}")
    return SyncFrame(content=content)
