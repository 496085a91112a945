#!/usr/bin/env python3
"""
Request/response protocol of the local socket.

One connection carries exactly one request and one reply:

    GET          -> the last synchronized text, verbatim
    SET <text>   -> OK
    anything else -> Unknown command

The SET payload is everything after "SET " up to end of stream, so it may
span several lines. A single trailing newline terminating the request is
not part of the payload.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

GET_VERB: str = "GET"
SET_PREFIX: str = "SET "

REPLY_OK: bytes = b"OK"
REPLY_UNKNOWN: bytes = b"Unknown command"


class Verb(Enum):
    """Request verbs understood by the server."""

    GET = "GET"
    SET = "SET"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class Request:
    """A parsed socket request.

    Attributes:
        verb: The request verb.
        payload: The text to set for SET requests, empty otherwise.
    """

    verb: Verb
    payload: str = ""


def _strip_terminator(text: str) -> str:
    """Remove one trailing request terminator (LF or CRLF)."""
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text


def parse_request(text: str) -> Request:
    """
    Parse the text of one request.

    Args:
        text: Everything the client sent on the connection.

    Returns:
        The parsed Request. Unrecognized verbs yield Verb.UNKNOWN.
    """
    text = _strip_terminator(text)
    if text == GET_VERB:
        return Request(Verb.GET)
    if text.startswith(SET_PREFIX):
        return Request(Verb.SET, text[len(SET_PREFIX):])
    return Request(Verb.UNKNOWN)


def encode_get() -> bytes:
    """Encode a GET request."""
    return f"{GET_VERB}\n".encode("utf-8")


def encode_set(text: str) -> bytes:
    """Encode a SET request carrying text."""
    return f"{SET_PREFIX}{text}".encode("utf-8")
