#!/usr/bin/env python3
"""Pytest fixtures for iosync tests.

Provides a fresh SyncState, an in-memory clipboard, a frame sink that
records emitted frames, and short temporary socket paths.
"""

import shutil
import tempfile
from collections.abc import Generator

import pytest

from iosync.clipboard import ClipboardError
from iosync.protocol import SyncFrame
from iosync.sync_state import SyncState


class FakeClipboard:
    """In-memory clipboard recording every write.

    Attributes:
        content: Value returned by read(); None reads as unavailable.
        writes: Every value passed to write(), in order.
        fail_writes: If True, write() raises ClipboardError.
    """

    def __init__(self, content: str | None = None) -> None:
        self.content = content
        self.writes: list[str] = []
        self.fail_writes = False

    def read(self) -> str | None:
        return self.content

    def write(self, value: str) -> None:
        if self.fail_writes:
            raise ClipboardError("Failed to set clipboard content: unavailable")
        self.writes.append(value)
        self.content = value


class RecordingSink:
    """Frame sink that keeps emitted frames in a list."""

    def __init__(self) -> None:
        self.frames: list[SyncFrame] = []

    def emit(self, frame: SyncFrame) -> None:
        self.frames.append(frame)

    @property
    def contents(self) -> list[str]:
        return [frame.content for frame in self.frames]


@pytest.fixture
def sync_state() -> SyncState:
    """Create a fresh SyncState instance for testing."""
    return SyncState()


@pytest.fixture
def fake_clipboard() -> FakeClipboard:
    """Create an empty in-memory clipboard."""
    return FakeClipboard()


@pytest.fixture
def recording_sink() -> RecordingSink:
    """Create a frame sink that records frames."""
    return RecordingSink()


@pytest.fixture
def temp_socket_path() -> Generator[str, None, None]:
    """Provide a short temporary path for Unix domain socket testing.

    Unix socket paths are limited to about 100 bytes, so this uses a
    fresh directory under the system temp dir rather than tmp_path.
    """
    tmpdir = tempfile.mkdtemp(prefix="iosync-")
    try:
        yield f"{tmpdir}/test.sock"
    finally:
        shutil.rmtree(tmpdir, ignore_errors=True)
