#!/usr/bin/env python3
"""Tests for the outbound frame sink and the shared emission path."""
import io
import logging
from unittest.mock import MagicMock

import pytest

from iosync.frame_sink import StreamFrameSink, propagate
from iosync.protocol import MAX_CONTENT_SIZE, SyncFrame
from iosync.sync_state import SyncState


def test_stream_sink_writes_one_line_per_frame() -> None:
    """Test each frame is written as one newline-terminated line."""
    stream = io.StringIO()
    sink = StreamFrameSink(stream)
    sink.emit(SyncFrame("alpha"))
    sink.emit(SyncFrame("two\nlines"))
    lines = stream.getvalue().split("\n")
    assert lines == [
        'CLIPBOARD_SYNC:{"content":"alpha"}',
        'CLIPBOARD_SYNC:{"content":"two\\nlines"}',
        "",
    ]


def test_stream_sink_flushes_after_each_frame() -> None:
    """Test the stream is flushed so frames are not held in a buffer."""
    stream = MagicMock()
    StreamFrameSink(stream).emit(SyncFrame("x"))
    stream.flush.assert_called_once()


def test_propagate_emits_new_value(recording_sink) -> None:
    """Test a new value is accepted and emitted once."""
    state = SyncState()
    assert propagate(state, recording_sink, "hello") is True
    assert recording_sink.contents == ["hello"]
    assert state.last_text == "hello"


def test_propagate_skips_duplicate(recording_sink) -> None:
    """Test a repeated value is not emitted again."""
    state = SyncState()
    propagate(state, recording_sink, "hello")
    assert propagate(state, recording_sink, "hello") is False
    assert recording_sink.contents == ["hello"]


def test_propagate_skips_oversize_without_touching_state(recording_sink) -> None:
    """Test oversize content is neither accepted nor emitted."""
    state = SyncState()
    assert propagate(state, recording_sink, "x" * (MAX_CONTENT_SIZE + 1)) is False
    assert recording_sink.frames == []
    assert state.last_text == ""


def test_propagate_logs_emit_failure(caplog: pytest.LogCaptureFixture) -> None:
    """Test an OSError from the sink is logged, not raised."""
    sink = MagicMock()
    sink.emit.side_effect = BrokenPipeError("peer gone")
    with caplog.at_level(logging.ERROR):
        assert propagate(SyncState(), sink, "hello") is False
    assert "Failed to emit sync frame" in caplog.text
