#!/usr/bin/env python3
"""Tests for the clipboard ports."""
from unittest.mock import patch

import pyperclip
import pytest

from iosync.clipboard import ClipboardError, HeadlessClipboard, PyperclipClipboard


class TestPyperclipClipboard:
    """Tests for the pyperclip-backed native clipboard."""

    def test_read_returns_text(self) -> None:
        """Test read returns the pasted text."""
        with patch("iosync.clipboard.pyperclip.paste", return_value="copied"):
            assert PyperclipClipboard().read() == "copied"

    def test_read_failure_returns_none(self) -> None:
        """Test an unavailable clipboard reads as None."""
        with patch(
            "iosync.clipboard.pyperclip.paste",
            side_effect=pyperclip.PyperclipException("no clipboard mechanism"),
        ):
            assert PyperclipClipboard().read() is None

    def test_read_non_text_returns_none(self) -> None:
        """Test non-text content reads as None."""
        with patch("iosync.clipboard.pyperclip.paste", return_value=None):
            assert PyperclipClipboard().read() is None

    def test_write_copies_text(self) -> None:
        """Test write hands the value to pyperclip."""
        with patch("iosync.clipboard.pyperclip.copy") as mock_copy:
            PyperclipClipboard().write("value")
        mock_copy.assert_called_once_with("value")

    def test_write_failure_raises_clipboard_error(self) -> None:
        """Test pyperclip failures surface as ClipboardError."""
        with patch(
            "iosync.clipboard.pyperclip.copy",
            side_effect=pyperclip.PyperclipException("no clipboard mechanism"),
        ):
            with pytest.raises(ClipboardError, match="no clipboard mechanism"):
                PyperclipClipboard().write("value")


class TestHeadlessClipboard:
    """Tests for the clipboard port of headless endpoints."""

    def test_read_is_always_none(self) -> None:
        """Test a headless endpoint never produces local changes."""
        assert HeadlessClipboard().read() is None

    def test_write_is_accepted(self) -> None:
        """Test writes succeed without side effects."""
        HeadlessClipboard().write("value")
