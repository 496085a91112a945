"""Clipboard access for iosync.

This module defines the ClipboardPort contract the synchronization engine
calls and the two implementations shipped with iosync:

- PyperclipClipboard: the native clipboard via pyperclip (pbcopy/pbpaste on
  macOS, xclip/xsel/wl-clipboard on Linux, the Win32 API on Windows)
- HeadlessClipboard: for endpoints with no native clipboard; the
  synchronized value lives only in SyncState and is served over the socket

Reads and writes are blocking. Callers run them with asyncio.to_thread.
"""

from __future__ import annotations

import logging
from typing import Protocol

import pyperclip

logger = logging.getLogger(__name__)


class ClipboardError(Exception):
    """Raised when the native clipboard cannot be read or written."""


class ClipboardPort(Protocol):
    """Contract for the external clipboard collaborator."""

    def read(self) -> str | None:
        """Return the current clipboard text, or None if unavailable."""
        ...

    def write(self, value: str) -> None:
        """Set the clipboard text.

        Raises:
            ClipboardError: If the clipboard cannot be accessed.
        """
        ...


class PyperclipClipboard:
    """Native clipboard backed by pyperclip."""

    def read(self) -> str | None:
        """Read clipboard text.

        Failures are not fatal: an unavailable clipboard or non-text
        content reads as None and the caller skips the tick.

        Returns:
            Clipboard text, or None on failure.
        """
        try:
            content = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            logger.debug("Clipboard read failed: %s", e)
            return None
        if not isinstance(content, str):
            logger.debug("Clipboard holds non-text content, skipping")
            return None
        return content

    def write(self, value: str) -> None:
        """Write clipboard text.

        Args:
            value: The text to place on the clipboard.

        Raises:
            ClipboardError: If pyperclip cannot access the clipboard.
        """
        try:
            pyperclip.copy(value)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"Failed to set clipboard content: {e}") from e


class HeadlessClipboard:
    """Clipboard port for endpoints without a native clipboard.

    Reads never produce a value and writes are accepted and discarded.
    SyncState already holds the value, and the socket server serves it.
    """

    def read(self) -> str | None:
        return None

    def write(self, value: str) -> None:
        pass
