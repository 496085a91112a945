#!/usr/bin/env python3
"""Shared synchronization state and the dedup gate.

Loop prevention is what keeps two synchronized clipboards from echoing
the same value back and forth forever. When a value received from the
peer is applied to the local clipboard, the watcher sees it on its next
tick. Without tracking it would send the value straight back, and the
peer would do the same.

SyncState holds the last accepted value. Every producer (clipboard
watcher, inbound stream decoder, socket SET) offers its candidate to
try_accept(), and only a value that differs from the last accepted one is
propagated. try_accept() is the only place last_text is written.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


@dataclass
class SyncState:
    """Last-known-synchronized clipboard text.

    One instance is created at startup and passed explicitly to every
    worker. The lock is a threading.Lock so the compare-and-set is atomic
    for event-loop tasks and for worker threads alike.

    Attributes:
        last_text: The most recently accepted value. Empty means nothing
            has been synchronized yet.
    """

    last_text: str = ""
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def try_accept(self, candidate: str) -> str | None:
        """Accept candidate if it differs from the last accepted value.

        The comparison and the update happen under one lock acquisition,
        so two concurrent callers offering the same value can never both
        see it as new.

        Args:
            candidate: Clipboard text offered by a producer.

        Returns:
            candidate if it was accepted and must be propagated, or None if
            it equals last_text (duplicate or echo).
        """
        with self._lock:
            if candidate == self.last_text:
                return None
            self.last_text = candidate
            return candidate

    def snapshot(self) -> str:
        """Return the last accepted value."""
        with self._lock:
            return self.last_text
