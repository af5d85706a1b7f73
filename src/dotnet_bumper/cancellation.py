"""Cooperative cancellation for upgrade runs."""

from __future__ import annotations

import threading

from dotnet_bumper.errors import UpgradeCancelled


class CancellationToken:
    """A cancellation signal checked before every file open, request and write.

    Cancelling unwinds only the file currently being processed; files
    already written stay written.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise UpgradeCancelled()
