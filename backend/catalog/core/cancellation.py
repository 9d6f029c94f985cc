"""Cooperative cancellation for service operations."""

from __future__ import annotations

import threading


class OperationCancelledError(RuntimeError):
    """Raised when work is abandoned because its caller cancelled it."""


class CancellationToken:
    """
    Thread-safe cancellation flag passed from the caller into a service.

    Services poll it at their checkpoints; the read-write Unit of Work polls
    it once more right before committing, so a cancelled operation never
    commits.
    """

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """
        :raises OperationCancelledError: If :meth:`cancel` was called.
        """
        if self._event.is_set():
            raise OperationCancelledError("Operation was cancelled.")
