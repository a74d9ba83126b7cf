# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""Cooperative cancellation for multi-step traversals."""

import threading

from ..client.exceptions import OperationCancelledError


class CancellationToken:
    """
    Caller-owned cancellation signal.
    
    Traversals (listing, recursive rename, recursive delete) call check()
    between chunks and between per-object operations, so a cancelled
    traversal stops after the unit of work in flight.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def check(self, context: str = None):
        """Raise OperationCancelledError if cancel() has been called."""
        if self._event.is_set():
            raise OperationCancelledError(
                f"Operation cancelled{f' during {context}' if context else ''}", key=context)

def check_cancelled(cancel, context=None):
    """check() a token that may be None."""
    if cancel is not None:
        cancel.check(context)
