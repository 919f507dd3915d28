"""Cooperative cancellation shared between a caller and a background move."""

import threading


class CancelToken:
    """Thread-safe cancellation flag."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        """Ask the running operation to stop at its next checkpoint."""
        self._event.set()

    def is_cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._event.is_set()

    @property
    def event(self) -> threading.Event:
        return self._event
