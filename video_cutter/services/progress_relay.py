"""
Progress relay service.

Converts the engine's fractional progress into integer percentages for a
single observer.
"""

import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from core.logger import logger


ProgressObserver = Callable[[int], None]


class ProgressSubscription:
    """
    Handle for one registered observer.

    Unsubscribing only removes the observer if it is still the active one, so
    a stale handle can never detach a newer observer. Usable as a context
    manager. The observer is process-wide while active; use
    ``ProgressRelay.scoped()`` to tie an observer to a single operation.
    """

    def __init__(self, relay: "ProgressRelay", observer: ProgressObserver):
        self._relay = relay
        self.observer = observer

    @property
    def active(self) -> bool:
        return self._relay.observer is self.observer

    def unsubscribe(self):
        self._relay._detach(self.observer)

    def __enter__(self) -> "ProgressSubscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.unsubscribe()
        return False


class ProgressRelay:
    """
    Forwards rounded 0-100 percentages to the active observer.

    With ``monotonic`` enabled the relay never reports less than the highest
    percentage already sent within the current operation; the engine's own
    signal may regress. ``begin()`` starts a new operation at 0.
    """

    def __init__(self, monotonic: bool = True):
        self.monotonic = monotonic
        self._observer: Optional[ProgressObserver] = None
        self._lock = threading.Lock()
        self._last_percent = 0
        self._emitted = False

    @property
    def observer(self) -> Optional[ProgressObserver]:
        return self._observer

    @property
    def last_percent(self) -> int:
        return self._last_percent

    def set_observer(self, observer: Optional[ProgressObserver]):
        """Replace the active observer (None clears it); observers never stack."""
        with self._lock:
            self._observer = observer

    def subscribe(self, observer: ProgressObserver) -> ProgressSubscription:
        """Make ``observer`` the active one and return a handle to remove it."""
        self.set_observer(observer)
        return ProgressSubscription(self, observer)

    def _detach(self, observer: ProgressObserver):
        with self._lock:
            if self._observer is observer:
                self._observer = None

    @contextmanager
    def scoped(self, observer: Optional[ProgressObserver]) -> Iterator[None]:
        """
        Route progress to ``observer`` for the duration of the block.

        The previous observer is restored afterwards. With ``observer`` None
        the current observer is left in place. Only the operation that owns
        the engine may enter this block.
        """
        if observer is None:
            yield
            return

        with self._lock:
            previous = self._observer
            self._observer = observer
        try:
            yield
        finally:
            with self._lock:
                if self._observer is observer:
                    self._observer = previous

    def begin(self):
        """Reset to 0 for a new operation."""
        with self._lock:
            self._last_percent = 0
            self._emitted = False

    def forward(self, fraction: float):
        """Relay one engine progress value in [0, 1]."""
        percent = min(max(int(round(fraction * 100)), 0), 100)
        with self._lock:
            if self.monotonic and self._emitted and percent < self._last_percent:
                percent = self._last_percent
            self._last_percent = percent
            self._emitted = True
            observer = self._observer
        self._notify(observer, percent)

    def finish(self):
        """Report 100 at the end of a successful operation if not already reported."""
        with self._lock:
            if self._emitted and self._last_percent == 100:
                return
            self._last_percent = 100
            self._emitted = True
            observer = self._observer
        self._notify(observer, 100)

    def _notify(self, observer: Optional[ProgressObserver], percent: int):
        if observer is None:
            return
        try:
            observer(percent)
        except Exception as e:
            # A broken UI callback must not abort the engine command
            logger.warning(f"Progress observer raised: {e}")
