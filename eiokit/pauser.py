"""Coordination between workers and a pause request."""

from __future__ import annotations

import enum
import threading


class _Status(enum.Enum):
    NORMAL = enum.auto()
    PAUSING = enum.auto()
    PAUSED = enum.auto()


class Pauser:
    """Lets workers register while running and a pause wait for them to finish.

    While a pause is pending, new work may still start; once paused, no work
    starts until :meth:`resume`.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._workers = 0
        self._pausing = threading.Event()
        self._paused = threading.Event()
        self._status = _Status.NORMAL

    def pause(self) -> bool:
        """Wait for all workers and pause. Return False if already paused."""
        with self._cond:
            if self._status is _Status.PAUSED:
                return False
            if self._status is _Status.NORMAL:
                self._pausing.set()
                self._status = _Status.PAUSING
            while self._workers:
                self._cond.wait()
            if self._status is _Status.PAUSED:
                return False
            self._paused.set()
            self._status = _Status.PAUSED
            self._cond.notify_all()
            return True

    def resume(self) -> None:
        """Return to normal running with fresh triggers."""
        with self._cond:
            self._status = _Status.NORMAL
            self._paused = threading.Event()
            self._pausing = threading.Event()

    def working(self) -> bool:
        """Register a worker. Return False if paused."""
        with self._cond:
            if self._status is _Status.PAUSED:
                return False
            self._workers += 1
            return True

    def done(self) -> None:
        """Unregister a worker."""
        with self._cond:
            if self._status is _Status.PAUSED or self._workers == 0:
                return
            self._workers -= 1
            self._cond.notify_all()

    def pausing_trigger(self) -> threading.Event:
        """Return the event set when a pause starts."""
        with self._cond:
            return self._pausing

    def paused_trigger(self) -> threading.Event:
        """Return the event set when the pause completes."""
        with self._cond:
            return self._paused