from __future__ import annotations

from threading import RLock
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
Subscriber = Callable[[T], None]


class Signal(Generic[T]):
    """Synchronous observer list for domain events.

    Subscribers run in connection order on the emitting thread. A subscriber
    that raises ``ReferenceError`` (a weak proxy whose target is gone) is
    dropped; any other exception propagates to the emitter.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._subscribers: list[Subscriber] = []

    def connect(self, callback: Subscriber) -> Subscriber:
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)
        return callback

    def disconnect(self, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def emit(self, payload: T) -> None:
        with self._lock:
            snapshot = tuple(self._subscribers)
        dead = [callback for callback in snapshot if not self._deliver(callback, payload)]
        for callback in dead:
            self.disconnect(callback)

    @staticmethod
    def _deliver(callback: Subscriber, payload: T) -> bool:
        try:
            callback(payload)
        except ReferenceError:
            return False
        return True


__all__ = ["Signal"]
