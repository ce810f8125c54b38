"""In-process publish/subscribe channel with explicit unsubscribe tokens."""

from __future__ import annotations

import itertools
import threading
from typing import Callable, Generic, TypeVar

import structlog

log = structlog.get_logger("events")

T = TypeVar("T")


class Subscription:
    """Token returned by Channel.subscribe(); unsubscribe() is idempotent."""

    def __init__(self, channel: Channel, key: int) -> None:
        self._channel = channel
        self._key = key
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._channel._remove(self._key)
            self.active = False


class Channel(Generic[T]):
    """Fan a value out to every current subscriber.

    Delivery order across subscribers is unspecified. A subscriber that
    raises is logged and skipped; the others still receive the value.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._subscribers: dict[int, Callable[[T], None]] = {}
        self._ids = itertools.count()
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        with self._lock:
            key = next(self._ids)
            self._subscribers[key] = callback
        return Subscription(self, key)

    def _remove(self, key: int) -> None:
        with self._lock:
            self._subscribers.pop(key, None)

    def publish(self, value: T) -> int:
        """Deliver *value*; returns the number of subscribers that accepted it."""
        with self._lock:
            callbacks = list(self._subscribers.values())
        delivered = 0
        for callback in callbacks:
            try:
                callback(value)
            except Exception:
                log.exception("subscriber_error", channel=self.name)
                continue
            delivered += 1
        return delivered

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)
