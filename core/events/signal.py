from __future__ import annotations

import logging
import weakref
from threading import RLock
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class _Slot:
    __slots__ = ("_ref", "_strong")

    def __init__(self, callback: Callable, weak: bool) -> None:
        self._strong = None
        self._ref = None
        if weak and hasattr(callback, "__self__"):
            self._ref = weakref.WeakMethod(callback)
        else:
            self._strong = callback

    def resolve(self) -> Callable | None:
        if self._strong is not None:
            return self._strong
        return self._ref()

    def matches(self, callback: Callable) -> bool:
        return self.resolve() == callback


class Signal(Generic[T]):
    """
    Synchronous change notification with a single payload.

    Subscribers run in connection order on the emitting thread. A bound method
    connected with ``weak=True`` does not keep its owner alive; once the owner
    is collected the slot is dropped on the next emit.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._slots: list[_Slot] = []
        self._lock: RLock = RLock()

    def connect(self, callback: Callable[[T], None], *, weak: bool = False) -> Callable[[], None]:
        with self._lock:
            if not any(slot.matches(callback) for slot in self._slots):
                self._slots.append(_Slot(callback, weak))
        return lambda: self.disconnect(callback)

    def disconnect(self, callback: Callable[[T], None]) -> None:
        with self._lock:
            self._slots = [slot for slot in self._slots if not slot.matches(callback)]

    def subscriber_count(self) -> int:
        with self._lock:
            return sum(1 for slot in self._slots if slot.resolve() is not None)

    def emit(self, payload: T) -> None:
        with self._lock:
            slots = list(self._slots)
        dead = 0
        for slot in slots:
            callback = slot.resolve()
            if callback is None:
                dead += 1
                continue
            callback(payload)
        if dead:
            logger.debug("Signal %s: dropping %d collected subscriber(s)", self.name or "?", dead)
            with self._lock:
                self._slots = [slot for slot in self._slots if slot.resolve() is not None]


__all__ = ["Signal"]
