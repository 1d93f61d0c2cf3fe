# events.py

import threading
from typing import Any, Callable, List


class Subscription:
    """Handle returned by a listener registration; cancel() removes the listener."""

    def __init__(self, owner: "ListenerList", listener: Any):
        self._owner = owner
        self._listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Remove the listener. Calling this more than once is harmless."""
        if self._active:
            self._owner.remove(self._listener)
            self._active = False


class ListenerList:
    """
    Ordered collection of listeners.

    Notification iterates over a copy of the list so listeners may cancel
    their own subscription from inside a callback.
    """

    def __init__(self):
        self._listeners: List[Any] = []
        self._lock = threading.Lock()

    def add(self, listener: Any) -> Subscription:
        """Register a listener and return its cancellation handle."""
        if listener is None:
            raise ValueError("listener must not be None")
        with self._lock:
            self._listeners.append(listener)
        return Subscription(self, listener)

    def remove(self, listener: Any) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def get(self) -> List[Any]:
        with self._lock:
            return list(self._listeners)

    def fire(self, method: str, *args) -> None:
        """Call ``method`` on every listener that defines it."""
        for listener in self.get():
            handler: Callable = getattr(listener, method, None)
            if handler is not None:
                handler(*args)

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)
