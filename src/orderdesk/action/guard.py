"""In-flight guard — one dispatch per (action, order, target) at a time.

A second click on "Create Picklist" or "Mark Packed" while the first request
is still waiting on the order service must not send a second request; the
backend does not deduplicate picklist creation.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class InFlightGuard:
    def __init__(self) -> None:
        self._keys: set[tuple] = set()
        self._lock = threading.Lock()

    @contextmanager
    def hold(self, key: tuple) -> Iterator[bool]:
        """Yield True if ``key`` was acquired, False if it is already in flight."""
        with self._lock:
            acquired = key not in self._keys
            if acquired:
                self._keys.add(key)
        try:
            yield acquired
        finally:
            if acquired:
                with self._lock:
                    self._keys.discard(key)

    def is_in_flight(self, key: tuple) -> bool:
        with self._lock:
            return key in self._keys


in_flight = InFlightGuard()
