"""Thread-safe key/value bucket whose lookups are steered by a handle."""

from __future__ import annotations

import threading
from enum import IntFlag
from typing import Dict, Generic, Hashable, Optional, Tuple, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class BucketHandle(IntFlag):
    """Flags that steer how a bucket treats one lookup-and-commit cycle."""

    NONE = 0
    BYPASS = 1 << 0
    QUERIED = 1 << 1
    DISABLE = BYPASS | QUERIED


class Bucket(Generic[K, V]):
    """Cache of shared values keyed by ``key``."""

    def __init__(self) -> None:
        self._map: Dict[K, V] = {}
        self._lock = threading.Lock()

    def query(
        self, key: K, handle: BucketHandle = BucketHandle.NONE
    ) -> Tuple[Optional[V], BucketHandle]:
        """Look ``key`` up and return the value (or None) with the updated handle.

        A handle that already carries ``QUERIED`` skips the lookup and yields None.
        """
        handle = BucketHandle(handle)
        if handle & BucketHandle.QUERIED:
            return None, handle
        with self._lock:
            value = self._map.get(key)
        return value, handle | BucketHandle.QUERIED

    def commit(self, key: K, value: V, handle: BucketHandle = BucketHandle.NONE) -> V:
        """Store ``value`` under ``key`` unless the handle bypasses; return it."""
        if BucketHandle(handle) & BucketHandle.BYPASS:
            return value
        with self._lock:
            self._map[key] = value
        return value

    def store(self, key: K, value: V) -> None:
        """Store ``value`` under ``key`` unconditionally."""
        with self._lock:
            self._map[key] = value

    def __len__(self) -> int:
        with self._lock:
            return len(self._map)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._map