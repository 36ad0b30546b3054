"""Fixed-capacity pool that keeps its live blocks in slot order."""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional


@dataclass(eq=False)
class Block:
    """One occupied slot of a diffuser."""

    slot: int
    content: Any


class BlockDiffuser:
    """Pool of ``capacity`` slots; new content takes the lowest free slot."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._slots: List[Optional[Block]] = [None] * capacity
        self._free = list(range(capacity))
        self._size = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def inject(self, content: Any) -> Optional[Block]:
        """Place ``content`` in the lowest free slot; None when the pool is full."""
        if not self._free:
            return None
        slot = heapq.heappop(self._free)
        block = Block(slot, content)
        self._slots[slot] = block
        self._size += 1
        return block

    def eject(self, block: Block) -> None:
        """Free the slot held by ``block``."""
        slot = block.slot
        if not 0 <= slot < len(self._slots) or self._slots[slot] is not block:
            raise ValueError("block is not held by this diffuser")
        self._slots[slot] = None
        heapq.heappush(self._free, slot)
        self._size -= 1

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Block]:
        """Yield live blocks in slot order."""
        return iter([block for block in self._slots if block is not None])