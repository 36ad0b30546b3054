"""Shared-object dispenser with lock, drop and double-buffered swap strategies."""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Any, Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")


class DispenserMode(Enum):
    LOCK = 0
    DROP = 1
    SWAP = 2
    REVERSE_SWAP = 3


_SWAP_MODES = (DispenserMode.SWAP, DispenserMode.REVERSE_SWAP)


class DispenserFlags(IntFlag):
    NONE = 0
    SWAP_MODE_COPY_WHEN_REVERSE_WATCH_ACQUIRE = 1 << 0


@dataclass
class DispenserConfig:
    flags: DispenserFlags = DispenserFlags.NONE


class _SharedLock:
    """Readers-writer lock: many shared holders or one exclusive holder."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._readers = 0
        self._writer = False

    def acquire_shared(self) -> None:
        with self._cond:
            self._cond.wait_for(lambda: not self._writer)
            self._readers += 1

    def release_shared(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire(self) -> None:
        with self._cond:
            self._cond.wait_for(lambda: not self._writer and self._readers == 0)
            self._writer = True

    def release(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()


class Acquisition(Generic[T]):
    """A watch (read) or control (write) hold on a dispenser's object."""

    def __init__(self, dispenser: "Dispenser[T]", control: bool) -> None:
        self._disp: Optional[Dispenser[T]] = dispenser
        self._control = control
        self._block: Any = None
        self._idx = 0
        d = dispenser
        mode = d._mode
        if mode is DispenserMode.LOCK:
            if control:
                d._lock.acquire()
            else:
                d._lock.acquire_shared()
        elif mode is DispenserMode.DROP:
            self._block = d._factory() if control else d._block
        elif mode is DispenserMode.SWAP:
            idx = d._ctl_idx
            if control:
                idx ^= 1
                d._swap_locks[idx].acquire()
            else:
                d._swap_locks[idx].acquire_shared()
            self._idx = idx
            self._block = d._blocks[idx]
        else:
            if control:
                idx = d._ctl_idx
                d._swap_locks[idx].acquire()
            else:
                if d.config.flags & DispenserFlags.SWAP_MODE_COPY_WHEN_REVERSE_WATCH_ACQUIRE:
                    crt = d._ctl_idx
                    sis = crt ^ 1
                    d._swap_locks[sis].acquire()
                    d._swap_locks[crt].acquire()
                    try:
                        d._blocks[sis] = copy.deepcopy(d._blocks[crt])
                    finally:
                        d._swap_locks[crt].release()
                        d._swap_locks[sis].release()
                with d._idx_lock:
                    idx = d._ctl_idx
                    d._ctl_idx = idx ^ 1
                d._swap_locks[idx].acquire_shared()
            self._idx = idx
            self._block = d._blocks[idx]

    @property
    def is_control(self) -> bool:
        return self._control

    def get(self) -> T:
        """Return the held object."""
        d = self._disp
        if d is None:
            raise RuntimeError("acquisition already released")
        if d._mode is DispenserMode.LOCK:
            return d._block
        return self._block

    def release(self) -> None:
        """Give the hold back; a control in drop or swap mode publishes its object."""
        d = self._disp
        if d is None:
            return
        mode = d._mode
        if mode is DispenserMode.LOCK:
            if self._control:
                d._lock.release()
            else:
                d._lock.release_shared()
        elif mode is DispenserMode.DROP:
            if self._control:
                d._block = self._block
        elif mode is DispenserMode.SWAP:
            if self._control:
                d._ctl_idx = self._idx
                d._swap_locks[self._idx].release()
            else:
                d._swap_locks[self._idx].release_shared()
        else:
            if self._control:
                d._swap_locks[self._idx].release()
            else:
                d._swap_locks[self._idx].release_shared()
        self._block = None
        self._disp = None

    def commit(self) -> None:
        """Same as :meth:`release`."""
        self.release()

    def drop(self) -> None:
        """In drop mode, let go of the object without publishing it."""
        d = self._disp
        if d is None:
            return
        if d._mode is DispenserMode.DROP:
            self._block = None
            self._disp = None

    def __enter__(self) -> "Acquisition[T]":
        return self

    def __exit__(self, *args: Any) -> None:
        self.release()


class Dispenser(Generic[T]):
    """Hands out an object to readers (watch) and writers (control)."""

    def __init__(
        self,
        factory: Callable[[], T],
        mode: DispenserMode = DispenserMode.LOCK,
        config: Optional[DispenserConfig] = None,
    ) -> None:
        self._factory = factory
        self._mode = DispenserMode(mode)
        self.config = config if config is not None else DispenserConfig()
        self._block: Any = None
        self._lock = _SharedLock()
        self._blocks: List[Any] = []
        self._swap_locks = [_SharedLock(), _SharedLock()]
        self._idx_lock = threading.Lock()
        self._ctl_idx = 0
        if self._mode in _SWAP_MODES:
            self._blocks = [factory(), factory()]
        else:
            self._block = factory()

    @property
    def mode(self) -> DispenserMode:
        return self._mode

    def watch(self) -> Acquisition[T]:
        """Acquire the object for reading."""
        return Acquisition(self, control=False)

    def control(self) -> Acquisition[T]:
        """Acquire the object for writing."""
        return Acquisition(self, control=True)

    def hold_latest(self) -> T:
        """Return the most recently published object without acquiring it."""
        if self._mode in _SWAP_MODES:
            return self._blocks[self._ctl_idx]
        return self._block

    def switch_swap_mode(
        self,
        mode: DispenserMode,
        modify_config: Optional[Callable[[DispenserConfig], None]] = None,
    ) -> DispenserMode:
        """Switch between the two swap modes and return the previous mode."""
        mode = DispenserMode(mode)
        if self._mode not in _SWAP_MODES or mode not in _SWAP_MODES:
            raise ValueError("switching is only possible between swap modes")
        first, second = self._swap_locks
        first.acquire()
        second.acquire()
        try:
            if modify_config is not None:
                modify_config(self.config)
            previous, self._mode = self._mode, mode
        finally:
            second.release()
            first.release()
        return previous