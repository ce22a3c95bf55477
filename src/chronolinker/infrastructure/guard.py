"""Per-document re-entrancy guard for engine writes.

Every metadata write the engine makes is itself observed as a document
modification, and modification handlers run the engine again. The guard
holds a document through ``idle -> updating -> settling -> idle``: it is
busy while the write is in flight and for a settle delay afterwards, which
absorbs the store's echoed notification. Handlers reacting to store events
skip busy documents; direct calls are never blocked.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import StrEnum


class GuardState(StrEnum):
    IDLE = "idle"
    UPDATING = "updating"
    SETTLING = "settling"


@dataclass
class _Slot:
    state: GuardState
    depth: int = 0
    settle_until: float = 0.0


class UpdateGuard:
    """Tracks which documents the engine is currently writing.

    Parameters:
        settle_delay: Seconds a document stays busy after its write returns.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        settle_delay: float = 0.5,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settle_delay = settle_delay
        self._clock = clock
        self._slots: dict[str, _Slot] = {}
        self._lock = threading.Lock()

    def state(self, path: str) -> GuardState:
        with self._lock:
            return self._state_locked(path)

    def is_busy(self, path: str) -> bool:
        return self.state(path) is not GuardState.IDLE

    def __len__(self) -> int:
        """Number of documents currently tracked (updating or settling)."""
        with self._lock:
            return len(self._slots)

    @contextmanager
    def hold(self, path: str) -> Iterator[None]:
        """Mark *path* as updating for the duration of the block."""
        with self._lock:
            self._prune_locked()
            slot = self._slots.get(path)
            if slot is None or slot.state is not GuardState.UPDATING:
                slot = _Slot(state=GuardState.UPDATING)
                self._slots[path] = slot
            slot.depth += 1
        try:
            yield
        finally:
            with self._lock:
                slot.depth -= 1
                if slot.depth == 0:
                    slot.state = GuardState.SETTLING
                    slot.settle_until = self._clock() + self._settle_delay

    def _prune_locked(self) -> None:
        now = self._clock()
        expired = [
            path
            for path, slot in self._slots.items()
            if slot.state is GuardState.SETTLING and now >= slot.settle_until
        ]
        for path in expired:
            del self._slots[path]

    def _state_locked(self, path: str) -> GuardState:
        slot = self._slots.get(path)
        if slot is None:
            return GuardState.IDLE
        if slot.state is GuardState.SETTLING and self._clock() >= slot.settle_until:
            del self._slots[path]
            return GuardState.IDLE
        return slot.state
