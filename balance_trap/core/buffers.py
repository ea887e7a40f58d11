from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional


@dataclass(frozen=True)
class Checkpoint:
    block: int
    snapshot: bytes


class HistoryBuffer:
    """Thread-safe bounded history of per-block snapshots, owned by the host.

    Stored oldest to newest; ``newest_first`` returns the order the decider
    expects.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 2:
            raise ValueError(f"history capacity must be >= 2, got {capacity}")
        self._capacity: int = capacity
        self._buffer: Deque[Checkpoint] = deque(maxlen=capacity)
        self._lock = threading.RLock()

    def add(self, block: int, snapshot: bytes) -> bool:
        """Append a checkpoint. Returns False if ``block`` is already the head."""
        with self._lock:
            if self._buffer and self._buffer[-1].block == block:
                return False
            self._buffer.append(Checkpoint(block=block, snapshot=snapshot))
            return True

    def size(self) -> int:
        with self._lock:
            return len(self._buffer)

    def capacity(self) -> int:
        return self._capacity

    def latest_block(self) -> Optional[int]:
        with self._lock:
            return self._buffer[-1].block if self._buffer else None

    def checkpoints(self) -> List[Checkpoint]:
        with self._lock:
            return list(self._buffer)

    def newest_first(self, limit: Optional[int] = None) -> List[bytes]:
        with self._lock:
            items = [cp.snapshot for cp in reversed(self._buffer)]
        return items if limit is None else items[:limit]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
