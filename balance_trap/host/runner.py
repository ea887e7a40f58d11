from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional, Tuple, TypeVar

from ..config import AppConfig
from ..core.buffers import HistoryBuffer
from ..core.decider import Decider
from ..core.errors import CollectionError, SnapshotDecodeError
from ..core.verdict import Verdict
from ..data.collector import BalanceCollector
from ..utils.retry import with_retries
from .sinks import ResponseSink


T = TypeVar("T")

logger = logging.getLogger(__name__)


class TrapRunner:
    """Host scheduler: one snapshot per new block, one decision per snapshot.

    ``tick`` is the unit of work. ``start`` runs it on a background thread
    every ``poll_interval_sec``; ``replay`` runs it over a historical block
    range with its own history window.
    """

    def __init__(
        self,
        config: AppConfig,
        collector: BalanceCollector,
        decider: Decider,
        sink: ResponseSink,
        buffer: Optional[HistoryBuffer] = None,
    ) -> None:
        self.config = config
        self.collector = collector
        self.decider = decider
        self.sink = sink
        self.buffer = buffer if buffer is not None else HistoryBuffer(config.runtime.history_size)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="TrapRunner", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=5)

    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def _run(self) -> None:
        cadence = self.config.runtime.poll_interval_sec
        while not self._stop.is_set():
            start = time.time()
            try:
                self.tick()
            except (CollectionError, SnapshotDecodeError):
                # Already logged in tick; the next poll tries again
                pass
            except Exception:  # noqa: BLE001
                logger.exception("tick failed")
            elapsed = time.time() - start
            self._stop.wait(timeout=max(0.0, cadence - elapsed))

    def tick(self) -> Optional[Verdict]:
        """Collect and evaluate the latest block, or return None if it was already seen."""
        try:
            block = self._retry(self.collector.latest_block)
            if block == self.buffer.latest_block():
                return None
            snapshot = self._retry(lambda: self.collector.collect_at(block))
        except CollectionError:
            logger.exception("collection failed", extra={"address": self.collector.address})
            raise
        self.buffer.add(block, snapshot)
        return self._evaluate(self.buffer, block)

    def replay(self, start_block: int, end_block: int) -> List[Tuple[int, Verdict]]:
        """Evaluate every block in ``[start_block, end_block]`` in order."""
        if start_block < 0 or end_block < start_block:
            raise ValueError(f"invalid block range {start_block}..{end_block}")
        window = HistoryBuffer(self.buffer.capacity())
        results: List[Tuple[int, Verdict]] = []
        for block in range(start_block, end_block + 1):
            snapshot = self._retry(lambda: self.collector.collect_at(block))
            window.add(block, snapshot)
            results.append((block, self._evaluate(window, block)))
        return results

    def _evaluate(self, buffer: HistoryBuffer, block: int) -> Verdict:
        history = buffer.newest_first()
        try:
            verdict = self.decider.should_respond(history)
        except SnapshotDecodeError:
            logger.exception("malformed snapshot in history", extra={"block": block})
            raise
        logger.info(
            "evaluated checkpoint",
            extra={
                "block": block,
                "history_len": len(history),
                "should_respond": verdict.should_respond,
            },
        )
        if verdict.should_respond:
            self._deliver(verdict, block)
        return verdict

    def _deliver(self, verdict: Verdict, block: int) -> None:
        message = verdict.message
        try:
            self.sink(message)
        except Exception:
            logger.exception("response sink failed", extra={"block": block, "alert_message": message})
            raise

    def _retry(self, func: Callable[[], T]) -> T:
        rt = self.config.runtime
        return with_retries(
            func,
            max_attempts=rt.max_retries,
            base_seconds=rt.backoff_base_sec,
            cap_seconds=rt.backoff_cap_sec,
            retry_on=(CollectionError,),
        )
