"""Worker pool that keeps slow lookups off the update-polling thread."""

from __future__ import annotations

import logging
import queue
import threading
from enum import Enum
from typing import Callable, Generic, TypeVar

from .config import MAX_PENDING_QUERIES, WORKER_COUNT
from .models import Query

logger = logging.getLogger(__name__)

T = TypeVar("T")

_STOP = object()


class PlatformHandle(Generic[T]):
    """A reference that is bound once, after startup, and read by workers.

    ``get()`` blocks until ``bind()`` has been called (or *timeout* expires).
    """

    def __init__(self) -> None:
        self._value: T | None = None
        self._lock = threading.Lock()
        self._bound = threading.Event()

    @property
    def is_bound(self) -> bool:
        return self._bound.is_set()

    def bind(self, value: T) -> None:
        with self._lock:
            if self._bound.is_set():
                raise RuntimeError("Platform handle is already bound")
            self._value = value
            self._bound.set()

    def get(self, timeout: float | None = None) -> T:
        if not self._bound.wait(timeout):
            raise RuntimeError("Platform handle was never bound")
        return self._value  # type: ignore[return-value]


class OverflowPolicy(Enum):
    FALLBACK = "fallback"  # answer with the fallback card right away
    BLOCK = "block"  # make the submitter wait for a free slot


class QueryPool:
    """Fixed set of worker threads fed from a bounded queue.

    *process* runs on a worker for each submitted query. When the queue is
    full, *policy* decides between blocking the submitter and diverting the
    query to *on_overflow*. Diverted queries are handled by a separate
    rejecter thread, so ``submit()`` never waits on the network.
    """

    def __init__(
        self,
        process: Callable[[Query], None],
        workers: int = WORKER_COUNT,
        max_pending: int = MAX_PENDING_QUERIES,
        policy: OverflowPolicy = OverflowPolicy.FALLBACK,
        on_overflow: Callable[[Query], None] | None = None,
    ):
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self._process = process
        self._on_overflow = on_overflow
        self.policy = policy
        self.worker_count = workers
        self._queue: queue.Queue = queue.Queue(maxsize=max_pending)
        self._rejects: queue.Queue = queue.Queue(maxsize=max_pending)
        self._threads: list[threading.Thread] = []

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        if self._threads:
            return
        for n in range(self.worker_count):
            self._spawn(f"query-worker-{n + 1}", self._queue, self._process)
        if self._on_overflow is not None:
            self._spawn("query-rejecter", self._rejects, self._on_overflow)
        logger.debug("Started %d query workers", self.worker_count)

    def _spawn(self, name: str, source: queue.Queue, handler) -> None:
        thread = threading.Thread(
            target=self._run, args=(source, handler), name=name, daemon=True
        )
        thread.start()
        self._threads.append(thread)

    def submit(self, query: Query) -> bool:
        """Queue *query*. Returns False if it was diverted by the overflow policy."""
        if self.policy is OverflowPolicy.BLOCK:
            self._queue.put(query)
            return True

        try:
            self._queue.put_nowait(query)
            return True
        except queue.Full:
            pass

        if self._on_overflow is None:
            logger.warning("Query queue full, dropping query %s", query.id)
            return False
        try:
            self._rejects.put_nowait(query)
            logger.warning("Query queue full, rejecting query %s", query.id)
        except queue.Full:
            logger.warning("Reject queue full too, dropping query %s", query.id)
        return False

    def shutdown(self, wait: bool = True) -> None:
        """Stop the threads once the queries already queued are done."""
        if not self._threads:
            return
        for _ in range(self.worker_count):
            self._queue.put(_STOP)
        if self._on_overflow is not None:
            self._rejects.put(_STOP)
        if wait:
            for thread in self._threads:
                thread.join()
        self._threads = []

    @staticmethod
    def _run(source: queue.Queue, handler: Callable[[Query], None]) -> None:
        while True:
            item = source.get()
            try:
                if item is _STOP:
                    return
                handler(item)
            except Exception:
                logger.exception("Handler failed on query %s", getattr(item, "id", "?"))
            finally:
                source.task_done()

    def join(self) -> None:
        """Block until every submitted or rejected query has been handled."""
        self._queue.join()
        self._rejects.join()
