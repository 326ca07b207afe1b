"""
FIFO dispatch queue enforcing a minimum spacing between outbound requests.

Jikan allows 3 requests/second and 60/minute; the default spacing of 350ms
keeps a single process safely below both.
"""
from __future__ import annotations

import logging
import threading
import time
from collections import deque
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Deque


logger = logging.getLogger(__name__)

MIN_INTERVAL = 0.35


@dataclass
class _QueuedTask:
    execute: Callable[[], Any]
    future: Future


class DispatchQueue:
    """Serializes units of work so dispatches are at least `min_interval` apart.

    Work runs on one drain thread at a time. `enqueue` only appends and, when
    no drain thread is active, starts one; callers wait on the returned future.
    """

    def __init__(
        self,
        min_interval: float = MIN_INTERVAL,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._queue: Deque[_QueuedTask] = deque()
        self._lock = threading.Lock()
        self._draining = False
        self._last_dispatch = float("-inf")

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    def enqueue(self, execute: Callable[[], Any]) -> Future:
        """Queue `execute` and return a future settled with its outcome."""
        future: Future = Future()
        with self._lock:
            self._queue.append(_QueuedTask(execute=execute, future=future))
        self._start_drain()
        return future

    def _start_drain(self) -> None:
        with self._lock:
            if self._draining or not self._queue:
                return
            self._draining = True
        worker = threading.Thread(target=self._drain, name="jikan-dispatch", daemon=True)
        worker.start()

    def _drain(self) -> None:
        try:
            while True:
                with self._lock:
                    if not self._queue:
                        return
                    task = self._queue.popleft()

                if not task.future.set_running_or_notify_cancel():
                    logger.debug("Skipping cancelled task")
                    continue

                wait = self.min_interval - (self._clock() - self._last_dispatch)
                if wait > 0:
                    self._sleep(wait)
                self._last_dispatch = self._clock()

                try:
                    result = task.execute()
                except Exception as exc:
                    task.future.set_exception(exc)
                except BaseException as exc:
                    task.future.set_exception(exc)
                    raise
                else:
                    task.future.set_result(result)
        finally:
            with self._lock:
                self._draining = False
            # Work queued while this worker was exiting needs a new one.
            self._start_drain()
