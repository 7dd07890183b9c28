"""
Per-provider request pacing.

Requests to one provider are executed one at a time, in submission order,
with a fixed delay between them. An HTTP 429 pauses the whole queue for a
cool-down period and the request is retried once.
"""

import logging
import queue
import threading
import time
from concurrent.futures import Future
from typing import Any, Callable, Optional

from .exceptions import RateLimitedError, SourceUnavailableError

_STOP = object()


class RequestQueue:
    """FIFO request queue drained by a single worker thread."""

    def __init__(
        self,
        name: str,
        delay: float = 1.0,
        cooldown: float = 60.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize request queue.

        Args:
            name: Provider name used in log messages
            delay: Minimum seconds between two requests
            cooldown: Seconds to pause the queue after a 429
            sleep: Sleep function (injectable for tests)
            clock: Monotonic clock (injectable for tests)
            logger: Logger instance
        """
        self.name = name
        self.delay = delay
        self.cooldown = cooldown
        self._sleep = sleep
        self._clock = clock
        self.logger = logger or logging.getLogger(__name__)

        self._queue: "queue.Queue" = queue.Queue()
        self._lock = threading.Lock()
        self._worker: Optional[threading.Thread] = None
        self._last_request: Optional[float] = None

    def call(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Enqueue a request and block until it has been executed.

        Args:
            fn: Callable performing the request
            *args: Positional arguments for fn
            **kwargs: Keyword arguments for fn

        Returns:
            Result of fn

        Raises:
            SourceUnavailableError: When the request is rate limited twice
            Exception: Whatever fn raised
        """
        return self.submit(fn, *args, **kwargs).result()

    def submit(self, fn: Callable[..., Any], *args, **kwargs) -> Future:
        """Enqueue a request and return a future for its result."""
        future: Future = Future()
        self._queue.put((fn, args, kwargs, future))
        self._ensure_worker()
        return future

    def pending(self) -> int:
        """Number of requests waiting in the queue."""
        return self._queue.qsize()

    def close(self) -> None:
        """Stop the worker once queued requests are drained."""
        with self._lock:
            if self._worker is not None and self._worker.is_alive():
                self._queue.put(_STOP)
            self._worker = None

    def _ensure_worker(self) -> None:
        with self._lock:
            if self._worker is None or not self._worker.is_alive():
                self._worker = threading.Thread(
                    target=self._run,
                    name=f"request-queue-{self.name}",
                    daemon=True
                )
                self._worker.start()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                break
            fn, args, kwargs, future = item
            if future.set_running_or_notify_cancel():
                self._execute(fn, args, kwargs, future)

    def _wait_for_slot(self) -> None:
        if self._last_request is None:
            return
        elapsed = self._clock() - self._last_request
        if elapsed < self.delay:
            self._sleep(self.delay - elapsed)

    def _execute(self, fn, args, kwargs, future: Future) -> None:
        self._wait_for_slot()
        try:
            try:
                result = fn(*args, **kwargs)
            except RateLimitedError:
                self.logger.warning(
                    f"{self.name}: rate limited, pausing queue for {self.cooldown:.0f}s"
                )
                self._sleep(self.cooldown)
                try:
                    result = fn(*args, **kwargs)
                except RateLimitedError as retry_error:
                    error = SourceUnavailableError(
                        f"{self.name}: still rate limited after cool-down",
                        source=self.name
                    )
                    error.__cause__ = retry_error
                    future.set_exception(error)
                    return
        except Exception as e:
            future.set_exception(e)
        else:
            future.set_result(result)
        finally:
            self._last_request = self._clock()
