"""
Timed task scheduler.

A SchedulerPool runs zero-argument callbacks after a delay measured
from the moment the task was submitted. A fixed set of daemon worker
threads drains a single time-ordered queue:

    pool = SchedulerPool(num_workers=4)
    pool.after(250, lambda: print("a quarter second later"))

Delays are in milliseconds. Tasks whose fire times coincide may run in
any order, on any worker. A delay of zero (or less) still runs on a
worker, never in the caller's thread.

One pool is shared per process through default_scheduler(); tests and
applications can construct their own and pass it around instead.
"""

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

from midilink.errors import SchedulerError

logger = logging.getLogger(__name__)

NUM_PLAYER_THREADS = 10


class ScheduledTask:
    """
    A callback waiting in a SchedulerPool.

    Attributes:
        callback: Zero-argument callable to run
        delay_ms: Requested delay in milliseconds
        submitted_at: Monotonic time of submission (seconds)
        fire_at: Monotonic time the task becomes due (seconds)
        fired_at: Monotonic time the callback started, None until then
    """

    def __init__(self, callback: Callable[[], object], delay_ms: float, submitted_at: float):
        self.callback = callback
        self.delay_ms = delay_ms
        self.submitted_at = submitted_at
        self.fire_at = submitted_at + delay_ms / 1000.0
        self.fired_at: Optional[float] = None
        self._cancelled = False
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._pool: Optional["SchedulerPool"] = None

    def __repr__(self) -> str:
        state = "done" if self.done else "cancelled" if self._cancelled else "pending"
        return f"<ScheduledTask delay={self.delay_ms}ms {state} {self.callback!r}>"

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        """True once the task has run or been discarded."""
        return self._done.is_set()

    def cancel(self) -> bool:
        """
        Prevent a pending task from running.

        The task leaves its pool's queue at once, so it no longer counts
        as pending.

        Returns:
            True if the task was still pending, False if it already ran
        """
        with self._lock:
            if self._done.is_set() or self.fired_at is not None:
                return False
            self._cancelled = True

        if self._pool is not None:
            self._pool._discard(self)
        return True

    def _claim(self) -> bool:
        """Mark the task as started unless it was cancelled first."""
        with self._lock:
            if self._cancelled:
                return False
            self.fired_at = time.monotonic()
            return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the task is done; returns False on timeout (seconds)."""
        return self._done.wait(timeout)


class SchedulerPool:
    """
    Fixed-size pool of worker threads running delayed tasks.

    Workers start on the first submission and run as daemon threads, so
    a pool never has to be shut down explicitly.

    Args:
        num_workers: Number of worker threads (default 10)
        name: Thread name prefix
        max_pending: Refuse submissions once this many tasks are queued
    """

    def __init__(
        self,
        num_workers: int = NUM_PLAYER_THREADS,
        name: str = "midilink-scheduler",
        max_pending: Optional[int] = None,
    ):
        if num_workers < 1:
            raise ValueError(f"num_workers must be at least 1, got {num_workers}")

        self.num_workers = num_workers
        self.name = name
        self.max_pending = max_pending

        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._sequence = itertools.count()
        self._cond = threading.Condition()
        self._workers: List[threading.Thread] = []
        self._active = 0
        self._shutdown = False

    def __repr__(self) -> str:
        return f"<SchedulerPool {self.name} workers={self.num_workers} pending={self.pending}>"

    @property
    def pending(self) -> int:
        """Number of queued tasks."""
        with self._cond:
            return len(self._queue)

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def after(
        self,
        delay_ms: float,
        callback: Callable[[], object],
        reference: Optional[float] = None,
    ) -> ScheduledTask:
        """
        Run callback once delay_ms milliseconds have passed.

        The delay is measured from this call (or from reference), not
        from when a worker becomes free.

        Args:
            delay_ms: Delay in milliseconds
            callback: Zero-argument callable
            reference: time.monotonic() instant the delay counts from;
                lets several submissions share one starting point

        Returns:
            The queued task

        Raises:
            SchedulerError: If the pool is shut down or full
        """
        if reference is None:
            reference = time.monotonic()
        task = ScheduledTask(callback, delay_ms, reference)
        task._pool = self

        with self._cond:
            if self._shutdown:
                raise SchedulerError(f"Scheduler {self.name} is shut down")
            if self.max_pending is not None and len(self._queue) >= self.max_pending:
                raise SchedulerError(
                    f"Scheduler {self.name} is full ({self.max_pending} pending tasks)"
                )
            if not self._workers:
                self._start_workers()

            heapq.heappush(self._queue, (task.fire_at, next(self._sequence), task))
            self._cond.notify_all()

        return task

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until no task is queued or running.

        Tasks submitted by running callbacks count too, so a note and
        its scheduled note-off are both finished when this returns True.

        Args:
            timeout: Maximum wait in seconds (None waits forever)

        Returns:
            True if the pool went idle, False on timeout
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while self._queue or self._active:
                remaining = None
                if deadline is not None:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        return False
                self._cond.wait(remaining)
            return True

    def shutdown(self, wait: bool = True) -> None:
        """
        Stop the workers and discard queued tasks.

        Args:
            wait: Join the worker threads before returning
        """
        with self._cond:
            if self._shutdown:
                return
            self._shutdown = True
            discarded = [task for _, _, task in self._queue]
            self._queue.clear()
            self._cond.notify_all()

        for task in discarded:
            task._cancelled = True
            task._done.set()

        logger.debug("Scheduler %s shut down, %d task(s) discarded", self.name, len(discarded))

        if wait:
            current = threading.current_thread()
            for worker in self._workers:
                if worker is not current:
                    worker.join()

    def _discard(self, task: ScheduledTask) -> None:
        """Remove a cancelled task from the queue."""
        with self._cond:
            remaining = [entry for entry in self._queue if entry[2] is not task]
            if len(remaining) == len(self._queue):
                # Already taken by a worker, which will skip it
                return
            self._queue[:] = remaining
            heapq.heapify(self._queue)
            task._done.set()
            self._cond.notify_all()

    def _start_workers(self) -> None:
        for i in range(self.num_workers):
            worker = threading.Thread(
                target=self._work, name=f"{self.name}-{i}", daemon=True
            )
            worker.start()
            self._workers.append(worker)
        logger.debug("Scheduler %s started %d workers", self.name, self.num_workers)

    def _next_due(self) -> Optional[ScheduledTask]:
        """Wait for the head of the queue to become due and pop it."""
        with self._cond:
            while not self._shutdown:
                if not self._queue:
                    self._cond.wait()
                    continue

                fire_at = self._queue[0][0]
                now = time.monotonic()
                if fire_at <= now:
                    self._active += 1
                    return heapq.heappop(self._queue)[2]

                self._cond.wait(fire_at - now)
        return None

    def _work(self) -> None:
        while True:
            task = self._next_due()
            if task is None:
                return
            try:
                if task._claim():
                    task.callback()
            except Exception:
                logger.exception("Scheduled task %r failed", task)
            finally:
                task._done.set()
                with self._cond:
                    self._active -= 1
                    self._cond.notify_all()


_default_pool: Optional[SchedulerPool] = None
_default_lock = threading.Lock()


def default_scheduler() -> SchedulerPool:
    """Return the process-wide pool, creating it on first use."""
    global _default_pool

    with _default_lock:
        if _default_pool is None or _default_pool.is_shutdown:
            _default_pool = SchedulerPool(NUM_PLAYER_THREADS)
        return _default_pool


def after(
    delay_ms: float,
    callback: Callable[[], object],
    pool: Optional[SchedulerPool] = None,
    reference: Optional[float] = None,
) -> ScheduledTask:
    """Schedule callback on pool, or on the process-wide pool."""
    return (pool or default_scheduler()).after(delay_ms, callback, reference)
