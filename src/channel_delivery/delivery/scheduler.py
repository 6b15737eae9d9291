"""
Module: scheduler.py
Description: Bounded background worker pool for deferred deliveries.

Jobs are submitted with a delay and run detached from whatever
submitted them. The delay is a loop timer, so no worker is held while
waiting; once the timer fires the job is queued and picked up by one of
a fixed number of worker tasks.

Submitting is fire-and-forget. There is no handle to cancel or await a
single job, and a job's failure is only visible in the logs.

Key Components:
- DeliveryScheduler: start(), submit(), join(), stop()
- Job: Zero-argument coroutine function

Dependencies: asyncio
Author: Channel Delivery Team
"""

import asyncio
from typing import Awaitable, Callable, List, Optional, Set

from channel_delivery.utils.logger import get_logger

logger = get_logger(__name__)

Job = Callable[[], Awaitable[None]]


class DeliveryScheduler:
    """
    Fixed-size pool of asyncio workers running delayed jobs.

    Attributes:
        worker_count: Number of worker tasks
    """

    def __init__(self, worker_count: int = 8):
        """
        Initialize the scheduler.

        Args:
            worker_count: Number of concurrent workers

        Raises:
            ValueError: If worker_count is not positive
        """
        if not isinstance(worker_count, int) or worker_count < 1:
            raise ValueError("worker_count must be a positive integer")

        self.worker_count = worker_count
        self._queue: Optional[asyncio.Queue] = None
        self._workers: List[asyncio.Task] = []
        self._timers: Set[asyncio.TimerHandle] = set()
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def running(self) -> bool:
        return bool(self._workers)

    @property
    def pending(self) -> int:
        """Jobs waiting for their delay to elapse."""
        return len(self._timers)

    def start(self) -> None:
        """Start the worker tasks on the running event loop."""
        if self.running:
            return

        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._workers = [
            asyncio.create_task(self._worker(index), name=f"delivery-worker-{index}")
            for index in range(self.worker_count)
        ]

        logger.info("Delivery scheduler started", worker_count=self.worker_count)

    def submit(self, job: Job, delay_seconds: float = 0) -> None:
        """
        Run a job on a worker after a delay.

        Args:
            job: Coroutine function to run
            delay_seconds: Seconds to wait before the job is queued

        Raises:
            RuntimeError: If the scheduler has not been started
            ValueError: If the delay is negative
        """
        if not self.running:
            raise RuntimeError("DeliveryScheduler is not running")
        if delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")

        handle = None

        def _release() -> None:
            self._timers.discard(handle)
            self._queue.put_nowait(job)

        handle = self._loop.call_later(delay_seconds, _release)
        self._timers.add(handle)

    async def join(self) -> None:
        """Wait until no job is pending or queued and all workers are idle."""
        while True:
            while self._timers:
                await asyncio.sleep(0.01)
            await self._queue.join()
            if not self._timers:
                return

    async def stop(self) -> None:
        """
        Drop pending jobs and stop the workers.

        Jobs still waiting for their delay are discarded; they are not
        persisted anywhere.
        """
        if not self.running:
            return

        dropped = len(self._timers) + self._queue.qsize()
        for handle in self._timers:
            handle.cancel()
        self._timers.clear()

        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []

        logger.info("Delivery scheduler stopped", dropped_jobs=dropped)

    async def _worker(self, index: int) -> None:
        while True:
            job = await self._queue.get()
            try:
                await job()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # Nobody is left to receive the error
                logger.error(
                    "Deferred job failed",
                    worker=index,
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True
                )
            finally:
                self._queue.task_done()
