"""
Deferred continuations for the wager engine.

The opponent's "typing" pause and the roll/spin/flip animation are
presentation delays. The engine only needs them to run later, in order, on
the same thread as everything else, so it talks to a small scheduler
interface with two implementations:

- ManualScheduler: queues callbacks until `run_pending()` is called.
- AsyncScheduler: APScheduler's AsyncIOScheduler with one-shot date jobs,
  run as coroutines on the event loop.
"""

import itertools
import uuid
from collections import deque
from datetime import datetime, timedelta, timezone
from typing import Callable, Deque, Optional, Protocol, Tuple

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from shadowbets.core.logger import get_logger

logger = get_logger("scheduler")


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> str:
        ...

    def cancel(self, job_id: str) -> None:
        ...

    def start(self) -> None:
        ...

    def shutdown(self) -> None:
        ...


class ManualScheduler:
    """Runs deferred callbacks only when told to. Delays are recorded, not waited on."""

    def __init__(self):
        self._queue: Deque[Tuple[str, float, Callable[[], None]]] = deque()
        self._ids = itertools.count(1)

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def delays(self) -> list:
        return [delay for _, delay, _ in self._queue]

    def call_later(self, delay: float, callback: Callable[[], None]) -> str:
        job_id = f"job-{next(self._ids)}"
        self._queue.append((job_id, delay, callback))
        return job_id

    def cancel(self, job_id: str) -> None:
        self._queue = deque(job for job in self._queue if job[0] != job_id)

    def run_next(self) -> bool:
        if not self._queue:
            return False
        _, _, callback = self._queue.popleft()
        callback()
        return True

    def run_pending(self, limit: int = 1000) -> int:
        """Run queued callbacks in FIFO order, including ones they schedule."""
        ran = 0
        while ran < limit and self.run_next():
            ran += 1
        return ran

    def start(self) -> None:
        pass

    def shutdown(self) -> None:
        self._queue.clear()


class AsyncScheduler:
    """One-shot jobs on the running asyncio loop via APScheduler."""

    def __init__(self, scheduler: Optional[AsyncIOScheduler] = None):
        self.scheduler = scheduler or AsyncIOScheduler(
            timezone=timezone.utc,
            job_defaults={"misfire_grace_time": None, "coalesce": False},
        )

    def call_later(self, delay: float, callback: Callable[[], None]) -> str:
        job_id = uuid.uuid4().hex

        # Coroutine jobs are run directly on the event loop, not in a worker thread
        async def run():
            callback()

        self.scheduler.add_job(
            run,
            DateTrigger(run_date=datetime.now(timezone.utc) + timedelta(seconds=delay)),
            id=job_id,
        )
        return job_id

    def cancel(self, job_id: str) -> None:
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            pass  # already ran

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Scheduler started")

    def shutdown(self) -> None:
        try:
            if self.scheduler.running:
                self.scheduler.shutdown(wait=False)
                logger.info("Scheduler shutdown")
        except RuntimeError as e:
            logger.warning(f"Scheduler shutdown failed: {e}")
