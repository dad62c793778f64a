from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Awaitable, Callable, Dict, List

from core.logging.logger import StructuredLogger

Job = Callable[[], Awaitable[object]]


def initial_report_delay(report_time: time, now: datetime) -> timedelta:
    """Time until the next occurrence of ``report_time``.

    Today if that time has not passed yet (exactly now counts as today),
    otherwise the same time tomorrow.
    """
    next_run = now.replace(hour=report_time.hour, minute=report_time.minute, second=0, microsecond=0)
    if now > next_run:
        next_run += timedelta(days=1)
    return next_run - now


@dataclass
class PeriodicJob:
    name: str
    action: Job
    interval: timedelta
    initial_delay: timedelta = timedelta(0)
    runs: int = 0
    skipped: int = 0


class Scheduler:
    """Runs named jobs at a fixed rate, one asyncio task per job.

    A job's task awaits each run before sleeping to the next slot, so a job
    never overlaps itself. Slots missed during a long run are skipped, not
    queued. Distinct jobs run independently of each other.
    """

    def __init__(self, logger: StructuredLogger) -> None:
        self.logger = logger
        self._jobs: Dict[str, PeriodicJob] = {}
        self._tasks: List[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    @property
    def jobs(self) -> Dict[str, PeriodicJob]:
        return dict(self._jobs)

    def add_job(self, name: str, action: Job, *, interval: timedelta, initial_delay: timedelta = timedelta(0)) -> PeriodicJob:
        if interval <= timedelta(0):
            raise ValueError(f"interval for {name} must be positive")
        if name in self._jobs:
            raise ValueError(f"job already scheduled: {name}")
        job = PeriodicJob(name=name, action=action, interval=interval, initial_delay=max(initial_delay, timedelta(0)))
        self._jobs[name] = job
        if self._tasks:
            self._tasks.append(asyncio.create_task(self._run(job), name=f"scheduler:{name}"))
        return job

    def start(self) -> None:
        if self._tasks:
            return
        for job in self._jobs.values():
            self._tasks.append(asyncio.create_task(self._run(job), name=f"scheduler:{job.name}"))
            self.logger.info(
                lambda: "job-scheduled",
                extra={
                    "job": job.name,
                    "initial_delay_s": int(job.initial_delay.total_seconds()),
                    "interval_s": int(job.interval.total_seconds()),
                },
            )

    async def stop(self) -> None:
        tasks, self._tasks = self._tasks, []
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _run(self, job: PeriodicJob) -> None:
        loop = asyncio.get_running_loop()
        interval_s = job.interval.total_seconds()
        next_run = loop.time() + job.initial_delay.total_seconds()
        while True:
            await asyncio.sleep(max(0.0, next_run - loop.time()))
            try:
                await job.action()
                job.runs += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.logger.exception(lambda: "job-failed", extra={"job": job.name, "error": str(e)})
            next_run += interval_s
            now = loop.time()
            if now > next_run:
                missed = int((now - next_run) // interval_s) + 1
                job.skipped += missed
                next_run += missed * interval_s
                self.logger.warning(lambda: "job-overrun", extra={"job": job.name, "skipped": missed})
