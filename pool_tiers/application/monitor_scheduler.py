from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
import logging
from threading import Event, Lock, Thread
import time
from typing import Callable

from pool_tiers.application.dto.pool_tier import MonitorCycleReport
from pool_tiers.application.use_cases.run_monitor_cycle import RunMonitorCycleUseCase


logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING_CYCLE = "running_cycle"


def next_deadline(previous: float, *, now: float, interval_seconds: float) -> tuple[float, int]:
    """Return the next fixed-rate deadline after ``previous`` and how many ticks were missed."""
    deadline = previous + interval_seconds
    if now <= deadline:
        return deadline, 0
    missed = int((now - deadline) // interval_seconds) + 1
    return deadline + missed * interval_seconds, missed


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MonitorScheduler:
    """Runs the monitor cycle on a fixed interval in a background thread.

    The first cycle starts as soon as the thread does. A tick that fires while a
    cycle is still running is dropped, and a failed cycle never stops the loop.
    """

    def __init__(
        self,
        *,
        cycle_use_case: RunMonitorCycleUseCase,
        interval_seconds: float,
        monotonic: Callable[[], float] = time.monotonic,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive.")
        self._cycle_use_case = cycle_use_case
        self._interval_seconds = interval_seconds
        self._monotonic = monotonic
        self._clock = clock
        self._cycle_lock = Lock()
        self._skip_lock = Lock()
        self._stop_event = Event()
        self._thread: Thread | None = None
        self._state = SchedulerState.IDLE
        self._last_cycle: MonitorCycleReport | None = None
        # cycles_run and cycles_failed only change while _cycle_lock is held.
        self.cycles_run = 0
        self.cycles_failed = 0
        self.ticks_skipped = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def last_cycle(self) -> MonitorCycleReport | None:
        return self._last_cycle

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> bool:
        if not self._cycle_lock.acquire(blocking=False):
            self._count_skipped(1)
            logger.info("monitor_scheduler: tick_skipped reason=cycle_in_flight")
            return False
        try:
            self._state = SchedulerState.RUNNING_CYCLE
            self._run_cycle()
            return True
        finally:
            self._state = SchedulerState.IDLE
            self._cycle_lock.release()

    def _count_skipped(self, count: int) -> None:
        with self._skip_lock:
            self.ticks_skipped += count

    def _run_cycle(self) -> None:
        started_at = self._clock()
        started = self._monotonic()
        try:
            output = self._cycle_use_case.execute()
        except Exception as exc:  # noqa: BLE001
            self.cycles_failed += 1
            logger.exception(
                "monitor_scheduler: cycle_failed elapsed_seconds=%.2f error=%s",
                self._monotonic() - started,
                exc,
            )
            self._last_cycle = MonitorCycleReport(
                started_at=started_at,
                finished_at=self._clock(),
                status="failed",
                error=str(exc),
            )
        else:
            logger.info(
                "monitor_scheduler: cycle_finished elapsed_seconds=%.2f pools=%s",
                self._monotonic() - started,
                output.stats.total,
            )
            self._last_cycle = MonitorCycleReport(
                started_at=started_at,
                finished_at=self._clock(),
                status="ok",
                stats=output.stats,
            )
        finally:
            self.cycles_run += 1

    def run_forever(self) -> None:
        logger.info(
            "monitor_scheduler: started interval_seconds=%s",
            self._interval_seconds,
        )
        deadline = self._monotonic()
        while not self._stop_event.is_set():
            self.tick()
            deadline, missed = next_deadline(
                deadline,
                now=self._monotonic(),
                interval_seconds=self._interval_seconds,
            )
            if missed:
                self._count_skipped(missed)
                logger.warning(
                    "monitor_scheduler: ticks_skipped count=%s reason=slow_cycle",
                    missed,
                )
            self._stop_event.wait(max(0.0, deadline - self._monotonic()))
        logger.info("monitor_scheduler: stopped")

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = Thread(target=self.run_forever, name="monitor-scheduler", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
