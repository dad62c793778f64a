from __future__ import annotations

import asyncio
import itertools
from datetime import datetime
from typing import Callable, Dict, Optional

from config.monitor_config import MonitorConfig
from core.logging.context import log_context
from core.logging.logger import StructuredLogger
from domain.entities import Notification
from domain.enums import AlertKind, Transition
from domain.exceptions import UnknownHostError
from domain.interfaces import IProber
from .host_registry import HostRegistry
from .models import Evaluation
from .reporter import Reporter
from .scheduler import Scheduler, initial_report_delay
from .state_evaluator import StateEvaluator

Clock = Callable[[], datetime]

CHECK_JOB = "host-check"
REPORT_JOB = "daily-report"


def _local_now() -> datetime:
    return datetime.now().astimezone()


class HostMonitor:
    """Owns the registry and drives check cycles, reports, and manual triggers."""

    def __init__(
        self,
        config: MonitorConfig,
        prober: IProber,
        reporter: Reporter,
        logger: StructuredLogger,
        *,
        registry: Optional[HostRegistry] = None,
        clock: Clock = _local_now,
    ) -> None:
        self.config = config
        self.prober = prober
        self.reporter = reporter
        self.logger = logger
        self.registry = registry or HostRegistry(config.hosts)
        self.evaluator = StateEvaluator(config.alert_throttle)
        self.scheduler = Scheduler(logger)
        self.clock = clock
        self._cycles = itertools.count(1)
        if not len(self.registry):
            self.logger.warning(lambda: "no-hosts-configured")
        for host in self.registry:
            self.logger.info(lambda: "host-registered", extra={"host": host})

    # ── Scheduling ─────────────────────────────────────────────────────────

    def start(self) -> None:
        delay = initial_report_delay(self.config.report_time, self.clock())
        self.scheduler.add_job(CHECK_JOB, self.check_hosts, interval=self.config.check_interval)
        self.scheduler.add_job(REPORT_JOB, self.send_report, interval=self.config.report_interval, initial_delay=delay)
        self.scheduler.start()
        self.logger.info(
            lambda: "monitoring-started",
            extra={
                "hosts": len(self.registry),
                "check_interval_min": int(self.config.check_interval.total_seconds() // 60),
                "report_time": self.config.report_time.strftime("%H:%M"),
            },
        )

    async def stop(self) -> None:
        await self.scheduler.stop()
        self.logger.info(lambda: "monitoring-stopped")

    # ── Check cycle ────────────────────────────────────────────────────────

    async def check_hosts(self) -> Dict[str, Evaluation]:
        """Probe every host concurrently; one host's failure never affects another's."""
        hosts = self.registry.hosts
        with log_context(cycle=next(self._cycles)):
            self.logger.info(lambda: "check-cycle-start", extra={"hosts": len(hosts)})
            results = await asyncio.gather(*(self.check_host(h) for h in hosts), return_exceptions=True)
            evaluations: Dict[str, Evaluation] = {}
            for host, result in zip(hosts, results):
                if isinstance(result, BaseException):
                    if isinstance(result, asyncio.CancelledError):
                        raise result
                    self.logger.error(
                        lambda: "host-check-failed",
                        extra={"host": host, "error": repr(result)},
                        exc_info=(type(result), result, result.__traceback__),
                    )
                    continue
                evaluations[host] = result
            down = sum(1 for s in self.registry.snapshot() if not s.up)
            self.logger.info(lambda: "check-cycle-done", extra={"checked": len(evaluations), "down": down})
            return evaluations

    async def check_host(self, host: str) -> Evaluation:
        with log_context(host=host):
            reachable = await self.prober.probe(
                host, self.config.tcp_port, self.config.tcp_timeout_ms, self.config.tcp_retries
            )
            now = self.clock()
            evaluation = await self.registry.apply(host, lambda s: self.evaluator.evaluate(s, reachable, now))
            self._log_transition(evaluation)
            await self._alert(evaluation, now)
            return evaluation

    def _log_transition(self, evaluation: Evaluation) -> None:
        state = evaluation.state
        if evaluation.transition is Transition.WENT_DOWN:
            self.logger.warning(lambda: "host-down", extra={"fail_count": state.fail_count})
        elif evaluation.transition is Transition.STILL_DOWN:
            self.logger.warning(lambda: "host-still-down", extra={"fail_count": state.fail_count})
        elif evaluation.transition is Transition.RECOVERED:
            self.logger.success(lambda: "host-recovered", extra={"failures": evaluation.previous.fail_count})
        else:
            self.logger.debug(lambda: "host-up")
        if evaluation.alert is None and not state.up:
            self.logger.info(lambda: "alert-throttled", extra={"last_alert_at": state.last_alert_at})

    async def _alert(self, evaluation: Evaluation, now: datetime) -> None:
        if evaluation.alert is AlertKind.CRITICAL:
            await self.reporter.dispatch(self.reporter.render_critical(evaluation.state, now))
        elif evaluation.alert is AlertKind.RECOVERY:
            await self.reporter.dispatch(
                self.reporter.render_recovery(evaluation.host, evaluation.previous.fail_count, now)
            )

    # ── Report cycle ───────────────────────────────────────────────────────

    async def send_report(self) -> Notification:
        """Send the summary, then start a new reporting period by zeroing fail counts."""
        now = self.clock()
        self.logger.info(lambda: "report-start")
        notification = self.reporter.render_summary(self.registry.snapshot(), now)
        try:
            sent = await self.reporter.dispatch(notification)
        finally:
            await self.registry.reset_all_fail_counts()
        self.logger.info(lambda: "report-done", extra={"sent": sent})
        return notification

    # ── Manual triggers ────────────────────────────────────────────────────

    async def simulate_down(self, host: str) -> Optional[Evaluation]:
        """Force a host DOWN and alert, bypassing the throttle. Unknown hosts are a no-op."""
        now = self.clock()
        with log_context(host=host):
            try:
                evaluation = await self.registry.apply(host, lambda s: self.evaluator.force_down(s, now))
            except UnknownHostError:
                self.logger.warning(lambda: "simulate-down-unknown-host")
                return None
            self.logger.info(lambda: "host-simulated-down")
            await self._alert(evaluation, now)
            return evaluation
