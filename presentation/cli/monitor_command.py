from __future__ import annotations

import argparse
import asyncio
from typing import Iterable, List, Optional, Tuple

from application.services.monitor import HostMonitor, Reporter, TcpProber
from config.monitor_config import MonitorConfig
from core.logging.logger import StructuredLogger, get_logger
from domain.interfaces import INotifier, IProber
from infrastructure.notifications import SendGridConfig, SendGridNotifier


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hostmonitor",
        description="Host Monitor - probes hosts over TCP and sends status alerts and reports",
        allow_abbrev=False,
        exit_on_error=False,
    )
    parser.add_argument("--check-now", action="store_true", help="Check all hosts immediately")
    parser.add_argument("--send-report", action="store_true", help="Send the daily report immediately")
    parser.add_argument(
        "--simulate-down",
        action="append",
        nargs="?",
        metavar="HOST",
        default=[],
        help="Simulate a host being down (repeatable)",
    )
    return parser


def _rejected_token(args: List[str], error: argparse.ArgumentError) -> Optional[str]:
    names = set((error.argument_name or "").split("/"))
    for token in args:
        if "=" in token and token.split("=", 1)[0] in names:
            return token
    return None


def parse_args(argv: Optional[Iterable[str]] = None) -> Tuple[argparse.Namespace, List[str]]:
    """Parse known options; unknown ones are returned instead of failing.

    Options are matched by their full name only. A flag given a value
    (``--check-now=yes``) is returned as unknown. ``--help`` prints usage
    and exits 0 from here.
    """
    args = list(argv or [])
    parser = build_parser()
    rejected: List[str] = []
    while True:
        try:
            options, unknown = parser.parse_known_args(args)
        except argparse.ArgumentError as e:
            token = _rejected_token(args, e)
            if token is None:
                raise
            args.remove(token)
            rejected.append(token)
            continue
        return options, rejected + unknown


async def run_manual_triggers(monitor: HostMonitor, options: argparse.Namespace, logger: StructuredLogger) -> None:
    """Run requested one-off actions in order: check, simulations, report."""
    if options.check_now:
        logger.info(lambda: "manual-check")
        await monitor.check_hosts()
    for host in options.simulate_down:
        if not host:
            logger.warning(lambda: "simulate-down-missing-host")
            continue
        logger.info(lambda: "manual-simulate-down", extra={"host": host})
        await monitor.simulate_down(host)
    if options.send_report:
        logger.info(lambda: "manual-report")
        await monitor.send_report()


class MonitorCommand:
    """Wires the monitor from validated configs and keeps it running."""

    def __init__(
        self,
        config: MonitorConfig,
        email: SendGridConfig,
        *,
        prober: Optional[IProber] = None,
        notifier: Optional[INotifier] = None,
    ) -> None:
        self.logger: StructuredLogger = get_logger(__name__, service="hostmonitor")
        self.config = config
        self.email = email
        self.prober = prober or TcpProber(get_logger(TcpProber.__module__, service="probe"))
        self.notifier = notifier

    def build_monitor(self, notifier: INotifier) -> HostMonitor:
        reporter = Reporter(
            notifier,
            self.email.recipients,
            get_logger(Reporter.__module__, service="notify"),
            timeout_s=self.config.notify_timeout_s,
            report_period=self.config.report_period_label,
        )
        return HostMonitor(self.config, self.prober, reporter, self.logger)

    async def run(self, options: argparse.Namespace, *, serve: bool = True) -> int:
        if self.notifier is not None:
            return await self._run(self.build_monitor(self.notifier), options, serve)
        async with SendGridNotifier(self.email) as notifier:
            return await self._run(self.build_monitor(notifier), options, serve)

    async def _run(self, monitor: HostMonitor, options: argparse.Namespace, serve: bool) -> int:
        if not serve:
            await run_manual_triggers(monitor, options, self.logger)
            return 0
        monitor.start()
        try:
            await run_manual_triggers(monitor, options, self.logger)
            await asyncio.Event().wait()
        finally:
            await monitor.stop()
        return 0
