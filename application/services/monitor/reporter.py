from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Iterable, List, Sequence

from core.logging.logger import StructuredLogger
from domain.entities import HostState, Notification
from domain.enums import AlertKind
from domain.exceptions import NotificationError
from domain.interfaces import INotifier


def _stamp(now: datetime) -> str:
    return now.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


class Reporter:
    """Renders alert and summary messages and hands them to the notifier."""

    def __init__(
        self,
        notifier: INotifier,
        recipients: Sequence[str],
        logger: StructuredLogger,
        *,
        timeout_s: float = 30.0,
        report_period: str = "24h",
    ) -> None:
        self.notifier = notifier
        self.recipients = list(recipients)
        self.logger = logger
        self.timeout_s = timeout_s
        self.report_period = report_period

    # ── Rendering ──────────────────────────────────────────────────────────

    def render_critical(self, state: HostState, now: datetime) -> Notification:
        body = "\n".join([
            f"Host Monitor Alert - {AlertKind.CRITICAL.label}",
            "",
            "The following host is currently unreachable:",
            f"Host: {state.host}",
            f"Time: {_stamp(now)}",
            f"Failure count: {state.fail_count}",
            "",
            "Please check the host immediately.",
            "",
        ])
        return Notification(
            kind=AlertKind.CRITICAL,
            subject=f"CRITICAL: Host {state.host} is DOWN",
            body=body,
            created_at=now,
            host=state.host,
        )

    def render_recovery(self, host: str, failures: int, now: datetime) -> Notification:
        """``failures`` is the length of the down streak that just ended."""
        body = "\n".join([
            f"Host Monitor Alert - {AlertKind.RECOVERY.label}",
            "",
            "The following host has recovered and is now reachable:",
            f"Host: {host}",
            f"Time: {_stamp(now)}",
            f"Total failures: {failures}",
            "",
        ])
        return Notification(
            kind=AlertKind.RECOVERY,
            subject=f"RECOVERED: Host {host} is back online",
            body=body,
            created_at=now,
            host=host,
        )

    def render_summary(self, states: Iterable[HostState], now: datetime) -> Notification:
        states = list(states)
        up = sum(1 for s in states if s.up)
        lines: List[str] = [
            "Host Monitor - Daily Status Report",
            "",
            f"Report Time: {_stamp(now)}",
            "",
            "Host Status Summary:",
            f"Total: {len(states)}, UP: {up}, DOWN: {len(states) - up}",
            "",
            "Detailed Status:",
        ]
        for s in states:
            if s.up:
                lines.append(f"{s.host}: {s.status} - Failures in last {self.report_period}: {s.fail_count}")
            else:
                lines.append(f"{s.host}: {s.status} - Current failure count: {s.fail_count}")
        lines += ["", "This is an automated report from Host Monitor.", ""]
        return Notification(
            kind=AlertKind.REPORT,
            subject=f"Daily Host Status Report - {now.date().isoformat()}",
            body="\n".join(lines),
            created_at=now,
        )

    # ── Delivery ───────────────────────────────────────────────────────────

    async def dispatch(self, notification: Notification) -> bool:
        """Send one message. Failures are logged and reported as False, never raised or retried."""
        extra = {"kind": notification.kind.value, "subject": notification.subject}
        try:
            ok = await asyncio.wait_for(
                self.notifier.send(notification.subject, notification.body, self.recipients),
                timeout=self.timeout_s,
            )
        except asyncio.TimeoutError:
            self.logger.error(lambda: "notification-timeout", extra={**extra, "timeout_s": self.timeout_s})
            return False
        except NotificationError as e:
            self.logger.error(lambda: "notification-failed", extra={**extra, "error": str(e)})
            return False
        except Exception as e:
            self.logger.exception(lambda: "notification-error", extra={**extra, "error": repr(e)})
            return False
        if not ok:
            self.logger.warning(lambda: "notification-rejected", extra=extra)
            return False
        self.logger.success(lambda: "notification-sent", extra=extra)
        return True
