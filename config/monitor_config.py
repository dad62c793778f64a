"""Typed, validated monitor configuration."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Mapping, Optional, Tuple

from domain.exceptions import ConfigurationError


def _int(mapping: Mapping[str, str], key: str, default: int, *, minimum: int) -> int:
    raw = mapping.get(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}", key=key) from None
    if value < minimum:
        raise ConfigurationError(f"{key} must be >= {minimum}, got {value}", key=key)
    return value


def split_list(raw: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated list, dropping blanks and duplicates but keeping order."""
    if not raw:
        return ()
    return tuple(dict.fromkeys(h.strip() for h in raw.split(",") if h.strip()))


def parse_report_time(raw: Optional[str]) -> time:
    """Parse a wall-clock ``HH:mm`` value."""
    value = (raw or "00:00").strip()
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError:
        raise ConfigurationError(f"report.time must be HH:mm, got {value!r}", key="report.time") from None


@dataclass(frozen=True, slots=True)
class MonitorConfig:
    """Settings consumed by the monitoring core."""

    hosts: Tuple[str, ...] = ()
    tcp_port: int = 80
    tcp_timeout_ms: int = 2000
    tcp_retries: int = 3
    alert_throttle: timedelta = timedelta(minutes=30)
    report_time: time = time(0, 0)
    check_interval: timedelta = timedelta(minutes=10)
    report_interval: timedelta = timedelta(hours=24)
    notify_timeout_s: float = 30.0

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "MonitorConfig":
        """Build and validate the config from dotted keys (``tcp.port`` ...)."""
        port = _int(mapping, "tcp.port", 80, minimum=1)
        if port > 65535:
            raise ConfigurationError(f"tcp.port must be <= 65535, got {port}", key="tcp.port")
        return cls(
            hosts=split_list(mapping.get("hosts")),
            tcp_port=port,
            tcp_timeout_ms=_int(mapping, "tcp.timeout.ms", 2000, minimum=1),
            tcp_retries=_int(mapping, "tcp.retries", 3, minimum=1),
            alert_throttle=timedelta(minutes=_int(mapping, "alert.throttle.minutes", 30, minimum=0)),
            report_time=parse_report_time(mapping.get("report.time")),
            check_interval=timedelta(minutes=_int(mapping, "check.interval.minutes", 10, minimum=1)),
            report_interval=timedelta(hours=_int(mapping, "report.interval.hours", 24, minimum=1)),
            notify_timeout_s=float(_int(mapping, "notify.timeout.seconds", 30, minimum=1)),
        )

    @property
    def report_period_label(self) -> str:
        hours = int(self.report_interval.total_seconds() // 3600)
        return f"{hours}h"
