from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from application.services.monitor import HostMonitor, Reporter
from config.monitor_config import MonitorConfig
from core.logging import get_logger
from domain.interfaces import INotifier, IProber

START = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeProber(IProber):
    """Reachability per host; unknown hosts are reachable."""

    def __init__(self, results: Optional[Dict[str, bool]] = None) -> None:
        self.results: Dict[str, bool] = dict(results or {})
        self.calls: List[Tuple[str, int, int, int]] = []
        self.explode: set = set()

    async def probe(self, host: str, port: int, timeout_ms: int, retries: int) -> bool:
        self.calls.append((host, port, timeout_ms, retries))
        if host in self.explode:
            raise RuntimeError(f"probe blew up for {host}")
        return self.results.get(host, True)


class FakeNotifier(INotifier):
    def __init__(self, *, ok: bool = True) -> None:
        self.ok = ok
        self.sent: List[Tuple[str, str, List[str]]] = []
        self.fail_with: Optional[BaseException] = None
        self.hang = False

    async def send(self, subject: str, body: str, recipients: Sequence[str]) -> bool:
        if self.hang:
            await asyncio.sleep(3600)
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((subject, body, list(recipients)))
        return self.ok

    @property
    def subjects(self) -> List[str]:
        return [s for s, _, _ in self.sent]


@pytest.fixture
def logger():
    return get_logger("tests", service="test")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def prober() -> FakeProber:
    return FakeProber()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def config() -> MonitorConfig:
    return MonitorConfig.from_mapping({"hosts": "a.test,b.test", "alert.throttle.minutes": "30"})


@pytest.fixture
def reporter(notifier, logger) -> Reporter:
    return Reporter(notifier, ["ops@example.com"], logger, timeout_s=0.2)


@pytest.fixture
def monitor(config, prober, reporter, logger, clock) -> HostMonitor:
    return HostMonitor(config, prober, reporter, logger, clock=clock)

