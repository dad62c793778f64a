from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Callable, Dict, Iterable, Iterator, List, Tuple

from domain.entities import HostState
from domain.exceptions import UnknownHostError
from .models import Evaluation


class _Entry:
    __slots__ = ("state", "lock")

    def __init__(self, host: str) -> None:
        self.state = HostState(host=host)
        self.lock = asyncio.Lock()


class HostRegistry:
    """Per-host state for the fixed set of monitored hosts.

    Every mutation of a host runs under that host's own lock; hosts never
    block each other. States are immutable values, so any read returns a
    consistent tuple for that host.
    """

    def __init__(self, hosts: Iterable[str]) -> None:
        self._entries: Dict[str, _Entry] = {}
        for host in hosts:
            if host not in self._entries:
                self._entries[host] = _Entry(host)

    @property
    def hosts(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def __contains__(self, host: object) -> bool:
        return host in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def _entry(self, host: str) -> _Entry:
        try:
            return self._entries[host]
        except KeyError:
            raise UnknownHostError(host) from None

    def get(self, host: str) -> HostState:
        """Current state of one host."""
        return self._entry(host).state

    def snapshot(self) -> List[HostState]:
        """Current states in configuration order; each host is read independently."""
        return [entry.state for entry in self._entries.values()]

    async def apply(self, host: str, evaluate: Callable[[HostState], Evaluation]) -> Evaluation:
        """Run a read-decide-write step atomically for one host and store its result."""
        entry = self._entry(host)
        async with entry.lock:
            evaluation = evaluate(entry.state)
            entry.state = evaluation.state
            return evaluation

    async def _update(self, host: str, **changes) -> HostState:
        entry = self._entry(host)
        async with entry.lock:
            entry.state = entry.state.evolve(**changes)
            return entry.state

    async def set_up(self, host: str, up: bool) -> None:
        await self._update(host, up=up)

    async def increment_fail(self, host: str) -> int:
        entry = self._entry(host)
        async with entry.lock:
            entry.state = entry.state.evolve(fail_count=entry.state.fail_count + 1)
            return entry.state.fail_count

    async def reset_fail(self, host: str) -> None:
        await self._update(host, fail_count=0)

    async def record_alert_time(self, host: str, now: datetime) -> None:
        await self._update(host, last_alert_at=now)

    async def reset_all_fail_counts(self) -> None:
        for host in self._entries:
            await self.reset_fail(host)
