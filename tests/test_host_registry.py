import asyncio

import pytest

from application.services.monitor import Evaluation, HostRegistry
from domain.entities import HostState
from domain.enums import Transition
from domain.exceptions import UnknownHostError

from conftest import START


def test_registry_starts_every_host_up_and_collapses_duplicates():
    registry = HostRegistry(["a.test", "b.test", "a.test"])

    assert registry.hosts == ("a.test", "b.test")
    assert len(registry) == 2
    for state in registry.snapshot():
        assert state.up is True
        assert state.fail_count == 0
        assert state.last_alert_at is None


def test_unknown_host_raises():
    registry = HostRegistry(["a.test"])

    assert "nope.test" not in registry
    with pytest.raises(UnknownHostError) as excinfo:
        registry.get("nope.test")
    assert isinstance(excinfo.value, KeyError)
    assert "nope.test" in str(excinfo.value)


@pytest.mark.asyncio
async def test_single_field_mutations():
    registry = HostRegistry(["a.test"])

    await registry.set_up("a.test", False)
    assert await registry.increment_fail("a.test") == 1
    assert await registry.increment_fail("a.test") == 2
    await registry.record_alert_time("a.test", START)

    state = registry.get("a.test")
    assert state == HostState("a.test", up=False, fail_count=2, last_alert_at=START)

    await registry.reset_fail("a.test")
    assert registry.get("a.test").fail_count == 0
    assert registry.get("a.test").up is False


@pytest.mark.asyncio
async def test_mutating_unknown_host_raises():
    registry = HostRegistry(["a.test"])

    with pytest.raises(UnknownHostError):
        await registry.increment_fail("ghost.test")


@pytest.mark.asyncio
async def test_apply_stores_evaluated_state():
    registry = HostRegistry(["a.test"])

    def go_down(state: HostState) -> Evaluation:
        return Evaluation(Transition.WENT_DOWN, previous=state, state=state.evolve(up=False, fail_count=1))

    result = await registry.apply("a.test", go_down)

    assert result.previous.up is True
    assert registry.get("a.test") == result.state


@pytest.mark.asyncio
async def test_concurrent_increments_are_not_lost():
    registry = HostRegistry(["a.test", "b.test"])

    await asyncio.gather(*(registry.increment_fail(h) for h in ["a.test", "b.test"] * 50))

    assert registry.get("a.test").fail_count == 50
    assert registry.get("b.test").fail_count == 50


@pytest.mark.asyncio
async def test_reset_all_fail_counts_keeps_status():
    registry = HostRegistry(["a.test", "b.test"])
    await registry.set_up("b.test", False)
    await registry.increment_fail("b.test")

    await registry.reset_all_fail_counts()

    assert [s.fail_count for s in registry.snapshot()] == [0, 0]
    assert [s.up for s in registry.snapshot()] == [True, False]
