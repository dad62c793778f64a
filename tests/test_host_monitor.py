import asyncio
import logging
from datetime import timedelta

import pytest

from application.services.monitor import HostMonitor
from config.monitor_config import MonitorConfig
from domain.enums import Transition


def _assert_up_hosts_have_no_failures(monitor: HostMonitor) -> None:
    for state in monitor.registry.snapshot():
        if state.up:
            assert state.fail_count == 0, state


@pytest.mark.asyncio
async def test_one_cycle_marks_only_the_unreachable_host_down(monitor, prober, notifier):
    prober.results = {"a.test": False, "b.test": True}

    evaluations = await monitor.check_hosts()

    a, b = monitor.registry.get("a.test"), monitor.registry.get("b.test")
    assert (a.up, a.fail_count) == (False, 1)
    assert (b.up, b.fail_count) == (True, 0)
    assert notifier.subjects == ["CRITICAL: Host a.test is DOWN"]
    assert evaluations["a.test"].transition is Transition.WENT_DOWN
    assert evaluations["b.test"].transition is Transition.STILL_UP
    _assert_up_hosts_have_no_failures(monitor)


@pytest.mark.asyncio
async def test_probe_uses_configured_port_timeout_and_retries(logger, reporter, clock, prober):
    config = MonitorConfig.from_mapping(
        {"hosts": "a.test", "tcp.port": "443", "tcp.timeout.ms": "750", "tcp.retries": "5"}
    )
    monitor = HostMonitor(config, prober, reporter, logger, clock=clock)

    await monitor.check_hosts()

    assert prober.calls == [("a.test", 443, 750, 5)]


@pytest.mark.asyncio
async def test_three_down_cycles_alert_only_on_the_first(monitor, prober, notifier, clock):
    prober.results = {"a.test": False}

    for _ in range(3):
        await monitor.check_hosts()
        clock.advance(minutes=10)

    assert monitor.registry.get("a.test").fail_count == 3
    assert notifier.subjects == ["CRITICAL: Host a.test is DOWN"]


@pytest.mark.asyncio
async def test_still_down_past_the_window_realerts_once(monitor, prober, notifier, clock):
    prober.results = {"a.test": False}

    for _ in range(5):
        await monitor.check_hosts()
        clock.advance(minutes=10)

    # Alerts at t=0 and t=40 minutes.
    assert notifier.subjects.count("CRITICAL: Host a.test is DOWN") == 2
    assert monitor.registry.get("a.test").fail_count == 5


@pytest.mark.asyncio
async def test_recovery_alert_is_never_throttled(monitor, prober, notifier, clock):
    for reachable in (False, True, False, True):
        prober.results = {"a.test": reachable}
        await monitor.check_hosts()
        clock.advance(minutes=1)
        _assert_up_hosts_have_no_failures(monitor)

    assert notifier.subjects == [
        "CRITICAL: Host a.test is DOWN",
        "RECOVERED: Host a.test is back online",
        "RECOVERED: Host a.test is back online",
    ]
    assert "Total failures: 1" in notifier.sent[1][1]


@pytest.mark.asyncio
async def test_failure_on_one_host_does_not_abort_the_cycle(monitor, prober, notifier, caplog):
    prober.explode = {"a.test"}
    prober.results = {"b.test": False}

    evaluations = await monitor.check_hosts()

    assert set(evaluations) == {"b.test"}
    assert monitor.registry.get("b.test").up is False
    assert monitor.registry.get("a.test").up is True
    assert notifier.subjects == ["CRITICAL: Host b.test is DOWN"]
    assert "host-check-failed" in caplog.text


@pytest.mark.asyncio
async def test_notification_failure_does_not_block_other_hosts(monitor, prober, notifier):
    notifier.ok = False
    prober.results = {"a.test": False, "b.test": False}

    await monitor.check_hosts()

    assert sorted(notifier.subjects) == ["CRITICAL: Host a.test is DOWN", "CRITICAL: Host b.test is DOWN"]
    assert all(not s.up for s in monitor.registry.snapshot())


@pytest.mark.asyncio
async def test_report_summarises_then_resets_fail_counts(monitor, prober, notifier, clock):
    prober.results = {"a.test": False, "b.test": False}
    for _ in range(5):
        await monitor.check_hosts()
        clock.advance(minutes=10)
    prober.results = {"a.test": True, "b.test": False}
    await monitor.check_hosts()
    await monitor.registry.increment_fail("a.test")
    await monitor.registry.increment_fail("a.test")
    assert [(s.up, s.fail_count) for s in monitor.registry.snapshot()] == [(True, 2), (False, 6)]

    report = await monitor.send_report()

    assert "Total: 2, UP: 1, DOWN: 1" in report.body
    assert "a.test: UP - Failures in last 24h: 2" in report.body
    assert "b.test: DOWN - Current failure count: 6" in report.body
    assert notifier.sent[-1][0] == report.subject
    assert [(s.up, s.fail_count) for s in monitor.registry.snapshot()] == [(True, 0), (False, 0)]


@pytest.mark.asyncio
async def test_report_resets_counts_even_when_delivery_fails(monitor, prober, notifier):
    prober.results = {"a.test": False}
    await monitor.check_hosts()
    notifier.ok = False

    await monitor.send_report()

    assert monitor.registry.get("a.test").fail_count == 0
    assert monitor.registry.get("a.test").up is False


@pytest.mark.asyncio
async def test_report_resets_counts_when_notifier_raises_unexpectedly(monitor, prober, notifier):
    prober.results = {"a.test": False}
    await monitor.check_hosts()
    assert monitor.registry.get("a.test").fail_count == 1
    notifier.fail_with = RuntimeError("transport bug")

    report = await monitor.send_report()

    assert report.subject.startswith("Daily Host Status Report")
    assert monitor.registry.get("a.test").fail_count == 0
    assert monitor.registry.get("a.test").up is False


@pytest.mark.asyncio
async def test_simulate_down_alerts_even_inside_the_window(monitor, prober, notifier, clock):
    prober.results = {"a.test": False}
    await monitor.check_hosts()
    prober.results = {"a.test": True}
    await monitor.check_hosts()
    clock.advance(minutes=1)

    evaluation = await monitor.simulate_down("a.test")

    assert evaluation.transition is Transition.FORCED_DOWN
    assert monitor.registry.get("a.test").up is False
    assert notifier.subjects[-1] == "CRITICAL: Host a.test is DOWN"
    assert len(notifier.subjects) == 3


@pytest.mark.asyncio
async def test_simulate_down_on_unknown_host_is_a_logged_no_op(monitor, notifier, caplog):
    before = monitor.registry.snapshot()

    assert await monitor.simulate_down("ghost.test") is None

    assert monitor.registry.snapshot() == before
    assert notifier.sent == []
    assert any(
        r.levelno == logging.WARNING and r.getMessage() == "simulate-down-unknown-host" for r in caplog.records
    )


@pytest.mark.asyncio
async def test_next_failure_after_simulated_down_respects_the_window(monitor, prober, notifier, clock):
    await monitor.simulate_down("a.test")
    clock.advance(minutes=10)
    prober.results = {"a.test": False}

    evaluation = await monitor.check_host("a.test")

    assert evaluation.transition is Transition.STILL_DOWN
    assert evaluation.alert is None
    assert len(notifier.sent) == 1


@pytest.mark.asyncio
async def test_start_schedules_immediate_check_and_stop_cancels(monitor, prober):
    monitor.start()
    try:
        for _ in range(50):
            if len(prober.calls) >= 2:
                break
            await asyncio.sleep(0.01)
        assert {c[0] for c in prober.calls} == {"a.test", "b.test"}
        assert set(monitor.scheduler.jobs) == {"host-check", "daily-report"}
        report_job = monitor.scheduler.jobs["daily-report"]
        assert timedelta(0) <= report_job.initial_delay <= timedelta(days=1)
    finally:
        await monitor.stop()
    assert not monitor.scheduler.running


def test_empty_host_list_is_a_warning(logger, reporter, prober, caplog):
    monitor = HostMonitor(MonitorConfig(), prober, reporter, logger)

    assert len(monitor.registry) == 0
    assert "no-hosts-configured" in caplog.text
