import asyncio
import logging
from datetime import datetime

from personnel_directory.core.scheduler import DailyTrigger, seconds_until


def test_seconds_until_later_today():
    assert seconds_until(9, 0, datetime(2026, 6, 15, 8, 30)) == 1800


def test_seconds_until_rolls_over_to_tomorrow():
    assert seconds_until(9, 0, datetime(2026, 6, 15, 9, 0)) == 24 * 3600
    assert seconds_until(9, 0, datetime(2026, 6, 15, 10, 0)) == 23 * 3600


def test_run_once_returns_job_result():
    trigger = DailyTrigger(9, 0, lambda: "done")
    assert asyncio.run(trigger.run_once()) == "done"


def test_run_once_logs_job_failure(caplog):
    def broken():
        raise RuntimeError("gateway down")

    trigger = DailyTrigger(9, 0, broken, name="birthday_messages")
    with caplog.at_level(logging.ERROR):
        assert asyncio.run(trigger.run_once()) is None
    assert "birthday_messages failed" in caplog.text


def test_start_and_stop():
    calls = []
    trigger = DailyTrigger(9, 0, lambda: calls.append(1), clock=lambda: datetime(2026, 6, 15, 9, 30))

    async def scenario():
        trigger.start()
        assert trigger.running
        trigger.start()  # second start is a no-op
        await trigger.stop()
        assert not trigger.running

    asyncio.run(scenario())
    assert calls == []
