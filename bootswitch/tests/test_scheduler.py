import asyncio

from bootswitch.scheduler import AsyncioScheduler, STOP


def test_repeating_callback_runs_until_stop():
    calls = []

    async def scenario():
        scheduler = AsyncioScheduler()

        def callback():
            calls.append(1)
            return STOP if len(calls) == 3 else None

        scheduler.schedule_repeating(0.01, callback)
        await asyncio.sleep(0.2)
        return scheduler.active_count

    assert asyncio.run(scenario()) == 0
    assert len(calls) == 3


def test_cancel_prevents_callback():
    calls = []

    async def scenario():
        scheduler = AsyncioScheduler()
        handle = scheduler.schedule_once(0.05, lambda: calls.append(1))
        scheduler.cancel(handle)
        scheduler.cancel(handle)
        await asyncio.sleep(0.1)
        return scheduler.active_count

    assert asyncio.run(scenario()) == 0
    assert calls == []


def test_single_shot_runs_once():
    calls = []

    async def scenario():
        scheduler = AsyncioScheduler()
        scheduler.schedule_once(0.01, lambda: calls.append(1) or True)
        await asyncio.sleep(0.1)
        return scheduler.active_count

    assert asyncio.run(scenario()) == 0
    assert calls == [1]


def test_failing_callback_is_removed(caplog):
    calls = []

    async def scenario():
        scheduler = AsyncioScheduler()

        def callback():
            calls.append(1)
            raise RuntimeError("boom")

        scheduler.schedule_repeating(0.01, callback)
        await asyncio.sleep(0.1)
        return scheduler.active_count

    assert asyncio.run(scenario()) == 0
    assert calls == [1]
    assert "boom" in caplog.text


def test_cancel_all():
    calls = []

    async def scenario():
        scheduler = AsyncioScheduler()
        scheduler.schedule_repeating(0.01, lambda: calls.append(1))
        scheduler.schedule_once(0.01, lambda: calls.append(2))
        assert scheduler.active_count == 2
        scheduler.cancel_all()
        await asyncio.sleep(0.05)
        return scheduler.active_count

    assert asyncio.run(scenario()) == 0
    assert calls == []
