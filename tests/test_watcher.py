import asyncio
import threading
import time

import pytest

from amanice.catalog.watcher import OverrideChangeWatcher
from amanice.integrations.response_wrappers import normalize_product


def test_poll_fires_only_when_fingerprint_changes(local_store):
    calls = []
    watcher = OverrideChangeWatcher(local_store, on_change=lambda: calls.append(1))

    assert watcher.poll_once() is False
    local_store.add_tombstone("101")
    assert watcher.poll_once() is True
    assert watcher.poll_once() is False
    assert len(calls) == 1


def test_notify_and_poll_may_both_fire(local_store):
    calls = []
    watcher = OverrideChangeWatcher(local_store, on_change=lambda: calls.append(1))

    watcher.notify()
    local_store.add_product(normalize_product({"id": "admin-1", "type": "Cap", "category": "men"}))
    watcher.poll_once()

    assert len(calls) == 2


async def _wait_for(condition, timeout=1.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not condition():
        assert loop.time() < deadline, "condition not met in time"
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_watch_loop_polls_until_stopped(local_store):
    calls = []
    watcher = OverrideChangeWatcher(local_store, on_change=lambda: calls.append(1), interval_seconds=0.01)
    stop = asyncio.Event()

    task = asyncio.create_task(watcher.watch(stop))
    local_store.add_tombstone("103")
    await _wait_for(lambda: calls)

    stop.set()
    await asyncio.wait_for(task, timeout=1.0)
    assert task.done()
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_slow_callback_does_not_block_the_event_loop(local_store):
    started = threading.Event()

    def slow_refresh():
        started.set()
        time.sleep(0.5)

    local_store.add_tombstone("103")
    watcher = OverrideChangeWatcher(local_store, on_change=slow_refresh, interval_seconds=0.01)
    watcher._last = None
    stop = asyncio.Event()
    task = asyncio.create_task(watcher.watch(stop))

    await _wait_for(started.is_set)
    loop = asyncio.get_running_loop()
    before = loop.time()
    await asyncio.sleep(0.05)
    lag = loop.time() - before

    stop.set()
    await asyncio.wait_for(task, timeout=2.0)
    assert lag < 0.3


@pytest.mark.asyncio
async def test_failing_callback_keeps_the_loop_running(local_store):
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("remote down")

    watcher = OverrideChangeWatcher(local_store, on_change=flaky, interval_seconds=0.01)
    stop = asyncio.Event()
    task = asyncio.create_task(watcher.watch(stop))

    local_store.add_tombstone("101")
    await _wait_for(lambda: calls)
    local_store.add_tombstone("102")
    await _wait_for(lambda: len(calls) == 2)

    stop.set()
    await asyncio.wait_for(task, timeout=1.0)
