"""Test cases for the watch loop."""

import asyncio
import os
import threading

import pytest

from devloop.watch.changes import ChangeSet
from devloop.watch.watcher import Watcher, WatchState
from helpers import CountingTrigger, touch


class TestWatcherPoll:
    """Test single diffing passes"""

    @pytest.mark.asyncio
    async def test_reports_modified_file(self, tmp_path):
        path = touch(tmp_path / "file", 1000.0)
        received = []

        watcher = Watcher(lambda: [path], received.append)
        await watcher.start()
        os.utime(path, (2000.0, 2000.0))

        changes = await watcher.poll()

        assert changes.modified == [path]
        assert received == [changes]
        assert watcher.state == WatchState.IDLE

    @pytest.mark.asyncio
    async def test_no_callback_without_changes(self, tmp_path):
        path = touch(tmp_path / "file", 1000.0)
        received = []

        watcher = Watcher(lambda: [path], received.append)
        await watcher.start()

        changes = await watcher.poll()

        assert changes == ChangeSet()
        assert received == []

    @pytest.mark.asyncio
    async def test_dependencies_listed_off_event_loop(self, tmp_path):
        path = touch(tmp_path / "file", 1000.0)
        threads = []

        def deps():
            threads.append(threading.get_ident())
            return [path]

        watcher = Watcher(deps, lambda changes: None)
        await watcher.start()
        await watcher.poll()

        assert len(threads) == 2
        assert threading.get_ident() not in threads

    @pytest.mark.asyncio
    async def test_dependencies_are_recomputed(self, tmp_path):
        first = touch(tmp_path / "first", 1000.0)
        deps = [first]
        received = []

        watcher = Watcher(lambda: list(deps), received.append)
        await watcher.start()

        second = touch(tmp_path / "second", 1000.0)
        deps.append(second)
        changes = await watcher.poll()

        assert changes.added == [second]

    @pytest.mark.asyncio
    async def test_failed_callback_still_advances_baseline(self, tmp_path):
        path = touch(tmp_path / "file", 1000.0)
        calls = []

        def on_change(changes):
            calls.append(changes)
            raise RuntimeError("rebuild failed")

        watcher = Watcher(lambda: [path], on_change)
        await watcher.start()
        os.utime(path, (2000.0, 2000.0))

        await watcher.poll()
        second = await watcher.poll()

        assert len(calls) == 1
        assert second == ChangeSet()

    @pytest.mark.asyncio
    async def test_async_callback_is_awaited(self, tmp_path):
        path = touch(tmp_path / "file", 1000.0)
        received = []

        async def on_change(changes):
            await asyncio.sleep(0)
            received.append(changes)

        watcher = Watcher(lambda: [path], on_change)
        await watcher.start()
        os.remove(path)

        await watcher.poll()

        assert received[0].deleted == [path]

    @pytest.mark.asyncio
    async def test_provider_error_keeps_baseline(self, tmp_path):
        path = touch(tmp_path / "file", 1000.0)
        fail = []
        received = []

        def deps():
            if fail:
                raise RuntimeError("cannot parse Dockerfile")
            return [path]

        watcher = Watcher(deps, received.append)
        await watcher.start()

        fail.append(True)
        assert await watcher.poll() == ChangeSet()
        assert watcher.last_snapshot == {path: 1000.0}

        fail.clear()
        os.utime(path, (2000.0, 2000.0))
        changes = await watcher.poll()

        assert changes.modified == [path]


class TestWatcherRun:
    """Test the tick loop"""

    @pytest.mark.asyncio
    async def test_runs_until_trigger_closes(self, tmp_path):
        path = touch(tmp_path / "file", 1000.0)
        received = []

        def before_tick(count):
            os.utime(path, (2000.0 + count, 2000.0 + count))

        trigger = CountingTrigger(3, before_tick)
        watcher = Watcher(lambda: [path], received.append, trigger)

        await watcher.run()

        assert len(received) == 3
        assert trigger.closed

    @pytest.mark.asyncio
    async def test_stop_takes_effect_after_current_pass(self, tmp_path):
        path = touch(tmp_path / "file", 1000.0)
        received = []
        states = []
        watcher = None

        def before_tick(count):
            os.utime(path, (2000.0 + count, 2000.0 + count))

        def on_change(changes):
            received.append(changes)
            states.append(watcher.state)
            watcher.stop()

        watcher = Watcher(lambda: [path], on_change, CountingTrigger(10, before_tick))

        await watcher.run()

        assert len(received) == 1
        assert states == [WatchState.DIFFING]
        assert watcher.state == WatchState.IDLE

    @pytest.mark.asyncio
    async def test_callbacks_never_overlap(self, tmp_path):
        path = touch(tmp_path / "file", 1000.0)
        running = []
        overlaps = []

        def before_tick(count):
            os.utime(path, (2000.0 + count, 2000.0 + count))

        async def on_change(changes):
            if running:
                overlaps.append(changes)
            running.append(True)
            await asyncio.sleep(0.01)
            running.pop()

        watcher = Watcher(lambda: [path], on_change, CountingTrigger(3, before_tick))

        await watcher.run()

        assert overlaps == []
