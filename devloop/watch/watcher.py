"""
Watch loop that reports file changes to a callback.
"""
import asyncio
import inspect
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from .changes import ChangeSet, diff
from .snapshot import DependencyProvider, FileMap, stat
from .triggers import Trigger, PollTrigger

ChangeCallback = Callable[[ChangeSet], Union[None, Awaitable[None]]]


class WatchState(Enum):
    IDLE = "idle"
    DIFFING = "diffing"


class Watcher:
    """
    Polls a dependency provider and reports changes between ticks.

    The callback runs inline: the next tick is not processed until it
    returns. Its errors are logged and do not stop the loop.
    """

    def __init__(
        self,
        deps: DependencyProvider,
        on_change: ChangeCallback,
        trigger: Optional[Trigger] = None
    ):
        """
        Initialize watcher.

        Args:
            deps: Returns the current dependency paths, queried on every tick
            on_change: Called with the ChangeSet whenever it is not empty
            trigger: Source of ticks, polls every second by default
        """
        self.deps = deps
        self.on_change = on_change
        self.trigger = trigger or PollTrigger()
        self.state = WatchState.IDLE
        self.last_snapshot: Optional[FileMap] = None
        self.logger = logging.getLogger(__name__)
        self._stop_requested = False

    async def start(self):
        """Take the baseline snapshot"""
        self.last_snapshot = await asyncio.to_thread(stat, self.deps)
        self.logger.info(f"Watching {len(self.last_snapshot)} files")

    async def poll(self) -> ChangeSet:
        """
        Run one diffing pass and notify the callback if anything changed.

        The new snapshot becomes the baseline even when the callback fails,
        so a change is reported only once.
        """
        if self.last_snapshot is None:
            await self.start()

        self.state = WatchState.DIFFING
        try:
            try:
                current = await asyncio.to_thread(stat, self.deps)
            except Exception as e:
                self.logger.error(f"Failed to list dependencies: {e}")
                return ChangeSet()

            changes = diff(self.last_snapshot, current)
            self.last_snapshot = current

            if changes:
                self.logger.info(f"Files changed: {changes.summary()}")
                await self._notify(changes)

            return changes
        finally:
            self.state = WatchState.IDLE

    async def _notify(self, changes: ChangeSet):
        try:
            result = self.on_change(changes)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            self.logger.error(f"Change callback failed: {e}", exc_info=True)

    async def run(self):
        """Process ticks until stop() is called or the trigger closes"""
        if self.last_snapshot is None:
            await self.start()

        self.trigger.start()
        try:
            while not self._stop_requested:
                ticked = await self.trigger.wait()
                if not ticked or self._stop_requested:
                    break
                await self.poll()
        finally:
            self.trigger.close()
            self.logger.info("Watcher stopped")

    def stop(self):
        """Request the loop to end at the next idle boundary"""
        self._stop_requested = True
        self.trigger.close()
