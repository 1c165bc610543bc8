"""
Triggers that tell the watcher when to look for changes.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from ..core.enums import TriggerType


class Trigger(ABC):
    """Source of watch ticks"""

    @abstractmethod
    async def wait(self) -> bool:
        """
        Block until the next tick.

        Returns:
            False once the trigger has been closed
        """
        pass

    def start(self):
        """Start producing ticks"""
        pass

    def close(self):
        """Stop producing ticks"""
        pass


class PollTrigger(Trigger):
    """Ticks on a fixed interval"""

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self._closed = False

    async def wait(self) -> bool:
        if self._closed:
            return False
        await asyncio.sleep(self.interval)
        return not self._closed

    def close(self):
        self._closed = True


class _NotifyHandler(FileSystemEventHandler):
    """Forwards watchdog events from the observer thread to the event loop"""

    def __init__(self, loop: asyncio.AbstractEventLoop, event: asyncio.Event):
        self.loop = loop
        self.event = event

    def on_any_event(self, event):
        if event.event_type in ('opened', 'closed_no_write'):
            return
        if event.is_directory and event.event_type == 'modified':
            return
        self.loop.call_soon_threadsafe(self.event.set)


class FileSystemEventTrigger(Trigger):
    """
    Ticks when the filesystem reports a change under one of the watched paths.
    Bursts of events inside the debounce window produce a single tick.
    """

    def __init__(self, paths: Iterable[str], debounce: float = 0.5):
        self.paths: List[str] = list(paths)
        self.debounce = debounce
        self.logger = logging.getLogger(__name__)
        self._event: Optional[asyncio.Event] = None
        self._observer: Optional[Observer] = None
        self._closed = False

    def start(self):
        """Start the watchdog observer. Must be called from the event loop."""
        if self._observer is not None:
            return

        loop = asyncio.get_running_loop()
        self._event = asyncio.Event()
        handler = _NotifyHandler(loop, self._event)

        self._observer = Observer()
        for path in self.paths:
            self._observer.schedule(handler, path, recursive=True)
            self.logger.debug(f"Watching {path} for filesystem events")
        self._observer.start()

    async def wait(self) -> bool:
        if self._closed:
            return False
        if self._event is None:
            self.start()

        await self._event.wait()
        await asyncio.sleep(self.debounce)
        self._event.clear()
        return not self._closed

    def close(self):
        self._closed = True
        if self._event is not None:
            self._event.set()
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None


def new_trigger(
    trigger_type: str,
    paths: Optional[Iterable[str]] = None,
    interval: float = 1.0,
    debounce: float = 0.5
) -> Trigger:
    """
    Factory function to create a watch trigger.

    Args:
        trigger_type: 'polling' or 'notify'
        paths: Directories observed by the notify trigger
        interval: Poll interval in seconds
        debounce: Quiet period coalescing filesystem events, in seconds

    Returns:
        Trigger instance
    """
    try:
        kind = TriggerType(trigger_type.lower())
    except ValueError:
        raise ValueError(
            f"Unsupported trigger type: {trigger_type}. Supported: 'polling', 'notify'"
        )

    if kind == TriggerType.POLLING:
        return PollTrigger(interval=interval)
    return FileSystemEventTrigger(paths or ["."], debounce=debounce)
