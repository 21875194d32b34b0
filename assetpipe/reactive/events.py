"""File-system change event sources.

A WatchSession consumes ChangeEvents from an EventSource. Production uses
WatchdogEventSource; tests push events into a QueueEventSource directly.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """A path that was created, modified, moved or deleted."""

    path: str
    kind: str = 'modified'


_CLOSED = object()


class QueueEventSource:
    """Event source backed by an asyncio.Queue.

    Example:
        source = QueueEventSource()
        source.put('src/scss/_vars.scss')
        source.close()
        async for event in source.events():
            ...
    """

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()

    def put(self, path: Union[str, Path], kind: str = 'modified') -> None:
        self._queue.put_nowait(ChangeEvent(str(path), kind))

    def close(self) -> None:
        """End the event stream after already queued events."""
        self._queue.put_nowait(_CLOSED)

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    async def events(self) -> AsyncIterator[ChangeEvent]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item


class WatchdogEventSource(QueueEventSource):
    """Event source fed by a watchdog observer thread.

    Events are handed to the event loop with call_soon_threadsafe.
    """

    def __init__(self, root: Union[str, Path], polling: bool = False):
        super().__init__()
        self.root = Path(root)
        self.polling = polling
        self._observer = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def _emit(self, path: str, kind: str) -> None:
        self._loop.call_soon_threadsafe(self.put, path, kind)

    def _make_handler(self):
        from watchdog.events import FileSystemEventHandler

        source = self

        class ChangeHandler(FileSystemEventHandler):
            def on_created(self, event):
                if not event.is_directory:
                    source._emit(event.src_path, 'created')

            def on_modified(self, event):
                if not event.is_directory:
                    source._emit(event.src_path, 'modified')

            def on_deleted(self, event):
                if not event.is_directory:
                    source._emit(event.src_path, 'deleted')

            def on_moved(self, event):
                if not event.is_directory:
                    source._emit(event.dest_path, 'moved')

        return ChangeHandler()

    async def start(self) -> None:
        if self.polling:
            from watchdog.observers.polling import PollingObserver as Observer
        else:
            from watchdog.observers import Observer

        self._loop = asyncio.get_running_loop()
        self._observer = Observer()
        self._observer.schedule(self._make_handler(), str(self.root), recursive=True)
        self._observer.start()
        logger.info("watching %s", self.root)

    async def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            await asyncio.to_thread(self._observer.join)
            self._observer = None
