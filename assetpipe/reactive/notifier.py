"""Reload signals for connected viewers.

Viewers only see events sent after they connect; there is no replay.
Delivery is best-effort: a viewer that fails to accept an event is dropped.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)


class ReloadKind(Enum):
    FULL_RELOAD = "full-reload"
    STYLE_INJECT = "style-inject"


@dataclass(frozen=True)
class ReloadEvent:
    """A reload signal; style-inject events carry the stylesheet path."""

    kind: ReloadKind
    path: Optional[str] = None

    @classmethod
    def full_reload(cls) -> 'ReloadEvent':
        return cls(ReloadKind.FULL_RELOAD)

    @classmethod
    def style_inject(cls, path: str) -> 'ReloadEvent':
        return cls(ReloadKind.STYLE_INJECT, str(path))


class Viewer:
    """A connected consumer of reload events.

    ``send`` must raise (ConnectionError or anything else) when the viewer
    can no longer receive events.
    """

    def send(self, event: ReloadEvent) -> None:
        raise NotImplementedError


class QueueViewer(Viewer):
    """Viewer buffering events in an asyncio.Queue.

    Transports (websocket, server-sent events) read from ``receive``.
    """

    def __init__(self, maxsize: int = 100):
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.closed = False

    def send(self, event: ReloadEvent) -> None:
        if self.closed:
            raise ConnectionError('viewer disconnected')
        self.queue.put_nowait(event)

    async def receive(self) -> ReloadEvent:
        return await self.queue.get()

    def close(self) -> None:
        self.closed = True


class LoggingViewer(Viewer):
    """Viewer that logs each event; used when no browser transport is attached."""

    def send(self, event: ReloadEvent) -> None:
        if event.path:
            logger.info("reload: %s %s", event.kind.value, event.path)
        else:
            logger.info("reload: %s", event.kind.value)


class ReloadNotifier:
    """Broadcasts ReloadEvents to the currently connected viewers."""

    def __init__(self):
        self._viewers: List[Viewer] = []

    def connect(self, viewer: Optional[Viewer] = None) -> Viewer:
        """Register a viewer (a new QueueViewer by default) and return it."""
        if viewer is None:
            viewer = QueueViewer()
        self._viewers.append(viewer)
        return viewer

    def disconnect(self, viewer: Viewer) -> None:
        if viewer in self._viewers:
            self._viewers.remove(viewer)

    def notify(self, event: ReloadEvent) -> int:
        """Send event to every viewer; return how many accepted it."""
        delivered = 0
        for viewer in list(self._viewers):
            try:
                viewer.send(event)
            except Exception as e:
                logger.debug("dropping viewer %r: %s", viewer, e)
                self.disconnect(viewer)
            else:
                delivered += 1
        return delivered

    @property
    def viewers(self) -> List[Viewer]:
        return list(self._viewers)
