"""Resident watch session: re-run the bound unit when matching files change.

Each WatchBinding is a small state machine:

    IDLE --event--> SCHEDULED --debounce elapsed--> RUNNING --done--> IDLE
                      ^  events absorbed              |  events set 'pending'
                      +------- pending follow-up -----+

So a burst of events produces one run, and any number of events arriving
while a run is in progress produce exactly one follow-up run. Different
bindings are independent and share a concurrency limit.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set, TYPE_CHECKING

from ..task import RunReport, Status
from .events import ChangeEvent
from .notifier import ReloadEvent, ReloadKind, ReloadNotifier

if TYPE_CHECKING:
    from ..graph import Unit
    from ..taskgen import Sources

logger = logging.getLogger(__name__)


class BindingState(Enum):
    IDLE = "idle"
    SCHEDULED = "scheduled"
    RUNNING = "running"


@dataclass
class WatchBinding:
    """Glob scope -> unit to re-run, with an optional reload kind.

    Attributes:
        sources: Paths whose changes trigger the binding
        unit: Task or composite to run
        reload: Reload signal sent after a successful run, None for no reload
    """

    sources: 'Sources'
    unit: 'Unit'
    reload: Optional[ReloadKind] = None

    state: BindingState = field(default=BindingState.IDLE, init=False)
    pending: bool = field(default=False, init=False)
    runs: int = field(default=0, init=False)
    last_report: Optional[RunReport] = field(default=None, init=False, repr=False)

    @property
    def name(self) -> str:
        return self.unit.name

    def matches(self, path: str) -> bool:
        return self.sources.matches(path)


class WatchSession:
    """Owns the watch bindings for the lifetime of a resident session.

    Example:
        session = WatchSession(bindings, WatchdogEventSource(root), notifier)
        await session.run()   # returns only when the event source closes
    """

    def __init__(
        self,
        bindings: List[WatchBinding],
        source,
        notifier: Optional[ReloadNotifier] = None,
        debounce: float = 0.1,
        max_concurrent: int = 4,
    ):
        self.bindings = list(bindings)
        self.source = source
        self.notifier = notifier or ReloadNotifier()
        self.debounce = debounce
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._drivers: Set[asyncio.Task] = set()

    async def run(self) -> None:
        """Dispatch events until the source closes, then drain running work."""
        await self.source.start()
        try:
            async for event in self.source.events():
                self.dispatch(event)
            await self.wait_idle()
        finally:
            await self.source.stop()

    def stop(self) -> None:
        self.source.close()

    def dispatch(self, event: ChangeEvent) -> List[WatchBinding]:
        """Trigger every binding whose scope contains the changed path."""
        triggered = [b for b in self.bindings if b.matches(event.path)]
        if triggered:
            logger.info("%s %s -> %s", event.kind, event.path,
                        ', '.join(b.name for b in triggered))
        for binding in triggered:
            self.trigger(binding)
        return triggered

    def trigger(self, binding: WatchBinding) -> None:
        if binding.state is BindingState.IDLE:
            binding.state = BindingState.SCHEDULED
            driver = asyncio.ensure_future(self._drive(binding))
            self._drivers.add(driver)
            driver.add_done_callback(self._drivers.discard)
        elif binding.state is BindingState.RUNNING:
            binding.pending = True

    async def wait_idle(self) -> None:
        """Wait until no binding is scheduled or running."""
        while self._drivers:
            await asyncio.gather(*list(self._drivers))

    async def _drive(self, binding: WatchBinding) -> None:
        try:
            while True:
                await asyncio.sleep(self.debounce)
                async with self._semaphore:
                    binding.state = BindingState.RUNNING
                    binding.pending = False
                    report = RunReport()
                    await binding.unit.run(report)
                binding.runs += 1
                binding.last_report = report
                self._finished(binding, report)

                if not binding.pending:
                    break
                binding.state = BindingState.SCHEDULED
        except Exception:
            logger.exception("watch binding %s crashed", binding.name)
        finally:
            binding.state = BindingState.IDLE
            binding.pending = False

    def _finished(self, binding: WatchBinding, report: RunReport) -> None:
        if report.status is Status.FAILURE:
            logger.warning("%s: %d task(s) failed, no reload sent",
                           binding.name, len(report.failures))
            return

        if binding.reload is ReloadKind.STYLE_INJECT:
            for path in report.outputs:
                if path.endswith('.css'):
                    self.notifier.notify(ReloadEvent.style_inject(path))
        elif binding.reload is ReloadKind.FULL_RELOAD:
            self.notifier.notify(ReloadEvent.full_reload())
