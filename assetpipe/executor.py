"""Profile execution.

A Profile is a named unit (normally ``sequence(clean, concurrent_group(...))``)
plus an optional post-action. The ProfileExecutor runs the unit, logs a
summary line and then hands over to the post-action, which for the ``watch``
profile is the resident watch session. Failing leaves log their own errors.
"""

import asyncio
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from .graph import Unit
from .task import RunReport, Task

logger = logging.getLogger(__name__)


def empty_directory(root: Path) -> List[str]:
    """Remove everything below root, keeping root itself.

    Returns the removed top-level entries.
    """
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)
    removed = []
    for entry in sorted(root.iterdir()):
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()
        removed.append(str(entry))
    return removed


def make_clean_task(root: Path, name: str = 'clean') -> Task:
    """Task that empties the output tree rooted at root."""

    async def apply(paths):
        removed = await asyncio.to_thread(empty_directory, root)
        logger.debug("%s: removed %d entr(ies) under %s", name, len(removed), root)
        return []

    return Task(name, apply, output_dir=Path(root), doc=f'empty {root}')


@dataclass
class Profile:
    """A named build mode.

    Attributes:
        name: Profile name ("build", "watch", ...)
        unit: Composite to execute
        post_action: Awaited after the unit finished, with the run report.
                     May never return (resident sessions).
    """
    name: str
    unit: Unit
    post_action: Optional[Callable[[RunReport], Awaitable[None]]] = None

    def describe(self) -> List[str]:
        lines = [f'profile {self.name}']
        lines.extend(self.unit.describe(1))
        if self.post_action is not None:
            lines.append('  then: resident session')
        return lines


class ProfileExecutor:
    """Runs profiles and reports their aggregate outcome."""

    async def run(self, profile: Profile) -> RunReport:
        """Run profile.unit to completion, then the post-action.

        Never raises for task failures; inspect ``report.status``.
        """
        report = RunReport()
        logger.info("profile %s: starting", profile.name)
        await profile.unit.run(report)

        logger.info("profile %s: %s (%d task(s), %d failed)", profile.name,
                    report.status.value, len(report.results), len(report.failures))

        if profile.post_action is not None:
            await profile.post_action(report)
        return report
