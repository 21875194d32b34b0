"""Composition of tasks into SEQUENCE and CONCURRENT-GROUP units.

Building a graph does not execute anything:

    icons = sequence(
        clean_prebuilt,
        concurrent_group(monochrome, colorful, name='icons:optimize'),
        sprite,
        name='icons',
    )
    report = RunReport()
    status = await icons.run(report)

Execution rules:
- Sequence: members run one after another; the first FAILURE stops the
  sequence. SKIPPED members do not stop it.
- ConcurrentGroup: every member is started together and awaited to the end;
  a failing member never cancels the others.
"""

import asyncio
import logging
from typing import List, Optional, Sequence as SequenceType, Union

from .task import RunReport, Status, Task

logger = logging.getLogger(__name__)


def _combine(statuses: SequenceType[Status]) -> Status:
    """Fold member statuses into a composite status."""
    if any(s is Status.FAILURE for s in statuses):
        return Status.FAILURE
    if statuses and all(s is Status.SKIPPED for s in statuses):
        return Status.SKIPPED
    return Status.SUCCESS


class Composite:
    """Base class for Sequence and ConcurrentGroup."""

    kind = 'composite'

    def __init__(self, *units: 'Unit', name: Optional[str] = None):
        self.units: List['Unit'] = list(units)
        self.name = name or f"{self.kind}({', '.join(u.name for u in self.units)})"

    def member_label(self, label: str, index: int, unit: 'Unit') -> str:
        """Stable identity of a member, used in logs."""
        return f"{label}[{index}]:{unit.name}"

    async def run(self, report: RunReport, label: Optional[str] = None) -> Status:
        raise NotImplementedError

    def leaves(self) -> List[Task]:
        leaves = []
        for unit in self.units:
            leaves.extend(unit.leaves())
        return leaves

    def describe(self, indent: int = 0) -> List[str]:
        lines = ['  ' * indent + f'{self.kind} {self.name}']
        for unit in self.units:
            lines.extend(unit.describe(indent + 1))
        return lines

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {len(self.units)} member(s))"


class Sequence(Composite):
    """Ordered members; each must not fail before the next one starts."""

    kind = 'sequence'

    async def run(self, report: RunReport, label: Optional[str] = None) -> Status:
        label = label or self.name
        statuses = []
        for index, unit in enumerate(self.units):
            status = await unit.run(report, self.member_label(label, index, unit))
            statuses.append(status)
            if status is Status.FAILURE:
                remaining = [u.name for u in self.units[index + 1:]]
                if remaining:
                    logger.warning("%s: aborted after %s failed, not running %s",
                                   label, unit.name, ', '.join(remaining))
                return Status.FAILURE
        return _combine(statuses)


class ConcurrentGroup(Composite):
    """Members started together; FAILURE if any member fails."""

    kind = 'parallel'

    async def run(self, report: RunReport, label: Optional[str] = None) -> Status:
        label = label or self.name
        outcomes = await asyncio.gather(
            *(unit.run(report, self.member_label(label, index, unit))
              for index, unit in enumerate(self.units)),
            return_exceptions=True,
        )

        statuses = []
        for index, outcome in enumerate(outcomes):
            if isinstance(outcome, BaseException):
                unit = self.units[index]
                logger.error("%s raised %r", self.member_label(label, index, unit), outcome)
                statuses.append(Status.FAILURE)
            else:
                statuses.append(outcome)
        return _combine(statuses)


Unit = Union[Task, Composite]


def sequence(*units: Unit, name: Optional[str] = None) -> Sequence:
    """Compose units to run strictly one after another."""
    return Sequence(*units, name=name)


def concurrent_group(*units: Unit, name: Optional[str] = None) -> ConcurrentGroup:
    """Compose units to run concurrently."""
    return ConcurrentGroup(*units, name=name)
