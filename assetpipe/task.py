"""Leaf tasks and their results.

A Task pairs a name with an async ``apply`` coroutine and an optional glob.
Running a task resolves the glob, hands the matched paths to ``apply`` and
turns whatever happens into a TaskResult:

- no matching inputs -> SKIPPED (apply is not called)
- apply returns -> SUCCESS with the returned output paths
- apply raises -> FAILURE with the error message

Tasks never raise out of ``run``; composites rely on that to aggregate.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .taskgen import Sources

logger = logging.getLogger(__name__)


class Status(Enum):
    """Outcome of a task or composite."""
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


class ErrorKind(Enum):
    """Why a task failed."""
    TRANSFORM = "transform"   # the tool rejected its input
    IO = "io"                 # unwritable output, disk full, ...


@dataclass
class TaskResult:
    """Result of a single task execution."""

    name: str
    status: Status
    reason: Optional[str] = None
    outputs: List[str] = field(default_factory=list)
    error_kind: Optional[ErrorKind] = None

    @property
    def failed(self) -> bool:
        return self.status is Status.FAILURE

    @classmethod
    def success(cls, name: str, outputs: Iterable[Any] = ()) -> 'TaskResult':
        return cls(name, Status.SUCCESS, outputs=[str(o) for o in outputs])

    @classmethod
    def skipped(cls, name: str, reason: str = 'no matching inputs') -> 'TaskResult':
        return cls(name, Status.SKIPPED, reason=reason)

    @classmethod
    def failure(cls, name: str, reason: str,
                kind: ErrorKind = ErrorKind.TRANSFORM) -> 'TaskResult':
        return cls(name, Status.FAILURE, reason=reason, error_kind=kind)


@dataclass
class RunReport:
    """Collects the results of every leaf executed during one run."""

    results: List[TaskResult] = field(default_factory=list)

    def record(self, result: TaskResult) -> None:
        self.results.append(result)

    @property
    def status(self) -> Status:
        """FAILURE if any leaf failed, otherwise SUCCESS."""
        if self.failures:
            return Status.FAILURE
        return Status.SUCCESS

    @property
    def failures(self) -> List[TaskResult]:
        return [r for r in self.results if r.failed]

    @property
    def outputs(self) -> List[str]:
        outputs = []
        for result in self.results:
            outputs.extend(result.outputs)
        return outputs

    def executed(self, name: str) -> List[TaskResult]:
        """Return the results recorded for the named task."""
        return [r for r in self.results if r.name == name]


Apply = Callable[[List[Path]], Awaitable[Optional[Iterable[Any]]]]


@dataclass
class Task:
    """A named leaf unit of work.

    Attributes:
        name: Unique task name
        apply: Coroutine function receiving the matched input paths and
               returning the written output paths
        sources: Input glob; None means the task always runs with no inputs
        output_dir: Directory the task writes into (informational)
        doc: Optional description shown in dry runs
    """

    name: str
    apply: Apply
    sources: Optional['Sources'] = None
    output_dir: Optional[Path] = None
    doc: Optional[str] = None

    async def resolve(self) -> List[Path]:
        """Resolve the input glob (file system access happens off-loop)."""
        if self.sources is None:
            return []
        return await asyncio.to_thread(self.sources.match)

    async def execute(self) -> TaskResult:
        """Run the task once and convert the outcome into a TaskResult."""
        try:
            paths = await self.resolve()
        except OSError as e:
            logger.error("%s: cannot list inputs", self.name, exc_info=True)
            return TaskResult.failure(self.name, f"{type(e).__name__}: {e}", ErrorKind.IO)

        if self.sources is not None and not paths:
            logger.debug("%s: skipped, nothing matches %s", self.name, self.sources)
            return TaskResult.skipped(self.name)

        logger.debug("%s: starting with %d input(s)", self.name, len(paths))
        try:
            outputs = await self.apply(paths)
        except OSError as e:
            logger.error("%s: I/O failure", self.name, exc_info=True)
            return TaskResult.failure(self.name, f"{type(e).__name__}: {e}", ErrorKind.IO)
        except Exception as e:
            logger.error("%s: %s", self.name, e)
            return TaskResult.failure(self.name, str(e) or type(e).__name__)

        result = TaskResult.success(self.name, outputs or ())
        logger.info("%s: done (%d output(s))", self.name, len(result.outputs))
        return result

    async def run(self, report: RunReport, label: Optional[str] = None) -> Status:
        """Execute and record the result in report."""
        if label and label != self.name:
            logger.debug("running %s", label)
        result = await self.execute()
        report.record(result)
        return result.status

    def leaves(self) -> List['Task']:
        return [self]

    def describe(self, indent: int = 0) -> List[str]:
        """Return dry-run lines for this task."""
        line = '  ' * indent + self.name
        if self.sources is not None:
            line += f'  <- {self.sources}'
        return [line]
