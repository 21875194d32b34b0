"""Catalog of named leaf transforms."""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from .exceptions import DuplicateTaskError
from .task import Apply, Task
from .taskgen import Sources

logger = logging.getLogger(__name__)


class TransformRegistry:
    """Registers leaf tasks by name.

    Input globs given as strings are resolved against ``base_path``.

    Example:
        registry = TransformRegistry(base_path=root)
        html = registry.register('html', ['src/*.html'], render_html,
                                 output_dir=root / 'build')
    """

    def __init__(self, base_path: Optional[Path] = None):
        self.base_path = Path(base_path) if base_path is not None else Path.cwd()
        self._tasks: Dict[str, Task] = {}

    def register(
        self,
        name: str,
        input_glob: Union[None, str, List[str], Sources],
        apply: Apply,
        output_dir: Optional[Path] = None,
        doc: Optional[str] = None,
    ) -> Task:
        """Create and register a task.

        Args:
            name: Unique task name
            input_glob: Pattern(s) or Sources; None for tasks without inputs
            apply: Coroutine function taking the matched paths
            output_dir: Directory the task writes into
            doc: Optional description

        Raises:
            DuplicateTaskError: If the name is already registered
        """
        if input_glob is None or isinstance(input_glob, Sources):
            sources = input_glob
        else:
            sources = Sources(input_glob, base_path=self.base_path)
        return self.add(Task(name, apply, sources=sources,
                             output_dir=output_dir, doc=doc))

    def add(self, task: Task) -> Task:
        """Register an already constructed task."""
        if task.name in self._tasks:
            raise DuplicateTaskError(f"Task '{task.name}' is already registered")
        self._tasks[task.name] = task
        logger.debug("registered %s", task.name)
        return task

    def __getitem__(self, name: str) -> Task:
        return self._tasks[name]

    def __contains__(self, name: str) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def names(self) -> List[str]:
        return list(self._tasks)
