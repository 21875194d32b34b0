"""assetpipe - front-end asset build orchestration.

Leaf tasks transform glob-matched sources into an output tree; tasks are
composed with ``sequence`` and ``concurrent_group`` into profiles:

    from assetpipe import Task, sequence, concurrent_group, RunReport

    build = sequence(clean, concurrent_group(html, css, js, name='transforms'))
    report = RunReport()
    status = await build.run(report)

The ``watch`` profile keeps running after the initial build and re-runs the
affected unit when a source changes (see ``assetpipe.reactive``).
"""

from .task import ErrorKind, RunReport, Status, Task, TaskResult
from .graph import ConcurrentGroup, Sequence, concurrent_group, sequence
from .registry import TransformRegistry
from .executor import Profile, ProfileExecutor, make_clean_task
from .fonts import synthesize_manifest

__all__ = [
    'Task', 'TaskResult', 'Status', 'ErrorKind', 'RunReport',
    'Sequence', 'ConcurrentGroup', 'sequence', 'concurrent_group',
    'TransformRegistry',
    'Profile', 'ProfileExecutor', 'make_clean_task',
    'synthesize_manifest',
]
