"""HTML fragments assembled with @include('path') directives.

Includes are resolved relative to the including file, recursively:

    <body>
      @include('components/header.html')
    </body>
"""

import asyncio
import re
from pathlib import Path
from typing import List, Sequence, Tuple

from ..exceptions import TransformError
from ..task import Task
from ..taskgen import OutputDir, Sources

INCLUDE_RE = re.compile(r"""@include\(\s*(['"])(?P<path>[^'"]+)\1\s*\)""")


def render_markup(path: Path, _stack: Tuple[Path, ...] = ()) -> str:
    """Return the content of path with every include expanded.

    Raises:
        TransformError: On a missing include or an include cycle
    """
    path = path.resolve()
    if path in _stack:
        chain = ' -> '.join(p.name for p in _stack + (path,))
        raise TransformError(f'include cycle: {chain}')

    try:
        text = path.read_text(encoding='utf-8')
    except FileNotFoundError:
        if _stack:
            raise TransformError(f'{_stack[-1].name}: included file {path} not found')
        raise

    def expand(match):
        return render_markup(path.parent / match.group('path'), _stack + (path,))

    return INCLUDE_RE.sub(expand, text)


def build_markup(paths: Sequence[Path], sources: Sources, out: OutputDir) -> List[Path]:
    outputs = []
    for path in paths:
        dest = out.dest_for(path, sources)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(render_markup(path), encoding='utf-8')
        outputs.append(dest)
    return outputs


def make_markup_task(sources: Sources, out: OutputDir, name: str = 'html') -> Task:
    async def apply(paths):
        return await asyncio.to_thread(build_markup, paths, sources, out)

    return Task(name, apply, sources=sources, output_dir=out.path,
                doc='resolve @include directives')
