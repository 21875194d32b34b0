"""Scripts are copied as-is; production also writes minified siblings."""

import asyncio
from typing import Optional

from ..task import Task
from ..taskgen import OutputDir, Sources
from .files import copy_matched
from .shell import ShellCommand


def make_scripts_task(sources: Sources, out: OutputDir,
                      minify_cmd: Optional[ShellCommand] = None,
                      name: str = 'js') -> Task:
    min_out = out.with_options(suffix='.min')

    async def apply(paths):
        outputs = await asyncio.to_thread(copy_matched, paths, sources, out)
        if minify_cmd is not None and minify_cmd.enabled:
            for path in paths:
                dest = min_out.dest_for(path, sources)
                await minify_cmd.run(input=path, output=dest)
                outputs.append(dest)
        return outputs

    return Task(name, apply, sources=sources, output_dir=out.path)
