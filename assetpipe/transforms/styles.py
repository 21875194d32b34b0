"""Stylesheet compilation.

Production: compile -> post-process (optional) -> minify into a ".min" sibling.
Development: compile with an embedded source map, nothing else.

The compiler, post-processor and minifier are external tools configured as
ShellCommand templates.
"""

import logging
from typing import Optional

from ..task import Task
from ..taskgen import OutputDir, Sources
from .shell import ShellCommand

logger = logging.getLogger(__name__)


def make_styles_task(
    sources: Sources,
    out: OutputDir,
    compile_cmd: ShellCommand,
    postprocess_cmd: Optional[ShellCommand] = None,
    minify_cmd: Optional[ShellCommand] = None,
    name: str = 'css',
) -> Task:
    """Build a stylesheet task.

    Args:
        sources: Stylesheet entry points (partials are not listed here)
        out: Destination for the compiled ".css" files
        compile_cmd: Compiler template ({input}, {output})
        postprocess_cmd: Optional in-place step run on the compiled file
        minify_cmd: Optional minifier writing "<name>.min.css"
    """
    css_out = out.with_options(extension='.css')
    min_out = out.with_options(suffix='.min', extension='.css')

    async def apply(paths):
        outputs = []
        for path in paths:
            relative = sources.relative_to_base(path)
            dest = css_out.dest(relative)
            dest.parent.mkdir(parents=True, exist_ok=True)

            await compile_cmd.run(input=path, output=dest)
            if postprocess_cmd is not None and postprocess_cmd.enabled:
                await postprocess_cmd.run(input=dest, output=dest)
            outputs.append(dest)

            if minify_cmd is not None and minify_cmd.enabled:
                minified = min_out.dest(relative)
                await minify_cmd.run(input=dest, output=minified)
                outputs.append(minified)
        return outputs

    return Task(name, apply, sources=sources, output_dir=out.path,
                doc='compile stylesheets')
