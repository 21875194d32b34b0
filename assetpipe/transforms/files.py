"""Pass-through copies (resources, unminified scripts)."""

import asyncio
import shutil
from pathlib import Path
from typing import List, Sequence

from ..task import Task
from ..taskgen import OutputDir, Sources


def copy_file(source: Path, dest: Path) -> Path:
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, dest)
    return dest


def copy_matched(paths: Sequence[Path], sources: Sources, out: OutputDir) -> List[Path]:
    """Copy each matched path under out, keeping its relative location."""
    return [copy_file(path, out.dest_for(path, sources)) for path in paths]


def make_copy_task(name: str, sources: Sources, out: OutputDir) -> Task:
    async def apply(paths):
        return await asyncio.to_thread(copy_matched, paths, sources, out)

    return Task(name, apply, sources=sources, output_dir=out.path,
                doc=f'copy to {out.path}')
