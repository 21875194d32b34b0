"""SVG icon pipeline.

    sequence(
        icons:check,                      fail on duplicate icon file names
        icons:clean,                      empty the pre-built directory
        parallel(icons:monochrome,        optimize, strip fill/stroke/style
                 icons:colorful),         optimize
        icons:sprite,                     assemble <symbol> sprite
    )

The pre-built directory lives in source space; the sprite goes to the output
tree.
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence
from xml.etree import ElementTree as ET

from ..exceptions import TransformError
from ..executor import make_clean_task
from ..graph import Sequence as SequenceUnit, concurrent_group, sequence
from ..task import Task
from ..taskgen import Sources
from .files import copy_file
from .shell import ShellCommand

logger = logging.getLogger(__name__)

SVG_NS = 'http://www.w3.org/2000/svg'
XLINK_NS = 'http://www.w3.org/1999/xlink'
COLOR_ATTRIBUTES = ('fill', 'stroke', 'style')

ET.register_namespace('', SVG_NS)
ET.register_namespace('xlink', XLINK_NS)


def strip_colors(path: Path) -> None:
    """Remove color attributes so icons inherit currentColor."""
    tree = ET.parse(path)
    for element in tree.iter():
        for attribute in COLOR_ATTRIBUTES:
            element.attrib.pop(attribute, None)
    tree.write(path, encoding='utf-8')


def build_sprite(icons: Sequence[Path], dest: Path) -> Path:
    """Write a symbol sprite with one <symbol id="NAME"> per icon."""
    sprite = ET.Element(f'{{{SVG_NS}}}svg')
    for icon in sorted(icons, key=lambda p: p.name):
        root = ET.parse(icon).getroot()
        symbol = ET.SubElement(sprite, f'{{{SVG_NS}}}symbol', id=icon.stem)

        viewbox = root.get('viewBox')
        if viewbox is None and root.get('width') and root.get('height'):
            viewbox = f"0 0 {root.get('width')} {root.get('height')}"
        if viewbox:
            symbol.set('viewBox', viewbox)

        for child in list(root):
            symbol.append(child)

    dest.parent.mkdir(parents=True, exist_ok=True)
    ET.ElementTree(sprite).write(dest, encoding='utf-8', xml_declaration=True)
    return dest


async def optimize_svg(source: Path, dest: Path,
                       optimize_cmd: Optional[ShellCommand] = None) -> Path:
    """Run the SVG optimizer, or copy when none is configured."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    if optimize_cmd is not None and optimize_cmd.enabled:
        await optimize_cmd.run(input=source, output=dest)
        return dest
    return await asyncio.to_thread(copy_file, source, dest)


def check_unique_names(*icon_sets: Sources) -> List[str]:
    """Return the icon file names, failing if two icons share one.

    Icons are flattened into the pre-built directory, so names must be unique
    across all sets.

    Raises:
        TransformError: If a file name appears more than once
    """
    seen: Dict[str, Path] = {}
    clashes = []
    for icon_set in icon_sets:
        for path in icon_set.match():
            if path.name in seen:
                clashes.append(f'{path.name} ({seen[path.name]}, {path})')
            else:
                seen[path.name] = path
    if clashes:
        raise TransformError('duplicate icon names: ' + '; '.join(clashes))
    return sorted(seen)


def make_icon_tasks(
    monochrome: Sources,
    colorful: Sources,
    prebuilt_dir: Path,
    sprite_path: Path,
    optimize_cmd: Optional[ShellCommand] = None,
    name: str = 'icons',
) -> SequenceUnit:
    """Build the icon sequence."""

    async def apply_monochrome(paths):
        outputs = []
        for path in paths:
            dest = await optimize_svg(path, prebuilt_dir / path.name, optimize_cmd)
            await asyncio.to_thread(strip_colors, dest)
            outputs.append(dest)
        return outputs

    async def apply_colorful(paths):
        return [await optimize_svg(path, prebuilt_dir / path.name, optimize_cmd)
                for path in paths]

    async def apply_sprite(paths):
        return [await asyncio.to_thread(build_sprite, paths, sprite_path)]

    async def apply_check(paths):
        names = await asyncio.to_thread(check_unique_names, monochrome, colorful)
        logger.debug("%d icon(s) to pre-build", len(names))
        return []

    return sequence(
        Task(f'{name}:check', apply_check, doc='reject duplicate icon names'),
        make_clean_task(prebuilt_dir, name=f'{name}:clean'),
        concurrent_group(
            Task(f'{name}:monochrome', apply_monochrome, sources=monochrome,
                 output_dir=prebuilt_dir),
            Task(f'{name}:colorful', apply_colorful, sources=colorful,
                 output_dir=prebuilt_dir),
            name=f'{name}:optimize',
        ),
        Task(f'{name}:sprite', apply_sprite,
             sources=Sources('*.svg', base_path=prebuilt_dir),
             output_dir=sprite_path.parent),
        name=name,
    )
