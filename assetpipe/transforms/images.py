"""Image optimization and WebP variants (Pillow).

Raster formats are re-encoded with their encoder's optimizer; every raster
input also gets a ".webp" sibling. Other formats (svg, ico, webp) are copied.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Sequence

from ..task import Task
from ..taskgen import OutputDir, Sources
from .files import copy_file

logger = logging.getLogger(__name__)

RASTER_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif'}


def _save_kwargs(image, fmt: str) -> dict:
    kwargs = {'optimize': True}
    if fmt == 'JPEG':
        kwargs.update(quality='keep', progressive=True)
    if getattr(image, 'is_animated', False):
        kwargs['save_all'] = True
    return kwargs


def optimize_image(source: Path, dest: Path, webp: bool = True,
                   quality: int = 80) -> List[Path]:
    """Write an optimized copy of source (and its WebP variant) to dest."""
    from PIL import Image

    dest.parent.mkdir(parents=True, exist_ok=True)
    if source.suffix.lower() not in RASTER_EXTENSIONS:
        return [copy_file(source, dest)]

    outputs = [dest]
    with Image.open(source) as image:
        fmt = image.format
        image.save(dest, fmt, **_save_kwargs(image, fmt))
        if webp:
            variant = dest.with_suffix('.webp')
            extra = {'save_all': True} if getattr(image, 'is_animated', False) else {}
            image.save(variant, 'WEBP', quality=quality, **extra)
            outputs.append(variant)
    return outputs


def optimize_images(paths: Sequence[Path], sources: Sources, out: OutputDir,
                    webp: bool = True, quality: int = 80) -> List[Path]:
    outputs = []
    for path in paths:
        outputs.extend(optimize_image(path, out.dest_for(path, sources), webp, quality))
    return outputs


def make_images_task(sources: Sources, out: OutputDir, webp: bool = True,
                     quality: int = 80, name: str = 'img') -> Task:
    async def apply(paths):
        return await asyncio.to_thread(optimize_images, paths, sources, out, webp, quality)

    return Task(name, apply, sources=sources, output_dir=out.path,
                doc='optimize images' + (', add webp variants' if webp else ''))
