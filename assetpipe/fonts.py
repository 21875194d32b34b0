"""Font conversion and font manifest synthesis.

Two stages that always run as a sequence:

1. convert_fonts: every source .ttf is written out as .woff and .woff2,
   keeping its sub-directory below the source glob
2. synthesize_manifest: the top level of the converted-fonts directory is
   listed and one stylesheet inclusion directive is written per logical
   font name

The manifest is regenerated from scratch on every run; the converted-fonts
directory is its only source of truth.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .exceptions import TransformError
from .graph import Sequence as SequenceUnit, sequence
from .task import Task
from .taskgen import OutputDir, Sources

logger = logging.getLogger(__name__)

FONT_FLAVORS = ('woff', 'woff2')
MANIFEST_DIRECTIVE = '@include font({name}, {name});\n'


def logical_name(filename: str) -> str:
    """Return the font name of a converted font file ("a.b.woff" -> "a")."""
    return filename.split('.', 1)[0]


def convert_font(source: Path, dest_dir: Path, flavor: str) -> Path:
    """Write source as a WOFF/WOFF2 file into dest_dir."""
    from fontTools.ttLib import TTFont

    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / f'{source.stem}.{flavor}'
    font = TTFont(str(source), recalcTimestamp=False)
    try:
        font.flavor = flavor
        font.save(str(dest))
    finally:
        font.close()
    return dest


async def convert_fonts(sources: Sequence[Path], dest_dir: Path,
                        flavors: Sequence[str] = FONT_FLAVORS,
                        matched_by: Optional[Sources] = None) -> List[Path]:
    """Convert every source with every flavor.

    Conversions are independent: all of them are attempted, and a
    TransformError listing the failed ones is raised at the end.

    Args:
        sources: Font files to convert
        dest_dir: Converted-fonts directory
        flavors: Output flavors
        matched_by: Glob the sources came from; when given, each font keeps
                    its sub-directory below the glob's static prefix
    """
    out = OutputDir(dest_dir)

    def target_dir(source: Path) -> Path:
        if matched_by is None:
            return out.path
        return out.dest_for(source, matched_by).parent

    jobs = [(source, flavor) for source in sources for flavor in flavors]
    outcomes = await asyncio.gather(
        *(asyncio.to_thread(convert_font, source, target_dir(source), flavor)
          for source, flavor in jobs),
        return_exceptions=True,
    )

    outputs = []
    errors = []
    for (source, flavor), outcome in zip(jobs, outcomes):
        if isinstance(outcome, Exception):
            logger.error("cannot convert %s to %s: %s", source.name, flavor, outcome)
            errors.append(f'{source.name} -> {flavor}: {outcome}')
        else:
            outputs.append(outcome)

    if errors:
        raise TransformError('font conversion failed: ' + '; '.join(errors))
    return outputs


def synthesize_manifest(fonts_dir: Path, manifest: Path,
                        directive: str = MANIFEST_DIRECTIVE,
                        extensions: Sequence[str] = FONT_FLAVORS) -> List[str]:
    """Rewrite the manifest with one directive per logical font name.

    Entries are taken in directory-listing order and deduplicated by logical
    name. A missing or empty fonts_dir leaves an empty manifest.

    Returns:
        The logical names written, in order
    """
    manifest = Path(manifest)
    manifest.parent.mkdir(parents=True, exist_ok=True)
    manifest.write_text('', encoding='utf-8')

    try:
        entries = os.listdir(fonts_dir)
    except FileNotFoundError:
        logger.debug("%s does not exist, manifest left empty", fonts_dir)
        return []

    written: List[str] = []
    for entry in entries:
        name = logical_name(entry)
        extension = entry.rsplit('.', 1)[-1] if '.' in entry else ''
        if not name or extension not in extensions or name in written:
            continue
        with open(manifest, 'a', encoding='utf-8') as f:
            f.write(directive.format(name=name))
        written.append(name)
    return written


def make_font_tasks(sources, fonts_dir: Path, manifest: Path,
                    directive: str = MANIFEST_DIRECTIVE,
                    name: str = 'fonts') -> SequenceUnit:
    """Build sequence(convert, manifest) for a font source glob."""

    async def convert(paths):
        return await convert_fonts(paths, fonts_dir, matched_by=sources)

    async def write_manifest(paths):
        names = await asyncio.to_thread(synthesize_manifest, fonts_dir, manifest, directive)
        logger.debug("font manifest lists %s", ', '.join(names) or 'nothing')
        return [manifest]

    return sequence(
        Task(f'{name}:convert', convert, sources=sources, output_dir=fonts_dir),
        Task(f'{name}:manifest', write_manifest, output_dir=manifest.parent,
             doc=f'rewrite {manifest.name}'),
        name=name,
    )


# OpenType (CFF) to TrueType conversion, used by the standalone ttf utility.

def _glyphs_to_quadratic(glyph_set, max_err: float = 1.0) -> Dict[str, object]:
    from fontTools.pens.cu2quPen import Cu2QuPen
    from fontTools.pens.ttGlyphPen import TTGlyphPen

    quadratic = {}
    for glyph_name in glyph_set.keys():
        tt_pen = TTGlyphPen(glyph_set)
        glyph_set[glyph_name].draw(Cu2QuPen(tt_pen, max_err, reverse_direction=True))
        quadratic[glyph_name] = tt_pen.glyph()
    return quadratic


def otf_to_ttf(source: Path, dest: Optional[Path] = None) -> Path:
    """Convert a CFF-flavored OpenType font into a TrueType font.

    Raises:
        TransformError: If source has no CFF outlines
    """
    from fontTools.ttLib import TTFont, newTable

    dest = dest or source.with_suffix('.ttf')
    font = TTFont(str(source))
    try:
        if font.sfntVersion != 'OTTO' or 'CFF ' not in font:
            raise TransformError(f'{source.name} is not a CFF OpenType font')

        glyph_order = font.getGlyphOrder()
        font['loca'] = newTable('loca')
        font['glyf'] = glyf = newTable('glyf')
        glyf.glyphOrder = glyph_order
        glyf.glyphs = _glyphs_to_quadratic(font.getGlyphSet())
        del font['CFF ']
        if 'VORG' in font:
            del font['VORG']
        glyf.compile(font)

        hmtx = font['hmtx']
        for glyph_name, glyph in glyf.glyphs.items():
            if hasattr(glyph, 'xMin'):
                hmtx[glyph_name] = (hmtx[glyph_name][0], glyph.xMin)

        font['maxp'] = maxp = newTable('maxp')
        maxp.tableVersion = 0x00010000
        maxp.maxZones = 1
        maxp.maxTwilightPoints = 0
        maxp.maxStorage = 0
        maxp.maxFunctionDefs = 0
        maxp.maxInstructionDefs = 0
        maxp.maxStackElements = 0
        maxp.maxSizeOfInstructions = 0
        maxp.maxComponentElements = max(
            (len(getattr(g, 'components', None) or []) for g in glyf.glyphs.values()),
            default=0,
        )
        maxp.compile(font)

        post = font['post']
        post.formatType = 2.0
        post.extraNames = []
        post.mapping = {}
        post.glyphOrder = glyph_order
        try:
            post.compile(font)
        except OverflowError:
            post.formatType = 3

        font.sfntVersion = '\000\001\000\000'
        font.save(str(dest))
    finally:
        font.close()
    return dest


def make_otf_task(sources, name: str = 'ttf') -> Task:
    """Task converting every matched .otf into a .ttf beside it."""

    async def apply(paths):
        return [await asyncio.to_thread(otf_to_ttf, path) for path in paths]

    return Task(name, apply, sources=sources, doc='convert .otf to .ttf')
