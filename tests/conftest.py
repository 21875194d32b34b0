"""Shared fixtures for assetpipe tests."""

from pathlib import Path

import pytest

from assetpipe.config import AssetpipeConfig


def _make_ttf(path: Path, family: str = 'Test') -> Path:
    """Write a minimal one-glyph TrueType font."""
    from fontTools.fontBuilder import FontBuilder
    from fontTools.pens.ttGlyphPen import TTGlyphPen

    def square():
        pen = TTGlyphPen(None)
        pen.moveTo((0, 0))
        pen.lineTo((0, 500))
        pen.lineTo((500, 500))
        pen.lineTo((500, 0))
        pen.closePath()
        return pen.glyph()

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(['.notdef', 'A'])
    fb.setupCharacterMap({65: 'A'})
    fb.setupGlyf({'.notdef': square(), 'A': square()})
    fb.setupHorizontalMetrics({'.notdef': (500, 0), 'A': (500, 0)})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({'familyName': family, 'styleName': 'Regular'})
    fb.setupOS2()
    fb.setupPost()
    path.parent.mkdir(parents=True, exist_ok=True)
    fb.save(str(path))
    return path


def _make_png(path: Path, color=(200, 30, 30)) -> Path:
    from PIL import Image

    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new('RGB', (8, 8), color).save(path, 'PNG')
    return path


ICON = ('<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">'
        '<path d="M0 0h24v24H0z" fill="#f00" stroke="#000" style="opacity:.5"/>'
        '</svg>')


@pytest.fixture
def project(tmp_path):
    """A small source tree covering every transform."""
    src = tmp_path / 'src'
    (src / 'components').mkdir(parents=True)
    (src / 'components' / 'header.html').write_text('<header>Site</header>')
    (src / 'index.html').write_text("<body>@include('components/header.html')</body>")
    (src / 'pages' / 'blog').mkdir(parents=True)
    (src / 'pages' / 'blog' / 'post.html').write_text('<p>post</p>')

    (src / 'scss').mkdir()
    (src / 'scss' / 'styles.scss').write_text('body { color: red; }')
    (src / 'js').mkdir()
    (src / 'js' / 'app.js').write_text('console.log("app");')

    _make_png(src / 'img' / 'logo.png')
    (src / 'img' / 'mark.svg').write_text(ICON)

    (src / 'resources').mkdir()
    (src / 'resources' / 'robots.txt').write_text('User-agent: *')

    (src / 'icons' / 'monochrome').mkdir(parents=True)
    (src / 'icons' / 'monochrome' / 'arrow.svg').write_text(ICON)
    (src / 'icons' / 'colorful').mkdir(parents=True)
    (src / 'icons' / 'colorful' / 'flag.svg').write_text(ICON)

    _make_ttf(src / 'fonts' / 'heading.ttf', 'Heading')
    return tmp_path


@pytest.fixture
def copy_config(project):
    """Configuration that replaces every external tool with cp."""
    config = AssetpipeConfig(base_path=project)
    config.commands.css_compile = 'cp {input} {output}'
    config.commands.css_compile_dev = 'cp {input} {output}'
    config.commands.css_postprocess = ''
    config.commands.css_minify = 'cp {input} {output}'
    config.commands.js_minify = 'cp {input} {output}'
    config.commands.svg_optimize = ''
    config.watch.debounce = 0
    return config


@pytest.fixture
def make_ttf():
    return _make_ttf


@pytest.fixture
def make_png():
    return _make_png
