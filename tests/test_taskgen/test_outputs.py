"""Tests for assetpipe.taskgen.outputs module."""

from pathlib import Path

from assetpipe.taskgen.outputs import OutputDir
from assetpipe.taskgen.sources import Sources


class TestOutputDirDest:
    """Tests for OutputDir.dest()."""

    def test_plain_copy(self):
        out = OutputDir("build/js")
        assert out.dest("vendor/app.js") == Path("build/js/vendor/app.js")

    def test_suffix(self):
        """Test suffix inserted before the extension."""
        out = OutputDir("build/js", suffix=".min")
        assert out.dest(Path("app.js")) == Path("build/js/app.min.js")

    def test_extension(self):
        """Test extension replacement."""
        out = OutputDir("build/css", extension=".css")
        assert out.dest("styles.scss") == Path("build/css/styles.css")

    def test_suffix_and_extension(self):
        out = OutputDir("build/css", suffix=".min", extension=".css")
        assert out.dest("theme/dark.scss") == Path("build/css/theme/dark.min.css")

    def test_path_coerced(self):
        assert isinstance(OutputDir("build").path, Path)


class TestOutputDirDestFor:
    """Tests for OutputDir.dest_for() with matched sources."""

    def test_keeps_structure_below_prefix(self, tmp_path):
        sources = Sources("src/pages/**/*.html", base_path=tmp_path)
        out = OutputDir(tmp_path / "build")
        dest = out.dest_for(tmp_path / "src/pages/blog/post.html", sources)
        assert dest == tmp_path / "build/blog/post.html"

    def test_with_options_shares_directory(self, tmp_path):
        out = OutputDir(tmp_path / "build/js")
        minified = out.with_options(suffix=".min")
        assert minified.path == out.path
        assert minified.dest("app.js") == tmp_path / "build/js/app.min.js"
        assert out.suffix == ""
