"""Output locations for transforms.

An OutputDir maps a matched source file to its destination, preserving the
sub-directory structure below the source pattern's static prefix.

Example:
    out = OutputDir("build/js", suffix=".min")
    out.dest(Path("vendor/app.js"))  # build/js/vendor/app.min.js
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .sources import Sources


@dataclass
class OutputDir:
    """Destination directory with optional renaming.

    Attributes:
        path: Destination directory
        suffix: Inserted before the file extension (".min" -> "a.min.css")
        extension: Replaces the file extension (".webp" -> "a.webp")
    """
    path: Union[str, Path]
    suffix: str = ''
    extension: Optional[str] = None

    def __post_init__(self):
        self.path = Path(self.path)

    def dest(self, relative: Union[str, Path]) -> Path:
        """Render the destination for a base-relative source path."""
        relative = Path(relative)
        extension = self.extension if self.extension is not None else relative.suffix
        name = relative.stem + self.suffix + extension
        return self.path / relative.parent / name

    def dest_for(self, source: Path, sources: Sources) -> Path:
        """Render the destination for a matched source file."""
        return self.dest(sources.relative_to_base(source))

    def with_options(self, suffix: str = '', extension: Optional[str] = None) -> 'OutputDir':
        """Return a sibling OutputDir writing to the same directory."""
        return OutputDir(self.path, suffix=suffix, extension=extension)
