"""Source globs for transforms and watch bindings.

Pattern syntax:
- * - any run of non-slash characters
- ** - any number of directories (including none)
- ? - a single non-slash character
- {a,b} - alternation, expanded before globbing

Example:
    sources = Sources(["src/*.html", "src/pages/**/*.html"], base_path=root)
    for path in sources.match():
        print(sources.relative_to_base(path))  # "index.html", "blog/post.html"
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union
import re

_WILDCARDS = '*?[{'


def expand_braces(pattern: str) -> List[str]:
    """Expand {a,b} alternations into separate patterns.

    Examples:
        "img/*.{png,jpg}" -> ["img/*.png", "img/*.jpg"]
        "a/{b,c}/{d,e}" -> ["a/b/d", "a/b/e", "a/c/d", "a/c/e"]
    """
    start = pattern.find('{')
    if start == -1:
        return [pattern]
    end = pattern.find('}', start)
    if end == -1:
        return [pattern]

    head, tail = pattern[:start], pattern[end + 1:]
    expanded = []
    for option in pattern[start + 1:end].split(','):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


def static_prefix(pattern: str) -> str:
    """Extract the directory portion before the first wildcard.

    Examples:
        "src/js/**/*.js" -> "src/js/"
        "src/*.html" -> "src/"
        "*.txt" -> ""
        "src/scss/styles.scss" -> "src/scss/"
    """
    positions = [pattern.find(c) for c in _WILDCARDS if c in pattern]
    prefix = pattern[:min(positions)] if positions else pattern

    last_slash = prefix.rfind('/')
    if last_slash == -1:
        return ""
    return prefix[:last_slash + 1]


def compile_pattern(pattern: str) -> re.Pattern:
    """Compile a single (brace-free) glob pattern into an anchored regex."""
    parts = []
    i = 0
    while i < len(pattern):
        if pattern.startswith('**/', i):
            parts.append('(?:.*/)?')
            i += 3
        elif pattern.startswith('**', i):
            parts.append('.*')
            i += 2
        elif pattern[i] == '*':
            parts.append('[^/]*')
            i += 1
        elif pattern[i] == '?':
            parts.append('[^/]')
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile('^' + ''.join(parts) + '$')


@dataclass
class Sources:
    """A set of glob patterns resolved against a base path.

    Attributes:
        patterns: Glob patterns, relative to base_path
        base_path: Directory the patterns are resolved against (defaults to cwd)
    """
    patterns: Union[str, List[str]]
    base_path: Optional[Path] = None

    _expanded: List[str] = field(init=False, repr=False, default_factory=list)
    _regexes: List[re.Pattern] = field(init=False, repr=False, default_factory=list)

    def __post_init__(self):
        if isinstance(self.patterns, str):
            self.patterns = [self.patterns]
        else:
            self.patterns = list(self.patterns)

        if self.base_path is None:
            self.base_path = Path.cwd()
        elif isinstance(self.base_path, str):
            self.base_path = Path(self.base_path)

        self._expanded = []
        for pattern in self.patterns:
            self._expanded.extend(expand_braces(pattern))
        self._regexes = [compile_pattern(p) for p in self._expanded]

    def match(self) -> List[Path]:
        """Return the files matching any pattern, sorted and de-duplicated."""
        found = set()
        for pattern in self._expanded:
            for path in self.base_path.glob(pattern):
                if path.is_file():
                    found.add(path)
        return sorted(found)

    def matches(self, path: Union[str, Path]) -> bool:
        """Check whether a path (absolute or base-relative) is in scope."""
        return self._match_index(path) is not None

    def relative_to_base(self, path: Union[str, Path]) -> Path:
        """Return path relative to the static prefix of the pattern it matches.

        This mirrors how glob-based copies keep sub-directory structure:
        "src/pages/**/*.html" maps "src/pages/blog/a.html" to "blog/a.html".
        """
        index = self._match_index(path)
        if index is None:
            raise ValueError(f"{path} does not match {self.patterns}")
        relative = self._relative_key(path)
        prefix = static_prefix(self._expanded[index])
        return Path(relative[len(prefix):])

    def _match_index(self, path: Union[str, Path]) -> Optional[int]:
        key = self._relative_key(path)
        if key is None:
            return None
        for index, regex in enumerate(self._regexes):
            if regex.match(key):
                return index
        return None

    def _relative_key(self, path: Union[str, Path]) -> Optional[str]:
        """Convert a path to a POSIX key relative to base_path."""
        path = Path(path)
        if path.is_absolute():
            try:
                path = path.relative_to(self.base_path)
            except ValueError:
                try:
                    path = path.resolve().relative_to(self.base_path.resolve())
                except ValueError:
                    return None
        return path.as_posix()

    def __str__(self) -> str:
        return ', '.join(self.patterns)
