"""Glob-matched inputs and output locations for transforms.

Classes:
    Sources: Glob patterns resolved against a base path
    OutputDir: Destination directory with rename options

Functions:
    expand_braces: Expand {a,b} alternations
    static_prefix: Directory portion of a pattern before the first wildcard
"""

from .sources import Sources, expand_braces, static_prefix, compile_pattern
from .outputs import OutputDir

__all__ = [
    'Sources', 'expand_braces', 'static_prefix', 'compile_pattern',
    'OutputDir',
]
