"""CLI entry point for assetpipe.

Usage:
    python -m assetpipe [options] [build|watch|ttf]

Example:
    python -m assetpipe build
    python -m assetpipe --config site/assetpipe.yaml watch
    python -m assetpipe --dry-run build
"""

from .cli import main
import sys

if __name__ == '__main__':
    sys.exit(main())
