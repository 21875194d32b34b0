# assetpipe/logging_setup.py

import logging
import sys


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - allow all assetpipe logs
    - third-party libraries (watchdog, PIL, fontTools) only at WARNING+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "assetpipe" or record.name.startswith("assetpipe."):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(verbose: bool = False) -> None:
    """
    Install a single stderr handler on the root logger.

    Call this once, before the first task runs.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    logging.captureWarnings(True)
