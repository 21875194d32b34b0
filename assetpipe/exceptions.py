"""Exception types raised by assetpipe."""

from typing import Optional


class AssetpipeError(Exception):
    """Base class for all assetpipe errors."""
    pass


class TransformError(AssetpipeError):
    """An external transform tool reported an error on its input.

    Attributes:
        command: The command line that failed, if the tool was a subprocess
        stderr: Captured error output of the tool
    """

    def __init__(self, message: str, command: Optional[str] = None,
                 stderr: Optional[str] = None):
        super().__init__(message)
        self.command = command
        self.stderr = stderr


class DuplicateTaskError(AssetpipeError):
    """A task with the same name was already registered."""
    pass


class ConfigParseError(AssetpipeError):
    """Error parsing or validating a configuration file."""
    pass
