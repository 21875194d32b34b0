"""Configuration loaded from assetpipe.yaml."""

from ..exceptions import ConfigParseError
from .parser import (
    DEFAULT_CONFIG_FILE,
    AssetpipeConfig,
    CommandsConfig,
    FontsConfig,
    ImagesConfig,
    PathsConfig,
    WatchConfig,
    parse_yaml_file,
    parse_yaml_string,
)

__all__ = [
    'DEFAULT_CONFIG_FILE',
    'AssetpipeConfig',
    'CommandsConfig',
    'ConfigParseError',
    'FontsConfig',
    'ImagesConfig',
    'PathsConfig',
    'WatchConfig',
    'parse_yaml_file',
    'parse_yaml_string',
]
