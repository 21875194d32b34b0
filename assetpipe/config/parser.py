"""YAML parsing and validation for assetpipe configuration.

Every section is optional; missing keys keep their defaults.

Example assetpipe.yaml:
    paths:
      src: src
      build: dist

    commands:
      css_minify: "csso {input} --output {output}"
      svg_optimize: ""          # empty disables the step

    watch:
      debounce: 0.2
      max_concurrent: 2
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from ..exceptions import ConfigParseError

DEFAULT_CONFIG_FILE = 'assetpipe.yaml'


@dataclass
class PathsConfig:
    """Source globs and output locations, relative to the base path."""
    src: str = 'src'
    build: str = 'build'
    markup: List[str] = field(default_factory=lambda: ['src/*.html', 'src/pages/**/*.html'])
    markup_watch: List[str] = field(default_factory=lambda: [
        'src/*.html', 'src/components/**/*.html', 'src/pages/**/*.html'])
    styles: List[str] = field(default_factory=lambda: ['src/scss/styles.scss'])
    styles_watch: List[str] = field(default_factory=lambda: ['src/scss/**/*.scss'])
    scripts: List[str] = field(default_factory=lambda: ['src/js/**/*.js'])
    images: List[str] = field(default_factory=lambda: [
        'src/img/**/*.{jpg,jpeg,png,gif,svg,ico,webp}'])
    resources: List[str] = field(default_factory=lambda: ['src/resources/**/*'])
    icons_monochrome: List[str] = field(default_factory=lambda: ['src/icons/monochrome/**/*.svg'])
    icons_colorful: List[str] = field(default_factory=lambda: ['src/icons/colorful/**/*.svg'])
    icons_prebuilt: str = 'src/icons/pre-built'
    fonts: List[str] = field(default_factory=lambda: ['src/fonts/**/*.ttf'])
    otf_fonts: List[str] = field(default_factory=lambda: ['src/fonts/**/*.otf'])
    font_manifest: str = 'src/scss/.generated/_font-families.scss'


@dataclass
class CommandsConfig:
    """Shell templates for external tools; "" disables optional steps."""
    css_compile: str = 'sass --no-source-map --style=expanded {input} {output}'
    css_compile_dev: str = 'sass --embed-source-map --style=expanded {input} {output}'
    css_postprocess: str = 'postcss {output} --use autoprefixer --replace'
    css_minify: str = 'cleancss -O2 -o {output} {input}'
    js_minify: str = 'terser {input} --compress --mangle --output {output}'
    svg_optimize: str = 'svgo --pretty --input {input} --output {output}'


@dataclass
class WatchConfig:
    debounce: float = 0.1
    max_concurrent: int = 4
    polling: bool = False


@dataclass
class ImagesConfig:
    webp: bool = True
    quality: int = 80


@dataclass
class FontsConfig:
    directive: str = '@include font({name}, {name});\n'


@dataclass
class AssetpipeConfig:
    """Parsed configuration."""
    base_path: Path = field(default_factory=Path.cwd)
    paths: PathsConfig = field(default_factory=PathsConfig)
    commands: CommandsConfig = field(default_factory=CommandsConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)
    images: ImagesConfig = field(default_factory=ImagesConfig)
    fonts: FontsConfig = field(default_factory=FontsConfig)

    def path(self, relative: str) -> Path:
        """Resolve a configured path against base_path."""
        return self.base_path / relative

    @property
    def build_dir(self) -> Path:
        return self.path(self.paths.build)


SECTIONS = {
    'paths': PathsConfig,
    'commands': CommandsConfig,
    'watch': WatchConfig,
    'images': ImagesConfig,
    'fonts': FontsConfig,
}


def parse_yaml_file(path: Union[str, Path]) -> AssetpipeConfig:
    """Parse and validate a configuration file.

    The base path defaults to the directory holding the file.

    Raises:
        ConfigParseError: If the file is invalid
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding='utf-8') as f:
        config = parse_yaml_string(f.read())
    config.base_path = path.parent.resolve()
    return config


def parse_yaml_string(content: str) -> AssetpipeConfig:
    """Parse configuration from a YAML string."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML syntax: {e}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigParseError("YAML root must be a mapping")

    return _validate_config_data(data)


def _validate_config_data(data: Dict[str, Any]) -> AssetpipeConfig:
    config = AssetpipeConfig()
    for section, values in data.items():
        if section not in SECTIONS:
            raise ConfigParseError(
                f"Unknown section '{section}'. Valid sections: {sorted(SECTIONS)}"
            )
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ConfigParseError(f"'{section}' must be a mapping")
        setattr(config, section, _validate_section(section, values))

    if config.watch.max_concurrent < 1:
        raise ConfigParseError("'watch.max_concurrent' must be at least 1")
    return config


def _validate_section(section: str, values: Dict[str, Any]):
    """Build a section dataclass, checking each value against its default."""
    cls = SECTIONS[section]
    defaults = cls()
    known = {f.name for f in fields(cls)}

    for key, value in values.items():
        if key not in known:
            raise ConfigParseError(
                f"'{section}': unknown key '{key}'. Valid keys: {sorted(known)}"
            )
        setattr(defaults, key, _coerce(section, key, value, getattr(defaults, key)))
    return defaults


def _coerce(section: str, key: str, value: Any, default: Any) -> Any:
    where = f"'{section}.{key}'"

    if isinstance(default, list):
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigParseError(f"{where} must be a string or a list of strings")
        return value

    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ConfigParseError(f"{where} must be true or false")
        return value

    if isinstance(default, (int, float)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigParseError(f"{where} must be a number")
        if value < 0:
            raise ConfigParseError(f"{where} must not be negative")
        return type(default)(value)

    if value is None:
        return ''
    if not isinstance(value, str):
        raise ConfigParseError(f"{where} must be a string")
    return value
