"""Command line interface.

    assetpipe build   one-shot production build; exit 1 if any transform failed
    assetpipe watch   development build, then rebuild and reload on changes
    assetpipe ttf     convert .otf sources to .ttf and exit
"""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional, Union

from .config import DEFAULT_CONFIG_FILE, AssetpipeConfig, parse_yaml_file
from .exceptions import AssetpipeError
from .executor import Profile, ProfileExecutor
from .graph import sequence
from .logging_setup import setup_logging
from .pipeline import Pipeline, build_pipeline
from .task import RunReport, Status

PROFILES = ('build', 'watch', 'ttf')


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    base_path: Optional[Union[str, Path]] = None,
) -> AssetpipeConfig:
    """Load the configuration file, falling back to defaults.

    An explicitly given config file must exist; the default one is optional.
    """
    if config_path is not None:
        config = parse_yaml_file(config_path)
    elif Path(DEFAULT_CONFIG_FILE).exists():
        config = parse_yaml_file(DEFAULT_CONFIG_FILE)
    else:
        config = AssetpipeConfig()

    if base_path is not None:
        config.base_path = Path(base_path)
    config.base_path = config.base_path.resolve()
    return config


def run_profile(pipeline: Pipeline, name: str) -> RunReport:
    """Run one profile (or the ttf utility) to completion."""
    if name == 'ttf':
        profile = Profile('ttf', sequence(pipeline.utilities['ttf'], name='ttf'))
    else:
        profile = pipeline.profiles[name]
    return asyncio.run(ProfileExecutor().run(profile))


def main(args: Optional[List[str]] = None) -> int:
    """CLI entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    import argparse

    parser = argparse.ArgumentParser(
        description='Build front-end assets',
        prog='assetpipe',
    )
    parser.add_argument(
        'profile',
        nargs='?',
        default='watch',
        choices=PROFILES,
        help='Profile to run (default: watch)',
    )
    parser.add_argument(
        '-c', '--config',
        default=None,
        help=f'Path to the YAML config (default: {DEFAULT_CONFIG_FILE} if present)',
    )
    parser.add_argument(
        '--base-path',
        default=None,
        help='Override the project root for all configured paths',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log every task and command',
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Print the task graph and watch bindings without running anything',
    )

    parsed = parser.parse_args(args)
    setup_logging(parsed.verbose)

    try:
        config = load_config(parsed.config, parsed.base_path)
        pipeline = build_pipeline(config)

        if parsed.dry_run:
            print(f"Project: {config.base_path}")
            for line in pipeline.describe():
                print(line)
            return 0

        report = run_profile(pipeline, parsed.profile)

    except KeyboardInterrupt:
        # The only way out of a watch session.
        print("Stopped watching", file=sys.stderr)
        return 0
    except (FileNotFoundError, AssetpipeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if report.status is Status.FAILURE:
        for failure in report.failures:
            print(f"FAILED {failure.name}: {failure.reason}", file=sys.stderr)
        return 1

    done = [r for r in report.results if r.status is Status.SUCCESS]
    print(f"Completed {len(done)} task(s), "
          f"{len(report.results) - len(done)} skipped")
    return 0
