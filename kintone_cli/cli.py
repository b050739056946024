"""
kintone CLI - Command Line Interface for kintone apps.

This module provides the main CLI entry point and registers the commands for:
- Configuration management
- Field schema inspection
- Record export and import (CSV/JSON)
"""

import logging
from pathlib import Path
from typing import Optional

import click

from . import __version__, __prog_name__
from .config import get_config_manager
from .commands import KintoneContext
from .commands.records import register_record_commands
from .commands.settings import register_settings_commands

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name=__prog_name__)
@click.option(
    '--config-dir',
    type=click.Path(path_type=Path),
    envvar='KINTONE_CONFIG_DIR',
    help='Custom configuration directory'
)
@click.pass_context
def cli(ctx, config_dir: Optional[Path]):
    """
    kintone CLI - export and import kintone app records.

    \b
    Quick Start:
      1. Configure:          kintone configure --base-url https://example.cybozu.com --api-token TOKEN
      2. Inspect an app:     kintone fields 12
      3. Export records:     kintone export 12 -o records.csv
      4. Import records:     kintone import 12 records.csv

    \b
    Environment Variables:
      KINTONE_BASE_URL     - Base URL of the kintone domain
      KINTONE_API_TOKEN    - API token
      KINTONE_USERNAME     - Login name (password authentication)
      KINTONE_PASSWORD     - Password (password authentication)
      KINTONE_CONFIG_DIR   - Custom configuration directory
    """
    ctx.ensure_object(KintoneContext)
    ctx.obj.config_manager = get_config_manager(config_dir)


register_settings_commands(cli)
register_record_commands(cli)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
