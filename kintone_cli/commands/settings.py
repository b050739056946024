"""
Configuration/settings commands for kintone CLI.

Commands:
- configure: Configure CLI settings
- config-clear: Clear all configuration
"""

from typing import Optional

import click

from . import (
    KintoneContext,
    pass_context,
    print_success,
    print_info,
)
from ..utils import confirm_action


def _mask(value: str) -> str:
    if not value:
        return "(not set)"
    return value[:4] + "*" * max(len(value) - 4, 4)


def register_settings_commands(cli: click.Group) -> None:
    """Register configuration commands with the CLI."""

    @cli.command('configure')
    @click.option('--base-url', '-b', help='Base URL of the kintone domain')
    @click.option('--api-token', help='API token (comma-separated for several apps); replaces a stored username')
    @click.option('--username', '-u', help='Login name for password authentication; replaces a stored API token')
    @click.option('--password', '-p', help='Password for password authentication')
    @click.option('--guest-space-id', type=int, help='Guest space ID of the apps')
    @click.option('--timeout', '-t', type=int, help='Request timeout in seconds')
    @click.option(
        '--max-retries',
        type=int,
        help='Max retries for transient errors (0 to disable)'
    )
    @click.option(
        '--no-verify-ssl',
        is_flag=True,
        help='Disable SSL certificate verification'
    )
    @click.option('--show', is_flag=True, help='Show current configuration')
    @pass_context
    def configure(
        ctx: KintoneContext,
        base_url: Optional[str],
        api_token: Optional[str],
        username: Optional[str],
        password: Optional[str],
        guest_space_id: Optional[int],
        timeout: Optional[int],
        max_retries: Optional[int],
        no_verify_ssl: bool,
        show: bool
    ):
        """
        Configure kintone CLI settings.

        \b
        Examples:
          kintone configure --base-url https://example.cybozu.com --api-token TOKEN
          kintone configure --username user@example.com --password secret
          kintone configure --show
        """
        config_manager = ctx.config_manager

        if show:
            config = config_manager.get()
            click.echo("\nCurrent Configuration:")
            click.echo(f"  Base URL:        {config.base_url or '(not set)'}")
            click.echo(f"  API token:       {_mask(config.api_token)}")
            click.echo(f"  Username:        {config.username or '(not set)'}")
            click.echo(f"  Password:        {'********' if config.password else '(not set)'}")
            click.echo(f"  Guest space ID:  {config.guest_space_id or '-'}")
            click.echo(f"  Timeout:         {config.timeout}s")
            click.echo(f"  Max retries:     {config.max_retries}")
            click.echo(f"  Verify SSL:      {config.verify_ssl}")
            click.echo(f"  Config file:     {config_manager.config_file}")
            return

        updates = {}
        if base_url:
            updates['base_url'] = base_url.rstrip('/')
        if api_token:
            updates['api_token'] = api_token
        if username:
            updates['username'] = username
        if password:
            updates['password'] = password
        if guest_space_id is not None:
            updates['guest_space_id'] = guest_space_id
        if timeout is not None:
            updates['timeout'] = timeout
        if max_retries is not None:
            updates['max_retries'] = max_retries
        if no_verify_ssl:
            updates['verify_ssl'] = False

        if not updates:
            print_info("Nothing to update. Use --show to display the configuration.")
            return

        config_manager.update(**updates)
        print_success("Configuration saved.")

    @cli.command('config-clear')
    @click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
    @pass_context
    def config_clear(ctx: KintoneContext, yes: bool):
        """Clear all stored configuration, including credentials."""
        if not yes and not confirm_action("Clear all configuration?"):
            click.echo("Cancelled.")
            return

        ctx.config_manager.clear()
        print_success("Configuration cleared.")
