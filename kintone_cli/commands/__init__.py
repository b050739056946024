"""
Command modules for kintone CLI.

Shared context, decorators and output helpers used by every command.
"""

import sys

import click

from ..config import ConfigManager
from ..utils import (
    print_success,
    print_error,
    print_info,
    print_warning,
)


class KintoneContext:
    """CLI context object for sharing state between commands."""

    def __init__(self):
        self.config_manager: ConfigManager = None  # type: ignore[assignment]


pass_context = click.make_pass_decorator(KintoneContext, ensure=True)


def common_options(f):
    """Common options for all commands."""
    f = click.option(
        '-v', '--verbose',
        is_flag=True,
        help='Enable verbose output'
    )(f)
    f = click.option(
        '-q', '--quiet',
        is_flag=True,
        help='Suppress non-essential output'
    )(f)
    return f


def require_config(f):
    """Decorator to require valid configuration."""
    @click.pass_context
    def wrapper(click_ctx, *args, **kwargs):
        ctx = click_ctx.ensure_object(KintoneContext)
        config = ctx.config_manager.get()

        if not config.is_configured():
            print_error(
                "kintone CLI is not configured.",
                "Run 'kintone configure --base-url URL --api-token TOKEN' first."
            )
            sys.exit(1)

        return click_ctx.invoke(f, *args, **kwargs)

    return wrapper


__all__ = [
    "KintoneContext",
    "pass_context",
    "common_options",
    "require_config",
    "print_success",
    "print_error",
    "print_info",
    "print_warning",
]
