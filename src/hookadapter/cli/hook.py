"""hookadapter hook command.

Agents invoke this command as their hook, e.g. for Claude Code:

    {"type": "command", "command": "hookadapter hook --type ClaudeCode.PreToolUse"}
"""

import sys

import click

from hookadapter.exceptions import HookConfigurationError


@click.command()
@click.option(
    "--type",
    "hook_type",
    required=True,
    help="Routing token AgentName.EventName (e.g. ClaudeCode.PreToolUse)",
)
def hook(hook_type: str) -> None:
    """Run a hook: read the agent event on stdin, answer on stdout."""
    from hookadapter.callbacks import build_default_registry
    from hookadapter.config import settings
    from hookadapter.dispatch import dispatch
    from hookadapter.logging import configure_logging

    configure_logging(log_level=settings.log_level, log_format=settings.log_format)

    try:
        exit_code = dispatch(hook_type, build_default_registry())
    except HookConfigurationError as e:
        raise click.ClickException(str(e)) from e

    sys.exit(exit_code)
