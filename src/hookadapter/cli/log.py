"""hookadapter execution log CLI commands."""

import click

from hookadapter.store import ExecutionLogStore


@click.group()
def log() -> None:
    """Execution log commands."""
    pass


@log.command()
@click.option("--session", "session_id", default=None, help="Only count this session")
def stats(session_id: str | None) -> None:
    """Show execution log statistics."""
    result = ExecutionLogStore().get_stats(session_id)

    if session_id is not None:
        click.echo(f"Session: {session_id}")
    click.echo(f"{'Entries':<20} {result.total_entries}")
    click.echo(f"{'Sessions':<20} {result.unique_sessions}")
    click.echo(f"{'Files':<20} {result.unique_files}")


@log.command()
@click.option("--session", "session_id", default=None, help="Only clear this session")
def clear(session_id: str | None) -> None:
    """Delete execution log entries."""
    deleted = ExecutionLogStore().clear_log(session_id)
    scope = f"session {session_id}" if session_id is not None else "all sessions"
    click.echo(f"Cleared {deleted} entries ({scope})")
