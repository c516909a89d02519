"""Execution engine for a single hook process.

Reads the whole stdin payload, runs the callbacks, and writes at most one
response envelope. Runtime failures never block the agent: they are turned
into an allow decision carrying the error text (fail-open).
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TextIO

import structlog

from hookadapter.adapters.base import BaseAdapter
from hookadapter.logging import log_hook_error
from hookadapter.types import HookCallback, HookDecision, HookEvent

logger = structlog.get_logger(__name__)

HOOK_ERROR_PREFIX = "⚠️ Hook error:"


def select_decision(
    event: HookEvent,
    callbacks: Sequence[HookCallback],
) -> HookDecision | None:
    """Run every callback and pick the first non-skip decision.

    All callbacks run even after a decision is found, since callbacks may
    record state in the execution log.

    Returns:
        The selected decision, or None if every callback skipped
    """
    selected: HookDecision | None = None
    for index, callback in enumerate(callbacks):
        decision = callback(event)
        if decision.is_skip:
            logger.debug("hook.callback_skipped", index=index, reason=decision.message)
            continue
        if selected is None:
            selected = decision
    return selected


def run(
    adapter: BaseAdapter,
    callbacks: HookCallback | Sequence[HookCallback],
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    hook_name: str = "hook",
) -> int:
    """Run one hook invocation.

    Args:
        adapter: Adapter for the calling agent
        callbacks: A callback or an ordered list of callbacks
        stdin: Input stream (defaults to sys.stdin)
        stdout: Output stream for the response envelope (defaults to sys.stdout)
        stderr: Stream for user-facing text (defaults to sys.stderr)
        hook_name: Name recorded in the hook error log

    Returns:
        Process exit status
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr
    if callable(callbacks):
        callbacks = [callbacks]

    event: HookEvent | None = None
    body_written = False
    try:
        event = adapter.parse(stdin.read())
        decision = select_decision(event, callbacks)
        if decision is None:
            logger.debug("hook.all_skipped", hook=hook_name)
            return 0

        output = adapter.format(decision, event)
        _write(stdout, output.body)
        body_written = True
        if decision.user_message:
            _write(stderr, decision.user_message)
        if output.stderr:
            _write(stderr, output.stderr)
        logger.info(
            "hook.completed",
            hook=hook_name,
            decision=decision.decision.value,
            exit_code=output.exit_code,
        )
        return output.exit_code
    except Exception as e:
        log_hook_error(hook_name, e)
        # stdout carries at most one response document
        if body_written:
            return 0
        fallback = adapter.format(HookDecision.allow(f"{HOOK_ERROR_PREFIX} {e}"), event)
        _write(stdout, fallback.body)
        return 0


def _write(stream: TextIO, text: str) -> None:
    stream.write(text)
    if not text.endswith("\n"):
        stream.write("\n")
    stream.flush()
