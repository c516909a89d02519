"""Route an `Agent.Event` token to an adapter and its callbacks.

Routing problems are configuration errors: they are raised before stdin is
read and are never converted into a fail-open response.
"""

from __future__ import annotations

from typing import TextIO

import structlog

from hookadapter import engine
from hookadapter.adapters import BaseAdapter, ClaudeCodeAdapter, GeminiCliAdapter
from hookadapter.exceptions import HookConfigurationError
from hookadapter.types import HookCallback

logger = structlog.get_logger(__name__)

TOKEN_FORMAT_HELP = "Invalid hook format. Use: AgentName.EventName (e.g., ClaudeCode.PreToolUse)"

ADAPTERS: dict[str, type[BaseAdapter]] = {
    "claudecode": ClaudeCodeAdapter,
    "geminicli": GeminiCliAdapter,
}


def normalize_agent(agent: str) -> str:
    """Normalize an agent name: case-insensitive, `-` and `_` ignored."""
    return agent.replace("-", "").replace("_", "").lower()


def split_token(token: str) -> tuple[str, str]:
    """Split an `Agent.Event` token.

    Raises:
        HookConfigurationError: Unless the token has exactly two non-empty parts
    """
    parts = token.split(".")
    if len(parts) != 2 or not all(parts):
        raise HookConfigurationError(TOKEN_FORMAT_HELP)
    return parts[0], parts[1]


def get_adapter_class(agent: str) -> type[BaseAdapter]:
    """Look up the adapter class for an agent name.

    Raises:
        HookConfigurationError: If the agent is not supported
    """
    adapter_cls = ADAPTERS.get(normalize_agent(agent))
    if adapter_cls is None:
        supported = ", ".join(cls.agent_name for cls in ADAPTERS.values())
        raise HookConfigurationError(
            f"Unsupported agent: {agent}. Supported agents: {supported}"
        )
    return adapter_cls


def canonical_token(token: str) -> str:
    """Rewrite a token with the adapter's canonical agent name."""
    agent, event = split_token(token)
    return f"{get_adapter_class(agent).agent_name}.{event}"


class HookRegistry:
    """Ordered callbacks per canonical `Agent.Event` token."""

    def __init__(self) -> None:
        self._callbacks: dict[str, list[HookCallback]] = {}

    def register(self, token: str, callback: HookCallback) -> None:
        """Append a callback for a token. Callbacks run in registration order."""
        self._callbacks.setdefault(canonical_token(token), []).append(callback)

    def get(self, token: str) -> list[HookCallback]:
        """Callbacks for a token, empty if none are registered."""
        return list(self._callbacks.get(canonical_token(token), []))

    def tokens(self) -> list[str]:
        return sorted(self._callbacks)


def resolve(token: str, registry: HookRegistry) -> tuple[BaseAdapter, list[HookCallback]]:
    """Resolve a routing token.

    Args:
        token: `Agent.Event`, e.g. "ClaudeCode.PreToolUse" or "claude-code.PreToolUse"
        registry: Registered callbacks

    Returns:
        Tuple of (adapter, callbacks)

    Raises:
        HookConfigurationError: For a malformed token, an unsupported agent or
            event, or a token with no registered callbacks
    """
    agent, event = split_token(token)
    adapter_cls = get_adapter_class(agent)
    adapter = adapter_cls(default_event=event)

    callbacks = registry.get(token)
    if not callbacks:
        registered = ", ".join(registry.tokens()) or "(none)"
        raise HookConfigurationError(
            f"No callbacks registered for {adapter_cls.agent_name}.{event}. "
            f"Registered hooks: {registered}"
        )
    return adapter, callbacks


def dispatch(
    token: str,
    registry: HookRegistry,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Resolve a token and run the hook.

    Returns:
        Process exit status

    Raises:
        HookConfigurationError: If routing fails (stdin is left unread)
    """
    adapter, callbacks = resolve(token, registry)
    logger.debug("hook.dispatch", token=token, callbacks=len(callbacks))
    return engine.run(
        adapter,
        callbacks,
        stdin=stdin,
        stdout=stdout,
        stderr=stderr,
        hook_name=token,
    )
