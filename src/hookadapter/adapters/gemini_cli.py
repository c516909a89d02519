"""Adapter for the Gemini CLI hook protocol.

Gemini CLI has no silent response: every hook answer carries a decision, so a
skipped callback is reported as ALLOW.
"""

from __future__ import annotations

from typing import Any

from hookadapter.adapters.base import AgentHookInput, BaseAdapter
from hookadapter.types import Decision, EventKind, HookDecision, Operation

BEFORE_TOOL = "BeforeTool"
AFTER_TOOL = "AfterTool"

_DECISIONS = {
    Decision.ALLOW: "ALLOW",
    Decision.DENY: "DENY",
    Decision.ASK: "ASK_USER",
}


class GeminiCliHookInput(AgentHookInput):
    """Gemini CLI stdin payload."""

    hook_event_name: str | None = None
    event: str | None = None


class GeminiCliAdapter(BaseAdapter):
    """Adapter for Gemini CLI hooks."""

    agent_name = "GeminiCli"
    event_kinds = {
        BEFORE_TOOL: EventKind.PRE_ACTION,
        AFTER_TOOL: EventKind.POST_ACTION,
    }
    file_tools = {
        "read_file": Operation.READ,
        "write_file": Operation.WRITE,
        "replace": Operation.EDIT,
    }
    input_model = GeminiCliHookInput

    def event_name_from(self, payload: dict[str, Any]) -> str | None:
        return payload.get("hook_event_name") or payload.get("event")

    def file_path_from(self, data: AgentHookInput, payload: dict[str, Any]) -> str | None:
        for key in ("file_path", "absolute_path"):
            value = data.tool_input.get(key)
            if isinstance(value, str) and value:
                return value
        return None

    def skip_envelope(self, kind: EventKind) -> dict[str, Any]:
        return {"decision": _DECISIONS[Decision.ALLOW]}

    def render(self, decision: HookDecision, kind: EventKind) -> dict[str, Any]:
        output: dict[str, Any] = {"decision": _DECISIONS[decision.decision]}
        if decision.message:
            output["message"] = decision.message
        if decision.updated_input is not None:
            output["updatedInput"] = decision.updated_input
        return output
