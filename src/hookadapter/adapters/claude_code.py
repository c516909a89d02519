"""Adapter for the Claude Code hook protocol.

Input (stdin): {"session_id": ..., "cwd": ..., "hook_event_name": "PreToolUse",
                "tool_name": "Write", "tool_input": {"file_path": ...}, ...}

Output (stdout) depends on the event:
- PreToolUse: hookSpecificOutput with permissionDecision/permissionDecisionReason,
  plus updatedInput and additionalContext when present
- PostToolUse: hookSpecificOutput.additionalContext for allow,
  top-level decision "block" + reason for deny
- Stop / UserPromptSubmit / TaskCompleted: decision "block" + reason for deny,
  otherwise an empty object
"""

from __future__ import annotations

from typing import Any

from hookadapter.adapters.base import AgentHookInput, BaseAdapter
from hookadapter.types import (
    SESSION_BOUNDARY_EVENTS,
    Decision,
    EventKind,
    HookDecision,
    Operation,
)

PRE_TOOL_USE = "PreToolUse"
POST_TOOL_USE = "PostToolUse"
STOP = "Stop"
USER_PROMPT_SUBMIT = "UserPromptSubmit"
TASK_COMPLETED = "TaskCompleted"

# Claude Code feeds stderr back to the model when a hook exits with 2
EXIT_CODE_BLOCKING_ERROR = 2


class ClaudeCodeHookInput(AgentHookInput):
    """Claude Code stdin payload (fields common to all events)."""

    hook_event_name: str | None = None
    transcript_path: str | None = None
    permission_mode: str | None = None
    tool_use_id: str | None = None
    tool_response: dict[str, Any] | None = None


class ClaudeCodeAdapter(BaseAdapter):
    """Adapter for Claude Code hooks."""

    agent_name = "ClaudeCode"
    event_kinds = {
        PRE_TOOL_USE: EventKind.PRE_ACTION,
        POST_TOOL_USE: EventKind.POST_ACTION,
        STOP: EventKind.STOP,
        USER_PROMPT_SUBMIT: EventKind.PROMPT_SUBMIT,
        TASK_COMPLETED: EventKind.TASK_COMPLETE,
    }
    file_tools = {
        "Read": Operation.READ,
        "Write": Operation.WRITE,
        "Edit": Operation.EDIT,
        "MultiEdit": Operation.EDIT,
        "Update": Operation.EDIT,
    }
    input_model = ClaudeCodeHookInput

    def event_name_from(self, payload: dict[str, Any]) -> str | None:
        return payload.get("hook_event_name")

    def file_path_from(self, data: AgentHookInput, payload: dict[str, Any]) -> str | None:
        file_path = super().file_path_from(data, payload)
        if file_path:
            return file_path
        # PostToolUse may only report the path in the tool response
        response = payload.get("tool_response")
        if isinstance(response, dict) and isinstance(response.get("filePath"), str):
            return response["filePath"]
        return None

    def skip_envelope(self, kind: EventKind) -> dict[str, Any]:
        return {}

    def render(self, decision: HookDecision, kind: EventKind) -> dict[str, Any]:
        if kind in SESSION_BOUNDARY_EVENTS:
            return self._render_blockable(decision)
        if kind is EventKind.POST_ACTION:
            return self._render_post_tool_use(decision)
        return self._render_pre_tool_use(decision)

    def stderr_for(
        self, decision: HookDecision, kind: EventKind, exit_code: int
    ) -> str | None:
        if (
            kind is EventKind.TASK_COMPLETE
            and decision.decision is Decision.DENY
            and exit_code == EXIT_CODE_BLOCKING_ERROR
        ):
            return decision.message or None
        return None

    def _render_pre_tool_use(self, decision: HookDecision) -> dict[str, Any]:
        specific: dict[str, Any] = {
            "hookEventName": PRE_TOOL_USE,
            "permissionDecision": decision.decision.value,
            "permissionDecisionReason": decision.message,
        }
        if decision.updated_input is not None:
            specific["updatedInput"] = decision.updated_input
        # additionalContext reaches the model without blocking the tool
        if decision.decision is Decision.ALLOW and decision.message:
            specific["additionalContext"] = decision.message
        return {"hookSpecificOutput": specific}

    def _render_post_tool_use(self, decision: HookDecision) -> dict[str, Any]:
        output: dict[str, Any] = {"hookSpecificOutput": {"hookEventName": POST_TOOL_USE}}
        if decision.decision is Decision.DENY:
            output["decision"] = "block"
            output["reason"] = decision.message
        elif decision.decision is Decision.ALLOW and decision.message:
            output["hookSpecificOutput"]["additionalContext"] = decision.message
        return output

    def _render_blockable(self, decision: HookDecision) -> dict[str, Any]:
        if decision.decision is Decision.DENY:
            return {"decision": "block", "reason": decision.message}
        return {}
