"""Protocol adapters for supported coding agents.

Each adapter parses the agent's stdin payload into a HookEvent and formats a
HookDecision into the agent's stdout envelope:
- ClaudeCode: PreToolUse, PostToolUse, Stop, UserPromptSubmit, TaskCompleted
- GeminiCli: BeforeTool, AfterTool
"""

from hookadapter.adapters.base import (
    AgentHookInput,
    BaseAdapter,
    FormattedOutput,
    load_payload,
)
from hookadapter.adapters.claude_code import ClaudeCodeAdapter
from hookadapter.adapters.gemini_cli import GeminiCliAdapter

__all__ = [
    "AgentHookInput",
    "BaseAdapter",
    "ClaudeCodeAdapter",
    "FormattedOutput",
    "GeminiCliAdapter",
    "load_payload",
]
