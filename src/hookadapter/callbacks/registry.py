"""Default wiring of callbacks to routing tokens."""

from __future__ import annotations

from hookadapter.callbacks.code_review import CodeReviewHook, CommandReviewer
from hookadapter.callbacks.design_patterns import DesignPatternHook, SuffixPatternSource
from hookadapter.callbacks.phantom_code import PhantomCodeCheckHook
from hookadapter.config import HookAdapterSettings
from hookadapter.dispatch import HookRegistry
from hookadapter.store import ExecutionLogStore


def build_default_registry(
    store: ExecutionLogStore | None = None,
    config: HookAdapterSettings | None = None,
) -> HookRegistry:
    """Build the registry used by the `hookadapter hook` command.

    Args:
        store: Execution log store. Defaults to one at config.db_path.
        config: Settings to build callbacks from. Defaults to the global settings.

    Returns:
        HookRegistry covering every supported Agent.Event token
    """
    if config is None:
        from hookadapter.config import settings

        config = settings
    if store is None:
        store = ExecutionLogStore(config.db_path)

    reviewer = (
        CommandReviewer(config.review_command, timeout=config.review_timeout)
        if config.review_command
        else None
    )
    design = DesignPatternHook(store, SuffixPatternSource(config.patterns))
    review = CodeReviewHook(store, reviewer, debounce_ms=config.review_debounce_ms)
    phantom = PhantomCodeCheckHook(config.scaffold_marker)

    registry = HookRegistry()
    registry.register("ClaudeCode.PreToolUse", design.pre_tool_use)
    registry.register("ClaudeCode.PostToolUse", review.post_tool_use)
    registry.register("ClaudeCode.Stop", phantom.stop)
    registry.register("ClaudeCode.UserPromptSubmit", phantom.user_prompt_submit)
    registry.register("ClaudeCode.TaskCompleted", phantom.task_completed)
    registry.register("GeminiCli.BeforeTool", design.pre_tool_use)
    registry.register("GeminiCli.AfterTool", review.post_tool_use)
    return registry
