"""Detect scaffold files that were generated but never implemented.

Scaffolded files carry a marker comment until the agent fills them in. At
session boundaries the working directory is scanned for that marker.
"""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from hookadapter.types import HookDecision, HookEvent

logger = structlog.get_logger(__name__)

DEFAULT_MARKER = "@scaffold-generated"
EXCLUDED_DIRS = frozenset(
    {"node_modules", "dist", ".git", ".next", "build", "coverage", ".claude"}
)
SOURCE_SUFFIXES = (".ts", ".tsx", ".js", ".jsx", ".py")

# Exit status Claude Code treats as a blocking error for TaskCompleted
TASK_BLOCKING_EXIT_CODE = 2


class PhantomCodeCheckHook:
    """Block session boundaries while scaffold markers remain."""

    def __init__(self, marker: str = DEFAULT_MARKER) -> None:
        self.marker = marker
        self.marker_comments = (f"// {marker}", f"# {marker}")

    def scan(self, cwd: str) -> list[str]:
        """Find source files under cwd that still contain the marker.

        Args:
            cwd: Directory to scan

        Returns:
            Sorted paths relative to cwd
        """
        found: list[str] = []
        for root, dirs, files in os.walk(cwd):
            dirs[:] = [d for d in dirs if d not in EXCLUDED_DIRS]
            for name in files:
                if not name.endswith(SOURCE_SUFFIXES):
                    continue
                path = Path(root) / name
                try:
                    text = path.read_text(encoding="utf-8", errors="ignore")
                except OSError:
                    continue
                if any(comment in text for comment in self.marker_comments):
                    found.append(os.path.relpath(path, cwd))
        return sorted(found)

    def _file_list(self, files: list[str]) -> str:
        return "\n".join(f"  - {f}" for f in files)

    def stop(self, event: HookEvent) -> HookDecision:
        """Block the agent from stopping while scaffold files are unimplemented."""
        files = self.scan(event.cwd)
        if not files:
            return HookDecision.skip("No phantom scaffold files found")

        logger.info("phantom_code.found", session_id=event.session_id, count=len(files))
        return HookDecision.deny(
            f"⚠️ {len(files)} scaffold file(s) still contain `{self.marker}` "
            f"and have not been implemented:\n{self._file_list(files)}\n\n"
            "Please implement these files and remove the marker comment "
            "before ending the session."
        )

    def user_prompt_submit(self, event: HookEvent) -> HookDecision:
        """Remind the user without involving the model."""
        files = self.scan(event.cwd)
        if not files:
            return HookDecision.skip("No phantom scaffold files found")

        return HookDecision.allow(
            "",
            user_message=(
                f"⚠️ Reminder: {len(files)} scaffold file(s) still contain "
                f"`{self.marker}`:\n{self._file_list(files)}\n\n"
                "Please implement these files and remove the marker comment."
            ),
        )

    def task_completed(self, event: HookEvent) -> HookDecision:
        """Block task completion while scaffold files are unimplemented."""
        files = self.scan(event.cwd)
        if not files:
            return HookDecision.skip("No phantom scaffold files found")

        logger.info("phantom_code.found", session_id=event.session_id, count=len(files))
        return HookDecision.deny(
            f"⚠️ {len(files)} scaffold file(s) still contain `{self.marker}` "
            f"and have not been implemented:\n{self._file_list(files)}\n\n"
            "Task cannot complete until all scaffold files are implemented.",
            exit_code=TASK_BLOCKING_EXIT_CODE,
        )
