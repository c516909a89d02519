"""Base protocol adapter and shared parsing helpers."""

from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hookadapter.exceptions import HookConfigurationError, HookInputError
from hookadapter.types import EventKind, HookDecision, HookEvent, Operation

logger = structlog.get_logger(__name__)


class AgentHookInput(BaseModel):
    """Fields every supported agent sends on stdin.

    Unknown fields are kept so callbacks can reach agent-specific data
    through HookEvent.raw.
    """

    model_config = ConfigDict(extra="allow")

    session_id: str = Field(min_length=1)
    cwd: str = Field(min_length=1)
    tool_name: str = ""
    tool_input: dict[str, Any] = Field(default_factory=dict)
    llm_tool: str | None = None
    tool_config: dict[str, Any] | None = None


@dataclass(frozen=True)
class FormattedOutput:
    """A serialized decision ready to be written by the engine.

    Attributes:
        body: Envelope written to stdout
        exit_code: Process exit status
        stderr: Extra text for stderr, if the protocol reads it
    """

    body: str
    exit_code: int = 0
    stderr: str | None = None


class BaseAdapter(ABC):
    """Translate between one agent family's wire format and HookEvent/HookDecision.

    Adapters hold no per-invocation state: the event subtype travels with
    the parsed HookEvent and is passed back into `format`.
    """

    agent_name: ClassVar[str]
    # Agent event name -> event subtype
    event_kinds: ClassVar[dict[str, EventKind]]
    # Tool name -> file operation, for file-touching tools
    file_tools: ClassVar[dict[str, Operation]]
    input_model: ClassVar[type[AgentHookInput]] = AgentHookInput

    def __init__(self, default_event: str | None = None) -> None:
        """Initialize the adapter.

        Args:
            default_event: Event name from the routing token, used when the
                payload does not name its own event. Also decides the
                envelope for errors raised before parsing succeeds.
        """
        if default_event is not None and default_event not in self.event_kinds:
            supported = ", ".join(self.event_kinds)
            raise HookConfigurationError(
                f"Unknown {self.agent_name} event: {default_event}. Supported: {supported}"
            )
        self.default_event = default_event or next(iter(self.event_kinds))

    @property
    def default_kind(self) -> EventKind:
        return self.event_kinds[self.default_event]

    def parse(self, raw: str) -> HookEvent:
        """Parse raw stdin into a HookEvent.

        Raises:
            HookInputError: If the payload is not a JSON object, fails
                validation, or names an unknown event
        """
        payload = load_payload(raw)
        try:
            data = self.input_model.model_validate(payload)
        except ValidationError as e:
            raise HookInputError(f"Invalid {self.agent_name} hook input: {e}") from e

        event_name = self.event_name_from(payload) or self.default_event
        kind = self.event_kinds.get(event_name)
        if kind is None:
            supported = ", ".join(self.event_kinds)
            raise HookInputError(
                f"Unknown {self.agent_name} event: {event_name}. Supported: {supported}"
            )

        file_path, operation = self.file_target(data, payload)
        event = HookEvent(
            agent=self.agent_name,
            kind=kind,
            event_name=event_name,
            session_id=data.session_id,
            cwd=data.cwd,
            tool_name=data.tool_name,
            tool_input=data.tool_input,
            file_path=file_path,
            operation=operation,
            llm_tool=data.llm_tool,
            tool_config=data.tool_config,
            raw=payload,
        )
        logger.debug(
            "adapter.parsed",
            agent=self.agent_name,
            event_name=event_name,
            tool_name=event.tool_name,
            file_path=file_path,
        )
        return event

    def format(self, decision: HookDecision, event: HookEvent | None = None) -> FormattedOutput:
        """Serialize a decision into this agent's envelope.

        Args:
            decision: Decision to serialize
            event: The parsed event; when None the routed default event
                decides the envelope shape

        Returns:
            FormattedOutput with body and exit status
        """
        kind = event.kind if event is not None else self.default_kind
        if decision.is_skip:
            return FormattedOutput(body=self.dumps(self.skip_envelope(kind)))

        output = self.render(decision, kind)
        logger.debug(
            "adapter.formatted",
            agent=self.agent_name,
            kind=kind.value,
            decision=decision.decision.value,
        )
        exit_code = decision.exit_code if decision.exit_code is not None else 0
        return FormattedOutput(
            body=self.dumps(output),
            exit_code=exit_code,
            stderr=self.stderr_for(decision, kind, exit_code),
        )

    @abstractmethod
    def event_name_from(self, payload: dict[str, Any]) -> str | None:
        """Return the event name the payload carries, if any."""
        ...

    @abstractmethod
    def skip_envelope(self, kind: EventKind) -> dict[str, Any]:
        """Return the emptiest valid envelope for an event subtype."""
        ...

    @abstractmethod
    def render(self, decision: HookDecision, kind: EventKind) -> dict[str, Any]:
        """Build the envelope for a non-skip decision."""
        ...

    def stderr_for(
        self, decision: HookDecision, kind: EventKind, exit_code: int
    ) -> str | None:
        """Extra stderr text for protocols that read it. None by default."""
        return None

    def file_target(
        self, data: AgentHookInput, payload: dict[str, Any]
    ) -> tuple[str | None, Operation | None]:
        """Resolve the file path and operation for file-touching tools."""
        operation = self.file_tools.get(data.tool_name)
        if operation is None:
            return None, None

        file_path = self.file_path_from(data, payload)
        if not file_path:
            return None, None
        if not os.path.isabs(file_path):
            file_path = os.path.normpath(os.path.join(data.cwd, file_path))
        return file_path, operation

    def file_path_from(self, data: AgentHookInput, payload: dict[str, Any]) -> str | None:
        value = data.tool_input.get("file_path")
        return value if isinstance(value, str) else None

    @staticmethod
    def dumps(output: dict[str, Any]) -> str:
        return json.dumps(output, indent=2)


def load_payload(raw: str) -> dict[str, Any]:
    """Decode stdin into a JSON object.

    Raises:
        HookInputError: If the input is empty, not JSON, or not an object
    """
    if not raw or not raw.strip():
        raise HookInputError("Empty hook input")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise HookInputError(f"Hook input is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise HookInputError(
            f"Hook input must be a JSON object, got {type(payload).__name__}"
        )
    return payload
