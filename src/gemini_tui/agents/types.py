# src/gemini_tui/agents/types.py
"""Type definitions for the agent loop and its display collaborator."""
from typing import List, Literal, Optional, Protocol, Sequence, Tuple, TypedDict, runtime_checkable

from pydantic import BaseModel, ConfigDict

from gemini_tui.core.types import StructuredError


class FinalMessage(BaseModel):
    """The finalized assistant message handed to the display at the end of a cycle."""
    model_config = ConfigDict(frozen=True)

    content: str
    thinking: str = ""
    tools_used: Tuple[str, ...] = ()


class CycleOutput(TypedDict):
    """Outcome of one user turn through the agent loop."""
    status: Literal["success", "error", "max_round_trips_reached", "rejected_busy"]
    output: str
    tools_used: List[str]
    error: Optional[StructuredError]


@runtime_checkable
class DisplayCollaborator(Protocol):
    """Receives display events from the agent loop, in order, one cycle at a time."""

    def on_chunk(self, text: str) -> None:
        """A fragment of answer text arrived."""
        ...

    def on_tools_used(self, tool_names: Sequence[str]) -> None:
        """A batch of tools is about to be executed."""
        ...

    def on_message(self, message: FinalMessage) -> None:
        """The cycle finished with a final answer."""
        ...

    def on_error(self, error: BaseException) -> None:
        """The cycle was aborted."""
        ...
