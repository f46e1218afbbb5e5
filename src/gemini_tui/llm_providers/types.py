# src/gemini_tui/llm_providers/types.py
"""Generation settings and the event sequence emitted by the streaming driver."""
from typing import Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from gemini_tui.conversation.types import Turn
from gemini_tui.tools.types import ToolCall


class GenerationSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    model_name: str
    system_instruction: Optional[str] = None
    include_thoughts: bool = False


class ChunkEvent(BaseModel):
    """A piece of answer text, emitted as soon as it arrives."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["chunk"] = "chunk"
    text: str


class DoneEvent(BaseModel):
    """
    Successful end of a stream.

    When the model requested tools, `function_calls` is non-empty and
    `proposed_history` is the input history plus the model's function-call
    turn; it is a proposal the caller must commit. Otherwise
    `proposed_history` is None and `text`/`thinking` form the final message.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["done"] = "done"
    text: str = ""
    thinking: str = ""
    function_calls: Tuple[ToolCall, ...] = ()
    proposed_history: Optional[Tuple[Turn, ...]] = None


class ErrorEvent(BaseModel):
    """Transport or backend failure. Terminates the stream."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["error"] = "error"
    error: BaseException = Field(exclude=True)

    @property
    def message(self) -> str:
        return str(self.error) or type(self.error).__name__


StreamEvent = Union[ChunkEvent, DoneEvent, ErrorEvent]
