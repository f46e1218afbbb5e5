# src/gemini_tui/conversation/types.py
"""Conversation content types: role-tagged turns made of tagged parts."""
from typing import Annotated, Any, Dict, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class TextPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class ThoughtPart(BaseModel):
    """Reasoning commentary. Relayed to the display, never treated as the answer."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["thought"] = "thought"
    text: str


class FunctionCallPart(BaseModel):
    """
    A tool request issued by the model.

    `thought_signature` is provider data that must be echoed back byte-for-byte
    when this part is replayed in history; it is never inspected here.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["function_call"] = "function_call"
    name: str
    args: Dict[str, Any] = Field(default_factory=dict)
    call_id: Optional[str] = None
    thought_signature: Optional[bytes] = None


class FunctionResponsePart(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["function_response"] = "function_response"
    name: str
    response: Dict[str, Any]
    call_id: Optional[str] = None


Part = Annotated[
    Union[TextPart, ThoughtPart, FunctionCallPart, FunctionResponsePart],
    Field(discriminator="kind"),
]


class Turn(BaseModel):
    """One role-tagged history entry. Tool results are sent as "user" turns."""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "model"]
    parts: Tuple[Part, ...]

    @classmethod
    def user_text(cls, text: str) -> "Turn":
        return cls(role="user", parts=(TextPart(text=text),))

    @classmethod
    def model_text(cls, text: str) -> "Turn":
        return cls(role="model", parts=(TextPart(text=text),))

    @classmethod
    def tool_results(cls, responses: Sequence[FunctionResponsePart]) -> "Turn":
        return cls(role="user", parts=tuple(responses))

    @property
    def function_calls(self) -> Tuple[FunctionCallPart, ...]:
        return tuple(p for p in self.parts if isinstance(p, FunctionCallPart))
