# src/gemini_tui/config/models.py
import logging
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .prompts import DEFAULT_SYSTEM_INSTRUCTION

logger = logging.getLogger(__name__)

# Ordered from fastest/cheapest to most capable.
AVAILABLE_MODELS: List[str] = [
    "gemini-2.0-flash",
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-3-flash-preview",
    "gemini-3-pro-preview",
]
DEFAULT_MODEL = AVAILABLE_MODELS[0]


class AgentConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    model_name: str = Field(default=DEFAULT_MODEL, description="Model identifier used for generation.")
    available_models: List[str] = Field(
        default_factory=lambda: list(AVAILABLE_MODELS),
        description="Models the session can cycle through, in cycling order."
    )
    include_thoughts: bool = Field(
        default=False, description="Ask the backend to include reasoning parts in the stream."
    )
    show_thinking: bool = Field(default=True, description="Render collected reasoning text in the display.")
    system_instruction: str = Field(default=DEFAULT_SYSTEM_INSTRUCTION)
    stream_queue_size: int = Field(
        default=10, ge=1, description="Capacity of the bounded queue between the streaming task and the agent loop."
    )
    max_tool_round_trips: int = Field(
        default=25, ge=1,
        description="Upper bound on tool round-trips within one cycle before it is ended."
    )
    api_key_name: str = Field(default="GOOGLE_API_KEY")

    @field_validator("available_models")
    @classmethod
    def _non_empty_models(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("available_models must contain at least one model")
        return value

    def next_model(self) -> str:
        """Return the model following `model_name`, wrapping around; unknown names restart the cycle."""
        try:
            idx = self.available_models.index(self.model_name)
        except ValueError:
            return self.available_models[0]
        return self.available_models[(idx + 1) % len(self.available_models)]
