from .base_agent import BaseAgent
from .tool_loop_agent import RoundTripLimitError, ToolLoopAgent
from .types import CycleOutput, DisplayCollaborator, FinalMessage

__all__ = [
    "BaseAgent",
    "CycleOutput",
    "DisplayCollaborator",
    "FinalMessage",
    "RoundTripLimitError",
    "ToolLoopAgent",
]
