from .history import ConversationHistory, HistoryConflictError
from .types import (
    FunctionCallPart,
    FunctionResponsePart,
    Part,
    TextPart,
    ThoughtPart,
    Turn,
)

__all__ = [
    "ConversationHistory",
    "FunctionCallPart",
    "FunctionResponsePart",
    "HistoryConflictError",
    "Part",
    "TextPart",
    "ThoughtPart",
    "Turn",
]
