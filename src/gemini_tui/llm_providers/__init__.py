from .abc import StreamingBackend
from .streaming import ActiveStream, StreamingDriver
from .types import ChunkEvent, DoneEvent, ErrorEvent, GenerationSettings, StreamEvent

__all__ = [
    "ActiveStream",
    "ChunkEvent",
    "DoneEvent",
    "ErrorEvent",
    "GenerationSettings",
    "StreamEvent",
    "StreamingBackend",
    "StreamingDriver",
]
