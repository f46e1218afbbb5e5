# src/gemini_tui/llm_providers/abc.py
import logging
from typing import AsyncIterator, List, Protocol, Sequence, runtime_checkable

from gemini_tui.conversation.types import Part, Turn
from gemini_tui.core.types import Plugin
from gemini_tui.tools.types import ToolDefinition

from .types import GenerationSettings

logger = logging.getLogger(__name__)

@runtime_checkable
class StreamingBackend(Plugin, Protocol):
    """
    Protocol for a hosted model that streams partial responses.
    """
    plugin_id: str
    description: str

    def stream_parts(
        self,
        history: Sequence[Turn],
        tools: Sequence[ToolDefinition],
        settings: GenerationSettings,
    ) -> AsyncIterator[List[Part]]:
        """
        Opens one streaming generation request and yields the parts of each
        partial response in arrival order. Function-call parts must carry the
        provider's continuation data unmodified. Transport failures are raised
        from the iterator; implementations never retry.
        """
        ...
