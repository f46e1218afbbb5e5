"""
gemini-tui
-----------------------------

A terminal coding agent for Google Gemini. The model can read, search,
create and edit files inside the directory it is started in.
"""
__version__ = "0.1.0"

from .agents.base_agent import BaseAgent
from .agents.tool_loop_agent import RoundTripLimitError, ToolLoopAgent
from .agents.types import CycleOutput, DisplayCollaborator, FinalMessage
from .config.models import AgentConfig
from .conversation.history import ConversationHistory
from .conversation.types import FunctionCallPart, FunctionResponsePart, TextPart, ThoughtPart, Turn
from .llm_providers.impl.gemini_provider import GeminiLLMProviderPlugin
from .llm_providers.streaming import StreamingDriver
from .llm_providers.types import ChunkEvent, DoneEvent, ErrorEvent, GenerationSettings
from .tools.catalog import all_tools
from .tools.impl.sandboxed_fs_executor import ExecutorSetupError, SandboxedFileSystemExecutor
from .tools.types import ExecutorConfig, ToolCall, ToolResult

__all__ = [
    "AgentConfig",
    "BaseAgent",
    "ChunkEvent",
    "ConversationHistory",
    "CycleOutput",
    "DisplayCollaborator",
    "DoneEvent",
    "ErrorEvent",
    "ExecutorConfig",
    "ExecutorSetupError",
    "FinalMessage",
    "FunctionCallPart",
    "FunctionResponsePart",
    "GeminiLLMProviderPlugin",
    "GenerationSettings",
    "RoundTripLimitError",
    "SandboxedFileSystemExecutor",
    "StreamingDriver",
    "TextPart",
    "ThoughtPart",
    "ToolCall",
    "ToolLoopAgent",
    "ToolResult",
    "Turn",
    "all_tools",
]
