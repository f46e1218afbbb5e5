"""Protocol for the component that carries out tool calls."""
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from .types import ToolResult


@runtime_checkable
class ToolExecutor(Protocol):
    """
    Executes a named tool with model-supplied arguments.

    Implementations must always return a ToolResult mapping. Conditions the
    model can fix (bad path, missing argument, too large...) are reported in
    an "error" key rather than raised.
    """
    async def execute(self, tool_name: str, arguments: Optional[Mapping[str, Any]]) -> ToolResult:
        ...
