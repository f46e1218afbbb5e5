from .abc import ToolExecutor
from .catalog import all_tools
from .impl.sandboxed_fs_executor import ExecutorSetupError, SandboxedFileSystemExecutor
from .types import ExecutorConfig, ToolCall, ToolDefinition, ToolParameter, ToolResult

__all__ = [
    "ExecutorConfig",
    "ExecutorSetupError",
    "SandboxedFileSystemExecutor",
    "ToolCall",
    "ToolDefinition",
    "ToolExecutor",
    "ToolParameter",
    "ToolResult",
    "all_tools",
]
