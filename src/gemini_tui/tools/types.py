# src/gemini_tui/tools/types.py
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Structured, tool-specific result. Failure is signalled only by an "error" key.
ToolResult = Dict[str, Any]

DEFAULT_MAX_READ_BYTES = 100 * 1024
DEFAULT_MAX_GLOB_MATCHES = 100


class ExecutorConfig(BaseModel):
    """Immutable limits and root for the sandboxed executor."""
    model_config = ConfigDict(frozen=True)

    root_directory: Path
    max_read_bytes: int = Field(default=DEFAULT_MAX_READ_BYTES, gt=0)
    # Writes may be larger than reads.
    max_write_bytes: int = Field(default=DEFAULT_MAX_READ_BYTES * 10, gt=0)
    max_glob_matches: int = Field(default=DEFAULT_MAX_GLOB_MATCHES, gt=0)

    @field_validator("root_directory")
    @classmethod
    def _canonical_root(cls, value: Path) -> Path:
        resolved = Path(value).expanduser().resolve(strict=False)
        if not resolved.is_dir():
            raise ValueError(f"root directory '{value}' does not exist or is not a directory")
        return resolved


class ToolCall(BaseModel):
    """A single function call reported by a finished stream, in report order."""
    model_config = ConfigDict(frozen=True)

    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    index: int
    call_id: Optional[str] = None


class ToolParameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["string", "integer", "number", "boolean"] = "string"
    description: str
    required: bool = False


class ToolDefinition(BaseModel):
    """Declarative description of one tool, passed through to the backend."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: Dict[str, ToolParameter] = Field(default_factory=dict)

    @property
    def required_parameters(self) -> List[str]:
        return [name for name, param in self.parameters.items() if param.required]
