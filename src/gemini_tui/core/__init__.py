"""Core shared types for gemini-tui."""
from .types import Plugin, StructuredError

__all__ = ["Plugin", "StructuredError"]
