# src/gemini_tui/core/types.py
"""Core shared types and protocols."""
import logging
from typing import Any, Dict, Optional, Protocol, TypedDict, runtime_checkable

logger = logging.getLogger(__name__)

@runtime_checkable
class Plugin(Protocol):
    """Base protocol for the pluggable components (key providers, backends, executors)."""
    @property
    def plugin_id(self) -> str:
        """A unique string identifier for this plugin type."""
        ...

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Optional asynchronous setup method.

        Args:
            config: A dictionary containing the configuration for this
                plugin instance.
        """
        pass

    async def teardown(self) -> None:
        """Optional asynchronous teardown method. Called before application shutdown."""
        pass


class StructuredError(TypedDict, total=False):
    """Standardized structure for reporting cycle-level errors to the display."""
    type: str
    message: str
    details: Optional[Dict[str, Any]]
