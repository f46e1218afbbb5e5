# src/gemini_tui/agents/base_agent.py
"""Abstract Base Class for agent loop implementations."""
import abc
import logging
from typing import Any, Optional

from gemini_tui.config.models import AgentConfig

from .types import CycleOutput

logger = logging.getLogger(__name__)

class BaseAgent(abc.ABC):
    """
    Abstract base class for agents that turn one user input into a
    finished cycle of model and tool interaction.
    """
    def __init__(self, agent_config: Optional[AgentConfig] = None):
        """
        Initializes the BaseAgent.

        Args:
            agent_config: Session configuration. Defaults are used when omitted.
        """
        self.agent_config = agent_config or AgentConfig()
        logger.info(f"Initialized {self.__class__.__name__} with model '{self.agent_config.model_name}'.")

    @abc.abstractmethod
    async def run(self, goal: str, **kwargs: Any) -> CycleOutput:
        """
        Execute one cycle for the given user input.

        Args:
            goal: The raw text submitted by the user.
            **kwargs: Additional runtime parameters specific to the agent.

        Returns:
            The cycle outcome.
        """
        pass

    async def teardown(self) -> None:
        """
        Optional cleanup specific to the agent. Backends and executors are torn
        down separately by the application.
        """
        logger.info(f"{self.__class__.__name__} teardown initiated.")
