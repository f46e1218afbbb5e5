from .models import AVAILABLE_MODELS, DEFAULT_MODEL, AgentConfig

__all__ = ["AVAILABLE_MODELS", "DEFAULT_MODEL", "AgentConfig"]
