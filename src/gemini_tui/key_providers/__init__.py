from .impl.environment import EnvironmentKeyProvider

__all__ = ["EnvironmentKeyProvider"]
