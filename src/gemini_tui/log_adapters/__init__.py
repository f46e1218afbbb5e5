from .impl.default_adapter import DEFAULT_LIBRARY_LOGGER_NAME, DefaultLogAdapter

__all__ = ["DEFAULT_LIBRARY_LOGGER_NAME", "DefaultLogAdapter"]
