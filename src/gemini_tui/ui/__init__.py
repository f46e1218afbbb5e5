from .repl import InteractiveSession
from .rich_display import RichConsoleDisplay

__all__ = ["InteractiveSession", "RichConsoleDisplay"]
