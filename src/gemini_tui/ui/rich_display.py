import logging
from typing import List, Optional, Sequence

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.markdown import Markdown
from rich.text import Text

from gemini_tui.agents.types import DisplayCollaborator, FinalMessage

logger = logging.getLogger(__name__)

USER_STYLE = "bold color(86)"
ASSISTANT_STYLE = "color(212)"
TOOL_STYLE = "italic color(214)"
THINKING_STYLE = "italic color(243)"
INFO_STYLE = "color(241)"
ERROR_STYLE = "color(196)"


class RichConsoleDisplay(DisplayCollaborator):
    """
    Terminal rendering of agent events with rich.

    Streamed text is shown raw in a transient live region, since markdown
    rendering is unreliable mid-stream, and re-rendered as markdown once the
    message is final.
    """

    def __init__(self, console: Optional[Console] = None, show_thinking: bool = True, assistant_label: str = "Gemini"):
        self.console = console or Console()
        self.show_thinking = show_thinking
        self.assistant_label = assistant_label
        self._buffer = ""
        self._active_tools: List[str] = []
        self._live: Optional[Live] = None

    def _render_stream(self) -> RenderableType:
        lines: List[RenderableType] = []
        if self._active_tools:
            lines.append(Text(f"Tools used: {', '.join(self._active_tools)}", style=TOOL_STYLE))
        lines.append(Text(f"{self.assistant_label}:", style=ASSISTANT_STYLE))
        lines.append(Text(self._buffer))
        lines.append(Text("...", style=INFO_STYLE))
        return Group(*lines)

    def _stop_live(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    def on_chunk(self, text: str) -> None:
        self._buffer += text
        if self._live is None:
            self._live = Live(self._render_stream(), console=self.console, transient=True, refresh_per_second=12)
            self._live.start()
        else:
            self._live.update(self._render_stream())

    def on_tools_used(self, tool_names: Sequence[str]) -> None:
        # Text streamed before a tool request is superseded by the next stream.
        self._stop_live()
        self._buffer = ""
        self._active_tools = list(tool_names)
        self.console.print(Text(f"Using tools: {', '.join(tool_names)}", style=TOOL_STYLE))

    def on_message(self, message: FinalMessage) -> None:
        self._stop_live()
        self.console.print(self.render_message(message))
        self.console.print()
        self._reset()

    def on_error(self, error: BaseException) -> None:
        self._stop_live()
        self.console.print(Text(f"Error: {error}", style=ERROR_STYLE))
        self.console.print()
        self._reset()

    def render_message(self, message: FinalMessage) -> RenderableType:
        parts: List[RenderableType] = []
        if message.thinking and self.show_thinking:
            parts.append(Text("Thinking:", style=THINKING_STYLE))
            parts.append(Text(message.thinking, style=THINKING_STYLE))
            parts.append(Text(""))
        if message.tools_used:
            parts.append(Text(f"Tools used: {', '.join(message.tools_used)}", style=TOOL_STYLE))
        parts.append(Text(f"{self.assistant_label}:", style=ASSISTANT_STYLE))
        parts.append(Markdown(message.content))
        return Group(*parts)

    def _reset(self) -> None:
        self._buffer = ""
        self._active_tools = []
