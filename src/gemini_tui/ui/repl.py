"""Foreground loop: reads user input and hands it to the agent one cycle at a time."""
import asyncio
import logging
from typing import Optional

from rich.console import Console
from rich.text import Text

from gemini_tui.agents.tool_loop_agent import ToolLoopAgent
from gemini_tui.agents.types import CycleOutput

from .rich_display import INFO_STYLE, TOOL_STYLE, USER_STYLE, RichConsoleDisplay

logger = logging.getLogger(__name__)

SESSION_COMMANDS = {
    "/thinking": "Toggle thinking mode (ask the model for its reasoning)",
    "/model": "Cycle to the next model",
    "/hide-thinking": "Toggle showing collected thinking in replies",
    "/help": "Show this list",
    "/quit": "Exit (also /exit, Ctrl+D, Ctrl+C)",
}

QUIT_COMMANDS = {"/quit", "/exit", "/q"}


class InteractiveSession:
    def __init__(self, agent: ToolLoopAgent, display: RichConsoleDisplay, console: Optional[Console] = None):
        self._agent = agent
        self._display = display
        self._console = console or display.console

    @property
    def agent(self) -> ToolLoopAgent:
        return self._agent

    def status_line(self) -> Text:
        cfg = self._agent.agent_config
        line = Text(f" {cfg.model_name} ", style="color(240) on color(236)")
        line.append(" ")
        if cfg.include_thoughts:
            line.append(" Thinking: ON ", style="color(82) on color(236)")
        else:
            line.append(" Thinking: OFF ", style="color(240) on color(236)")
        return line

    def print_banner(self) -> None:
        title = Text("Gemini TUI", style="bold color(205)")
        title.append("  ")
        title.append_text(self.status_line())
        self._console.print(title)
        self._console.print(Text(
            "Start a conversation with Gemini. Type your message and press Enter.\n"
            "Gemini can read and edit files in this directory. Type /help for commands.",
            style=INFO_STYLE,
        ))
        self._console.print()

    async def run(self) -> None:
        self.print_banner()
        while True:
            try:
                raw = await asyncio.to_thread(self._console.input, Text("You: ", style=USER_STYLE).markup)
            except (EOFError, KeyboardInterrupt):
                self._console.print()
                break
            user_input = raw.strip()
            if not user_input:
                continue
            if user_input.startswith("/"):
                if not self.handle_command(user_input):
                    break
                continue
            await self.submit(user_input)
        logger.info("InteractiveSession: session ended by user.")

    async def submit(self, user_input: str) -> CycleOutput:
        result = await self._agent.run(user_input)
        if result["status"] == "rejected_busy":
            self._console.print(Text(result["output"], style=INFO_STYLE))
        return result

    def handle_command(self, command: str) -> bool:
        """Apply a session command. Returns False when the session should end."""
        cfg = self._agent.agent_config
        name = command.split()[0].lower()
        if name in QUIT_COMMANDS:
            return False
        if name == "/thinking":
            cfg.include_thoughts = not cfg.include_thoughts
            self._console.print(self.status_line())
        elif name == "/model":
            cfg.model_name = cfg.next_model()
            self._console.print(self.status_line())
        elif name == "/hide-thinking":
            self._display.show_thinking = not self._display.show_thinking
            cfg.show_thinking = self._display.show_thinking
            state = "shown" if self._display.show_thinking else "hidden"
            self._console.print(Text(f"Thinking display {state}.", style=INFO_STYLE))
        elif name == "/help":
            for cmd, help_text in SESSION_COMMANDS.items():
                self._console.print(Text(f"  {cmd:<15} {help_text}", style=INFO_STYLE))
        else:
            self._console.print(Text(f"Unknown command: {name}. Type /help for commands.", style=TOOL_STYLE))
        return True
