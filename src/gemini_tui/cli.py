"""Command-line entry point for gemini-tui."""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from rich.console import Console

from gemini_tui import __version__
from gemini_tui.agents.tool_loop_agent import ToolLoopAgent
from gemini_tui.config.models import AVAILABLE_MODELS, DEFAULT_MODEL, AgentConfig
from gemini_tui.key_providers.impl.environment import EnvironmentKeyProvider
from gemini_tui.llm_providers.impl.gemini_provider import GeminiLLMProviderPlugin
from gemini_tui.log_adapters.impl.default_adapter import DefaultLogAdapter
from gemini_tui.tools.impl.sandboxed_fs_executor import ExecutorSetupError, SandboxedFileSystemExecutor
from gemini_tui.ui.repl import SESSION_COMMANDS, InteractiveSession
from gemini_tui.ui.rich_display import RichConsoleDisplay

logger = logging.getLogger(__name__)

API_KEY_URL = "https://aistudio.google.com/apikey"


def _epilog() -> str:
    lines = [
        "Environment:",
        "  GOOGLE_API_KEY   Required. Your Gemini API key (a .env file is also read)",
        "",
        "Available models (cycle with /model):",
    ]
    lines.extend(f"  - {m}" for m in AVAILABLE_MODELS)
    lines.extend(["", "Session commands:"])
    lines.extend(f"  {cmd:<15} {text}" for cmd, text in SESSION_COMMANDS.items())
    lines.extend(["", f"Get an API key at: {API_KEY_URL}"])
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gemini-tui",
        description=f"gemini-tui - A terminal UI for Google Gemini\nVersion: {__version__}",
        epilog=_epilog(),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("-v", "--version", action="version", version=f"gemini-tui {__version__}")
    parser.add_argument("--model", default=DEFAULT_MODEL, help=f"Model to start with (default: {DEFAULT_MODEL}).")
    parser.add_argument("--thinking", action="store_true", help="Start with thinking mode enabled.")
    parser.add_argument(
        "--root", default=".", help="Directory the file tools are confined to (default: current directory)."
    )
    parser.add_argument(
        "--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"], type=str.upper,
        help="Log level for gemini-tui (default: WARNING with --log-file, else ERROR)."
    )
    parser.add_argument("--log-file", default=None, help="Write logs to this file instead of stderr.")
    return parser


def resolve_log_level(args: argparse.Namespace) -> str:
    """Explicit level wins; otherwise WARNING when logging to a file and ERROR on stderr."""
    if args.log_level:
        return args.log_level
    return "WARNING" if args.log_file else "ERROR"


async def run_app(args: argparse.Namespace) -> int:
    log_adapter = DefaultLogAdapter()
    await log_adapter.setup({"log_level": resolve_log_level(args), "log_file": args.log_file})
    key_provider = EnvironmentKeyProvider()
    try:
        await key_provider.setup()
        return await _run_session(args, key_provider)
    finally:
        await key_provider.teardown()
        await log_adapter.teardown()


async def _run_session(args: argparse.Namespace, key_provider: EnvironmentKeyProvider) -> int:
    config = AgentConfig(model_name=args.model, include_thoughts=args.thinking)

    if not await key_provider.get_key(config.api_key_name):
        print(f"Error: {config.api_key_name} environment variable is not set", file=sys.stderr)
        print(f"Get your API key from: {API_KEY_URL}", file=sys.stderr)
        return 1

    try:
        executor = SandboxedFileSystemExecutor.for_root(args.root)
    except ExecutorSetupError as e:
        print(f"Error creating tool executor: {e}", file=sys.stderr)
        return 1

    backend = GeminiLLMProviderPlugin()
    await backend.setup({"key_provider": key_provider, "api_key_name": config.api_key_name})
    if not backend.is_ready:
        print("Error creating Gemini client (see log for details)", file=sys.stderr)
        return 1

    console = Console()
    display = RichConsoleDisplay(console, show_thinking=config.show_thinking)
    agent = ToolLoopAgent(backend, executor, display, agent_config=config)
    session = InteractiveSession(agent, display, console)
    try:
        await session.run()
    finally:
        await agent.teardown()
        await backend.teardown()
        await executor.teardown()
    logger.info(f"Session finished with model '{config.model_name}'.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run_app(args))
    except KeyboardInterrupt:
        return 130
