"""Pytest fixtures and shared test doubles for gemini-tui."""
import asyncio
import logging
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pytest

from gemini_tui.agents.types import FinalMessage
from gemini_tui.conversation.types import Part, Turn
from gemini_tui.llm_providers.types import GenerationSettings
from gemini_tui.security.key_provider import KeyProvider
from gemini_tui.tools.impl.sandboxed_fs_executor import SandboxedFileSystemExecutor
from gemini_tui.tools.types import ExecutorConfig, ToolDefinition, ToolResult

# One script per stream request: a sequence of part batches, where an
# exception instance is raised at that point in the stream.
StreamScript = Sequence[Union[Sequence[Part], BaseException]]


class ScriptedBackend:
    plugin_id: str = "scripted_backend_v1"
    description: str = "Replays prepared part batches instead of calling a hosted model."

    def __init__(self, scripts: Sequence[StreamScript], gate: Optional[asyncio.Event] = None):
        self._scripts: List[StreamScript] = list(scripts)
        self._gate = gate
        self.requests: List[Tuple[Tuple[Turn, ...], Tuple[ToolDefinition, ...], GenerationSettings]] = []

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        pass

    async def stream_parts(
        self,
        history: Sequence[Turn],
        tools: Sequence[ToolDefinition],
        settings: GenerationSettings,
    ) -> AsyncIterator[List[Part]]:
        self.requests.append((tuple(history), tuple(tools), settings))
        if not self._scripts:
            raise AssertionError("ScriptedBackend ran out of scripts")
        script = self._scripts.pop(0)
        if self._gate is not None:
            await self._gate.wait()
        for item in script:
            if isinstance(item, BaseException):
                raise item
            yield list(item)

    async def teardown(self) -> None:
        pass


class RecordingDisplay:
    def __init__(self) -> None:
        self.events: List[Tuple[str, Any]] = []

    def on_chunk(self, text: str) -> None:
        self.events.append(("chunk", text))

    def on_tools_used(self, tool_names: Sequence[str]) -> None:
        self.events.append(("tools", list(tool_names)))

    def on_message(self, message: FinalMessage) -> None:
        self.events.append(("message", message))

    def on_error(self, error: BaseException) -> None:
        self.events.append(("error", error))

    def of_kind(self, kind: str) -> List[Any]:
        return [payload for k, payload in self.events if k == kind]


class RecordingExecutor:
    """Executor double that records call order and can delay individual tools."""

    def __init__(self, delays: Optional[Mapping[str, float]] = None, results: Optional[Mapping[str, ToolResult]] = None):
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.completed: List[str] = []
        self._delays = dict(delays or {})
        self._results = dict(results or {})

    async def execute(self, tool_name: str, arguments: Optional[Mapping[str, Any]]) -> ToolResult:
        self.calls.append((tool_name, dict(arguments or {})))
        await asyncio.sleep(self._delays.get(tool_name, 0))
        self.completed.append(tool_name)
        return dict(self._results.get(tool_name, {"tool": tool_name, "success": True}))


class StaticKeyProvider(KeyProvider):
    def __init__(self, keys: Dict[str, str]):
        self.keys = keys

    async def get_key(self, key_name: str) -> Optional[str]:
        logging.debug(f"StaticKeyProvider: Requesting key '{key_name}'")
        return self.keys.get(key_name)


@pytest.fixture()
def sandbox_root(tmp_path: Path) -> Path:
    root = tmp_path / "sandbox"
    root.mkdir()
    return root


@pytest.fixture()
def fs_executor(sandbox_root: Path) -> SandboxedFileSystemExecutor:
    return SandboxedFileSystemExecutor(ExecutorConfig(root_directory=sandbox_root))


@pytest.fixture()
def recording_display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture()
def recording_executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture()
def mock_key_provider() -> StaticKeyProvider:
    return StaticKeyProvider({"GOOGLE_API_KEY": "test_google_key_from_conftest_fixture"})


@pytest.fixture()
def scripted_backend_factory():
    return ScriptedBackend


@pytest.fixture()
def recording_executor_factory():
    return RecordingExecutor
