"""Unit tests for the ToolLoopAgent cycle."""
import asyncio

import pytest

from gemini_tui.agents.tool_loop_agent import RoundTripLimitError, ToolLoopAgent
from gemini_tui.agents.types import FinalMessage
from gemini_tui.config.models import AgentConfig
from gemini_tui.conversation.types import FunctionCallPart, FunctionResponsePart, TextPart, ThoughtPart, Turn


def _call(name: str, **args) -> FunctionCallPart:
    return FunctionCallPart(name=name, args=args)


@pytest.mark.asyncio
async def test_plain_answer_cycle(scripted_backend_factory, recording_executor, recording_display):
    backend = scripted_backend_factory([[[TextPart(text="Hi ")], [TextPart(text="there.")]]])
    agent = ToolLoopAgent(backend, recording_executor, recording_display)

    result = await agent.run("hello")

    assert result["status"] == "success"
    assert result["output"] == "Hi there."
    assert result["tools_used"] == []
    assert result["error"] is None
    assert list(agent.history) == [Turn.user_text("hello"), Turn.model_text("Hi there.")]
    assert recording_display.of_kind("chunk") == ["Hi ", "there."]
    assert recording_display.of_kind("message") == [FinalMessage(content="Hi there.")]
    assert recording_executor.calls == []


@pytest.mark.asyncio
async def test_single_tool_round_trip_history_shape(fs_executor, sandbox_root, scripted_backend_factory, recording_display):
    (sandbox_root / "notes.txt").write_text("x")
    call = _call("list_directory", path=".")
    backend = scripted_backend_factory([
        [[call]],
        [[TextPart(text="There is one file.")]],
    ])
    agent = ToolLoopAgent(backend, fs_executor, recording_display)

    result = await agent.run("what files are here?")

    assert result["status"] == "success"
    assert result["tools_used"] == ["list_directory"]
    turns = list(agent.history)
    assert [t.role for t in turns] == ["user", "model", "user", "model"]
    assert turns[0] == Turn.user_text("what files are here?")
    assert turns[1].parts == (call,)
    assert turns[2].parts == (
        FunctionResponsePart(name="list_directory", response={"path": str(sandbox_root.resolve()), "items": ["notes.txt"], "count": 1}),
    )
    assert turns[3] == Turn.model_text("There is one file.")

    assert recording_display.of_kind("tools") == [["list_directory"]]
    assert recording_display.of_kind("message")[0].tools_used == ("list_directory",)


@pytest.mark.asyncio
async def test_second_request_carries_committed_history(scripted_backend_factory, recording_executor, recording_display):
    call = FunctionCallPart(name="read_file", args={"path": "a.txt"}, thought_signature=b"opaque-sig")
    backend = scripted_backend_factory([
        [[TextPart(text="Reading.")], [call]],
        [[TextPart(text="Done.")]],
    ])
    agent = ToolLoopAgent(backend, recording_executor, recording_display)

    await agent.run("read a.txt")

    second_history = backend.requests[1][0]
    assert len(second_history) == 3
    assert second_history[1].parts == (TextPart(text="Reading."), call)
    assert second_history[1].parts[1].thought_signature == b"opaque-sig"
    assert second_history[2].role == "user"
    assert second_history[2].parts[0].response == {"tool": "read_file", "success": True}


@pytest.mark.asyncio
async def test_batch_runs_sequentially_in_report_order(scripted_backend_factory, recording_executor_factory, recording_display):
    executor = recording_executor_factory(delays={"read_file": 0.05, "list_directory": 0.0, "glob_search": 0.01})
    backend = scripted_backend_factory([
        [[_call("read_file", path="a"), _call("list_directory", path="."), _call("glob_search", pattern="*")]],
        [[TextPart(text="ok")]],
    ])
    agent = ToolLoopAgent(backend, executor, recording_display)

    result = await agent.run("go")

    assert [name for name, _ in executor.calls] == ["read_file", "list_directory", "glob_search"]
    assert executor.completed == ["read_file", "list_directory", "glob_search"]
    tool_turn = agent.history[2]
    assert [p.name for p in tool_turn.parts] == ["read_file", "list_directory", "glob_search"]
    assert len(agent.history) == 4
    assert result["tools_used"] == ["read_file", "list_directory", "glob_search"]


@pytest.mark.asyncio
async def test_tools_used_accumulates_across_round_trips(scripted_backend_factory, recording_executor, recording_display):
    backend = scripted_backend_factory([
        [[_call("glob_search", pattern="*.py")]],
        [[_call("read_file", path="main.py"), _call("edit_file", path="main.py", old_string="a", new_string="b")]],
        [[TextPart(text="Edited.")]],
    ])
    agent = ToolLoopAgent(backend, recording_executor, recording_display)

    result = await agent.run("fix it")

    assert result["tools_used"] == ["glob_search", "read_file", "edit_file"]
    assert recording_display.of_kind("tools") == [["glob_search"], ["read_file", "edit_file"]]
    assert len(agent.history) == 6
    assert recording_display.of_kind("message")[0].tools_used == ("glob_search", "read_file", "edit_file")


@pytest.mark.asyncio
async def test_tool_errors_are_fed_back_to_the_model(fs_executor, scripted_backend_factory, recording_display):
    backend = scripted_backend_factory([
        [[_call("read_file", path="../secret")]],
        [[TextPart(text="I cannot read that.")]],
    ])
    agent = ToolLoopAgent(backend, fs_executor, recording_display)

    result = await agent.run("read the secret")

    assert result["status"] == "success"
    assert agent.history[2].parts[0].response == {"error": "path is outside allowed directory"}


@pytest.mark.asyncio
async def test_backend_error_ends_cycle(scripted_backend_factory, recording_executor, recording_display):
    backend = scripted_backend_factory([[[TextPart(text="par")], RuntimeError("Gemini API call failed: 503")]])
    agent = ToolLoopAgent(backend, recording_executor, recording_display)

    result = await agent.run("hello")

    assert result["status"] == "error"
    assert result["output"] == "Gemini API call failed: 503"
    assert result["error"] == {"type": "RuntimeError", "message": "Gemini API call failed: 503"}
    assert list(agent.history) == [Turn.user_text("hello")]
    errors = recording_display.of_kind("error")
    assert len(errors) == 1 and str(errors[0]) == "Gemini API call failed: 503"
    assert recording_display.of_kind("message") == []
    assert not agent.busy


@pytest.mark.asyncio
async def test_backend_error_after_tool_round_trip_keeps_committed_turns(scripted_backend_factory, recording_executor, recording_display):
    backend = scripted_backend_factory([
        [[_call("list_directory")]],
        [ConnectionError("stream reset")],
    ])
    agent = ToolLoopAgent(backend, recording_executor, recording_display)

    result = await agent.run("look around")

    assert result["status"] == "error"
    assert result["tools_used"] == ["list_directory"]
    assert [t.role for t in agent.history] == ["user", "model", "user"]


@pytest.mark.asyncio
async def test_input_rejected_while_cycle_active(scripted_backend_factory, recording_executor, recording_display):
    gate = asyncio.Event()
    backend = scripted_backend_factory([[[TextPart(text="slow answer")]]], gate=gate)
    agent = ToolLoopAgent(backend, recording_executor, recording_display)

    first = asyncio.create_task(agent.run("first"))
    while not backend.requests:
        await asyncio.sleep(0)
    assert agent.busy

    rejected = await agent.run("second")
    assert rejected["status"] == "rejected_busy"
    assert rejected["tools_used"] == []

    gate.set()
    result = await first
    assert result["output"] == "slow answer"
    assert list(agent.history) == [Turn.user_text("first"), Turn.model_text("slow answer")]
    assert len(backend.requests) == 1
    assert not agent.busy


@pytest.mark.asyncio
async def test_round_trip_limit(scripted_backend_factory, recording_executor, recording_display):
    backend = scripted_backend_factory([[[_call("list_directory")]] for _ in range(3)])
    agent = ToolLoopAgent(
        backend, recording_executor, recording_display, agent_config=AgentConfig(max_tool_round_trips=2)
    )

    result = await agent.run("loop forever")

    assert result["status"] == "max_round_trips_reached"
    assert result["error"]["type"] == "RoundTripLimitError"
    assert len(recording_executor.calls) == 2
    assert isinstance(recording_display.of_kind("error")[0], RoundTripLimitError)
    # user, then two committed call/result pairs; the third request is not committed.
    assert len(agent.history) == 5


@pytest.mark.asyncio
async def test_thinking_is_relayed_in_final_message(scripted_backend_factory, recording_executor, recording_display):
    backend = scripted_backend_factory([[[ThoughtPart(text="Considering."), TextPart(text="Answer.")]]])
    config = AgentConfig(include_thoughts=True)
    agent = ToolLoopAgent(backend, recording_executor, recording_display, agent_config=config)

    await agent.run("q")

    assert recording_display.of_kind("message")[0].thinking == "Considering."
    assert backend.requests[0][2].include_thoughts is True
    assert list(agent.history)[-1] == Turn.model_text("Answer.")


@pytest.mark.asyncio
async def test_settings_follow_config_changes(scripted_backend_factory, recording_executor, recording_display):
    backend = scripted_backend_factory([[[TextPart(text="a")]], [[TextPart(text="b")]]])
    agent = ToolLoopAgent(backend, recording_executor, recording_display)

    await agent.run("one")
    agent.agent_config.model_name = agent.agent_config.next_model()
    await agent.run("two")

    assert backend.requests[0][2].model_name == "gemini-2.0-flash"
    assert backend.requests[1][2].model_name == "gemini-2.5-flash"
    assert len(backend.requests[1][0]) == 3


class _FailingChunkDisplay:
    def __init__(self) -> None:
        self.chunks = 0

    def on_chunk(self, text: str) -> None:
        self.chunks += 1
        raise RuntimeError("terminal went away")

    def on_tools_used(self, tool_names) -> None:
        pass

    def on_message(self, message) -> None:
        pass

    def on_error(self, error) -> None:
        pass


@pytest.mark.asyncio
async def test_display_failure_stops_producer_task(scripted_backend_factory, recording_executor):
    backend = scripted_backend_factory([[[TextPart(text=str(i))] for i in range(50)]])
    display = _FailingChunkDisplay()
    agent = ToolLoopAgent(backend, recording_executor, display, agent_config=AgentConfig(stream_queue_size=1))

    with pytest.raises(RuntimeError, match="terminal went away"):
        await agent.run("hello")

    assert display.chunks == 1
    assert not agent.busy
    producers = [t for t in asyncio.all_tasks() if t.get_name().startswith("stream:")]
    assert all(t.done() for t in producers)
