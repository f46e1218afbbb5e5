"""Tool-calling agent loop: stream, execute requested tools, feed results back."""
import logging
from contextlib import aclosing
from typing import Any, List, Optional, Sequence, Union

from gemini_tui.config.models import AgentConfig
from gemini_tui.conversation.history import ConversationHistory
from gemini_tui.conversation.types import FunctionResponsePart, Turn
from gemini_tui.core.types import StructuredError
from gemini_tui.llm_providers.abc import StreamingBackend
from gemini_tui.llm_providers.streaming import StreamingDriver
from gemini_tui.llm_providers.types import ChunkEvent, DoneEvent, ErrorEvent, GenerationSettings
from gemini_tui.tools.abc import ToolExecutor
from gemini_tui.tools.catalog import all_tools
from gemini_tui.tools.types import ToolCall, ToolDefinition

from .base_agent import BaseAgent
from .types import CycleOutput, DisplayCollaborator, FinalMessage

logger = logging.getLogger(__name__)


class RoundTripLimitError(RuntimeError):
    """The model kept requesting tools past the configured round-trip limit."""


class ToolLoopAgent(BaseAgent):
    """
    Owns the conversation history and drives one cycle per user input.

    A cycle appends the user turn, streams a response, and while the model
    requests tools: commits the model's function-call turn, runs the calls
    one after another in report order, appends a single tool-result turn and
    streams again. It ends on a plain answer or on a transport error. Only
    one cycle may be active at a time; input arriving meanwhile is rejected.
    """

    def __init__(
        self,
        backend: StreamingBackend,
        executor: ToolExecutor,
        display: DisplayCollaborator,
        agent_config: Optional[AgentConfig] = None,
        tools: Optional[Sequence[ToolDefinition]] = None,
        history: Optional[ConversationHistory] = None,
    ):
        super().__init__(agent_config)
        self.history = history if history is not None else ConversationHistory()
        self._executor = executor
        self._display = display
        self._tools = tuple(tools if tools is not None else all_tools())
        self._driver = StreamingDriver(backend, queue_size=self.agent_config.stream_queue_size)
        self._cycle_active = False

    @property
    def busy(self) -> bool:
        return self._cycle_active

    def _generation_settings(self) -> GenerationSettings:
        cfg = self.agent_config
        return GenerationSettings(
            model_name=cfg.model_name,
            system_instruction=cfg.system_instruction,
            include_thoughts=cfg.include_thoughts,
        )

    async def run(self, goal: str, **kwargs: Any) -> CycleOutput:
        if self._cycle_active:
            logger.warning("ToolLoopAgent: input rejected, a cycle is already in progress.")
            return CycleOutput(status="rejected_busy", output="A response is already in progress.", tools_used=[], error=None)

        self._cycle_active = True
        try:
            return await self._run_cycle(goal)
        finally:
            self._cycle_active = False

    async def _run_cycle(self, user_text: str) -> CycleOutput:
        self.history.append(Turn.user_text(user_text))
        tools_used: List[str] = []
        round_trips = 0

        while True:
            outcome = await self._stream_once()

            if isinstance(outcome, ErrorEvent):
                logger.error(f"ToolLoopAgent: cycle aborted by backend error: {outcome.message}")
                self._display.on_error(outcome.error)
                return self._error_output("error", outcome.error, tools_used)

            if not outcome.function_calls:
                self.history.append(Turn.model_text(outcome.text))
                message = FinalMessage(content=outcome.text, thinking=outcome.thinking, tools_used=tuple(tools_used))
                self._display.on_message(message)
                logger.info(f"ToolLoopAgent: cycle finished after {round_trips} tool round-trip(s).")
                return CycleOutput(status="success", output=outcome.text, tools_used=tools_used, error=None)

            if round_trips >= self.agent_config.max_tool_round_trips:
                limit_error = RoundTripLimitError(
                    f"Stopped after {round_trips} tool round-trips; the model kept requesting tools."
                )
                logger.warning(f"ToolLoopAgent: {limit_error}")
                self._display.on_error(limit_error)
                return self._error_output("max_round_trips_reached", limit_error, tools_used)

            if outcome.proposed_history is None:
                raise RuntimeError("DoneEvent reported function calls without a proposed history.")
            self.history.commit(outcome.proposed_history)

            names = [call.name for call in outcome.function_calls]
            tools_used.extend(names)
            self._display.on_tools_used(names)

            responses = await self._execute_calls(outcome.function_calls)
            self.history.append(Turn.tool_results(responses))
            round_trips += 1

    async def _stream_once(self) -> Union[DoneEvent, ErrorEvent]:
        stream = self._driver.start(self.history.snapshot(), self._tools, self._generation_settings())
        try:
            async with aclosing(stream.events()) as events:
                async for event in events:
                    if isinstance(event, ChunkEvent):
                        self._display.on_chunk(event.text)
                    else:
                        return event
        finally:
            await stream.aclose()
        raise RuntimeError("Stream ended without a Done or Error event.")

    async def _execute_calls(self, calls: Sequence[ToolCall]) -> List[FunctionResponsePart]:
        # Sequential on purpose: later calls may depend on earlier side effects.
        responses: List[FunctionResponsePart] = []
        for call in calls:
            result = await self._executor.execute(call.name, call.arguments)
            if "error" in result:
                logger.info(f"ToolLoopAgent: tool '{call.name}' returned error: {result['error']}")
            responses.append(FunctionResponsePart(name=call.name, response=result, call_id=call.call_id))
        return responses

    @staticmethod
    def _error_output(status: str, error: BaseException, tools_used: List[str]) -> CycleOutput:
        message = str(error) or type(error).__name__
        return CycleOutput(
            status=status,  # type: ignore[typeddict-item]
            output=message,
            tools_used=tools_used,
            error=StructuredError(type=type(error).__name__, message=message),
        )
