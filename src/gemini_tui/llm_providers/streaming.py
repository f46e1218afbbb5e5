# src/gemini_tui/llm_providers/streaming.py
"""Streaming driver: one producer task feeding a bounded FIFO of StreamEvents."""
import asyncio
import logging
from typing import AsyncIterator, List, Optional, Sequence, Tuple

from gemini_tui.conversation.types import FunctionCallPart, Part, TextPart, ThoughtPart, Turn
from gemini_tui.tools.types import ToolCall, ToolDefinition

from .abc import StreamingBackend
from .types import ChunkEvent, DoneEvent, ErrorEvent, GenerationSettings, StreamEvent

logger = logging.getLogger(__name__)

DEFAULT_STREAM_QUEUE_SIZE = 10


class ActiveStream:
    """Consumer side of one streaming request. Yields events until Done or Error."""

    def __init__(self, queue: "asyncio.Queue[StreamEvent]", task: "asyncio.Task[None]"):
        self._queue = queue
        self._task = task
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    async def events(self) -> AsyncIterator[StreamEvent]:
        try:
            while not self._finished:
                event = await self._queue.get()
                if isinstance(event, (DoneEvent, ErrorEvent)):
                    self._finished = True
                yield event
            await self._task
        finally:
            if not self._task.done():
                self._task.cancel()

    async def aclose(self) -> None:
        if not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._finished = True


class StreamingDriver:
    """
    Runs a backend stream in a background task and demultiplexes its parts.

    Plain text is emitted immediately as ChunkEvents. Reasoning text and
    function calls are accumulated; reasoning because it is often incoherent
    mid-stream, function calls because their original parts must be replayed
    verbatim. The driver never mutates the caller's history: for tool
    requests it returns a proposed extended history in the DoneEvent.
    """

    def __init__(self, backend: StreamingBackend, queue_size: int = DEFAULT_STREAM_QUEUE_SIZE):
        if queue_size < 1:
            raise ValueError("queue_size must be a positive integer.")
        self._backend = backend
        self._queue_size = queue_size

    def start(
        self,
        history: Sequence[Turn],
        tools: Sequence[ToolDefinition],
        settings: GenerationSettings,
    ) -> ActiveStream:
        snapshot: Tuple[Turn, ...] = tuple(history)
        queue: "asyncio.Queue[StreamEvent]" = asyncio.Queue(maxsize=self._queue_size)
        task = asyncio.create_task(
            self._produce(snapshot, tuple(tools), settings, queue),
            name=f"stream:{settings.model_name}",
        )
        logger.debug(f"StreamingDriver: started stream for model '{settings.model_name}' with {len(snapshot)} turn(s).")
        return ActiveStream(queue, task)

    async def _produce(
        self,
        history: Tuple[Turn, ...],
        tools: Tuple[ToolDefinition, ...],
        settings: GenerationSettings,
        queue: "asyncio.Queue[StreamEvent]",
    ) -> None:
        answer: List[str] = []
        thinking: List[str] = []
        call_parts: List[FunctionCallPart] = []

        try:
            async for parts in self._backend.stream_parts(history, tools, settings):
                for part in parts:
                    chunk = self._route_part(part, answer, thinking, call_parts)
                    if chunk is not None:
                        await queue.put(chunk)
        except Exception as e:
            logger.error(f"StreamingDriver: stream for model '{settings.model_name}' failed: {e}", exc_info=True)
            await queue.put(ErrorEvent(error=e))
            return

        await queue.put(self._build_done(history, "".join(answer), "".join(thinking), call_parts))

    @staticmethod
    def _route_part(
        part: Part,
        answer: List[str],
        thinking: List[str],
        call_parts: List[FunctionCallPart],
    ) -> Optional[ChunkEvent]:
        if isinstance(part, FunctionCallPart):
            call_parts.append(part)
        elif isinstance(part, ThoughtPart):
            if part.text:
                thinking.append(part.text)
        elif isinstance(part, TextPart):
            if part.text:
                answer.append(part.text)
                return ChunkEvent(text=part.text)
        else:
            logger.debug(f"StreamingDriver: ignoring unexpected part kind '{getattr(part, 'kind', type(part).__name__)}'.")
        return None

    @staticmethod
    def _build_done(
        history: Tuple[Turn, ...],
        text: str,
        thinking: str,
        call_parts: List[FunctionCallPart],
    ) -> DoneEvent:
        if not call_parts:
            return DoneEvent(text=text, thinking=thinking)

        model_parts: List[Part] = [TextPart(text=text)] if text else []
        model_parts.extend(call_parts)
        proposed = history + (Turn(role="model", parts=tuple(model_parts)),)
        calls = tuple(
            ToolCall(name=p.name, arguments=dict(p.args), index=i, call_id=p.call_id)
            for i, p in enumerate(call_parts)
        )
        logger.debug(f"StreamingDriver: stream requested {len(calls)} tool call(s): {[c.name for c in calls]}.")
        return DoneEvent(text=text, thinking=thinking, function_calls=calls, proposed_history=proposed)
