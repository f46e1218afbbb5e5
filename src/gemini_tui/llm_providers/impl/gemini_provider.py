### src/gemini_tui/llm_providers/impl/gemini_provider.py
import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from google import genai
from google.genai import types as genai_types

from gemini_tui.conversation.types import (
    FunctionCallPart,
    FunctionResponsePart,
    Part,
    TextPart,
    ThoughtPart,
    Turn,
)
from gemini_tui.llm_providers.abc import StreamingBackend
from gemini_tui.llm_providers.types import GenerationSettings
from gemini_tui.security.key_provider import KeyProvider
from gemini_tui.tools.types import ToolDefinition

logger = logging.getLogger(__name__)


class GeminiLLMProviderPlugin(StreamingBackend):
    plugin_id: str = "gemini_llm_provider_v1"
    description: str = "Streaming backend for Google Gemini models using the google-genai SDK."

    _client: Optional[genai.Client] = None
    _api_key_name: str = "GOOGLE_API_KEY"
    _key_provider: Optional[KeyProvider] = None

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        cfg = config or {}
        self._key_provider = cfg.get("key_provider")
        if not self._key_provider or not isinstance(self._key_provider, KeyProvider):
            logger.error(f"{self.plugin_id}: KeyProvider not found in config or is invalid. Cannot fetch API key.")
            return

        self._api_key_name = cfg.get("api_key_name", self._api_key_name)
        api_key = await self._key_provider.get_key(self._api_key_name)
        if not api_key:
            logger.error(f"{self.plugin_id}: API key '{self._api_key_name}' not found. Client not initialized.")
            return
        try:
            self._client = genai.Client(api_key=api_key)
            logger.info(f"{self.plugin_id}: Initialized Gemini client with API key '{self._api_key_name}'.")
        except Exception as e:
            logger.error(f"{self.plugin_id}: Failed to initialize Gemini client: {e}", exc_info=True)
            self._client = None

    @property
    def is_ready(self) -> bool:
        return self._client is not None

    # --- conversions between conversation parts and SDK types ---

    def _part_to_gemini(self, part: Part) -> genai_types.Part:
        if isinstance(part, TextPart):
            return genai_types.Part(text=part.text)
        if isinstance(part, ThoughtPart):
            return genai_types.Part(text=part.text, thought=True)
        if isinstance(part, FunctionCallPart):
            return genai_types.Part(
                function_call=genai_types.FunctionCall(name=part.name, args=dict(part.args), id=part.call_id),
                thought_signature=part.thought_signature,
            )
        if isinstance(part, FunctionResponsePart):
            return genai_types.Part(
                function_response=genai_types.FunctionResponse(
                    name=part.name, response=dict(part.response), id=part.call_id
                )
            )
        raise TypeError(f"Unsupported part type: {type(part).__name__}")

    def _history_to_gemini(self, history: Sequence[Turn]) -> List[genai_types.Content]:
        return [
            genai_types.Content(role=turn.role, parts=[self._part_to_gemini(p) for p in turn.parts])
            for turn in history
        ]

    def _part_from_gemini(self, part: genai_types.Part) -> Optional[Part]:
        if part.function_call is not None:
            fc = part.function_call
            return FunctionCallPart(
                name=fc.name or "",
                args=dict(fc.args) if fc.args else {},
                call_id=fc.id,
                thought_signature=part.thought_signature,
            )
        if part.text:
            if part.thought:
                return ThoughtPart(text=part.text)
            return TextPart(text=part.text)
        return None

    def _tool_to_gemini(self, tool: ToolDefinition) -> genai_types.FunctionDeclaration:
        properties = {
            name: genai_types.Schema(type=genai_types.Type(param.type.upper()), description=param.description)
            for name, param in tool.parameters.items()
        }
        return genai_types.FunctionDeclaration(
            name=tool.name,
            description=tool.description,
            parameters=genai_types.Schema(
                type=genai_types.Type.OBJECT,
                properties=properties,
                required=tool.required_parameters,
            ),
        )

    def _build_config(
        self, tools: Sequence[ToolDefinition], settings: GenerationSettings
    ) -> genai_types.GenerateContentConfig:
        config_kwargs: Dict[str, Any] = {
            # Tool calls are executed by the agent loop, never by the SDK.
            "automatic_function_calling": genai_types.AutomaticFunctionCallingConfig(disable=True),
        }
        if settings.system_instruction:
            config_kwargs["system_instruction"] = genai_types.Content(
                parts=[genai_types.Part(text=settings.system_instruction)]
            )
        if tools:
            config_kwargs["tools"] = [
                genai_types.Tool(function_declarations=[self._tool_to_gemini(t) for t in tools])
            ]
        if settings.include_thoughts:
            config_kwargs["thinking_config"] = genai_types.ThinkingConfig(include_thoughts=True)
        return genai_types.GenerateContentConfig(**config_kwargs)

    async def stream_parts(
        self,
        history: Sequence[Turn],
        tools: Sequence[ToolDefinition],
        settings: GenerationSettings,
    ) -> AsyncIterator[List[Part]]:
        if not self._client or not self._client.aio:
            raise RuntimeError(f"{self.plugin_id}: Client or async client (aio) not initialized.")

        request_kwargs: Dict[str, Any] = {
            "model": settings.model_name,
            "contents": self._history_to_gemini(history),
            "config": self._build_config(tools, settings),
        }
        logger.debug(
            f"{self.plugin_id}: Streaming from '{settings.model_name}' with {len(history)} turn(s), "
            f"{len(tools)} tool(s), include_thoughts={settings.include_thoughts}."
        )
        try:
            response_stream = await self._client.aio.models.generate_content_stream(**request_kwargs)
            async for chunk in response_stream:
                if not chunk.candidates or chunk.candidates[0].content is None:
                    continue
                parts = [
                    converted
                    for converted in (self._part_from_gemini(p) for p in chunk.candidates[0].content.parts or [])
                    if converted is not None
                ]
                if parts:
                    yield parts
        except Exception as e:
            logger.error(f"{self.plugin_id}: Gemini API call failed: {e}", exc_info=True)
            raise RuntimeError(f"Gemini API call failed: {e}") from e

    async def teardown(self) -> None:
        self._client = None
        self._key_provider = None
        logger.info(f"{self.plugin_id}: Teardown complete.")
