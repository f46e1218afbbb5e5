from .gemini_provider import GeminiLLMProviderPlugin

__all__ = ["GeminiLLMProviderPlugin"]
