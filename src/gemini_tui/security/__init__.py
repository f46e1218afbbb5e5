from .key_provider import KeyProvider

__all__ = ["KeyProvider"]
