"""Protocol for KeyProvider: supplies the backend bearer token."""
import logging
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

@runtime_checkable
class KeyProvider(Protocol):
    """
    Protocol for a component that provides API keys.
    The application never stores keys itself; it asks a KeyProvider on demand.
    """
    async def get_key(self, key_name: str) -> Optional[str]:
        """
        Asynchronously retrieves the API key value for the given key name.

        Args:
            key_name: The logical name of the API key (e.g., "GOOGLE_API_KEY").

        Returns:
            The API key string if found, otherwise None. Implementations must
            never log the key value itself.
        """
        ...
