# src/gemini_tui/key_providers/impl/environment.py
import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from gemini_tui.core.types import Plugin
from gemini_tui.security.key_provider import KeyProvider

logger = logging.getLogger(__name__)

class EnvironmentKeyProvider(KeyProvider, Plugin):
    """Reads keys from the process environment, optionally seeded from a .env file."""
    plugin_id: str = "environment_key_provider_v1"
    description: str = "Provides API keys from environment variables and an optional .env file."

    _dotenv_loaded: bool = False

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        cfg = config or {}
        if cfg.get("load_dotenv", True):
            # Existing environment variables win over .env entries.
            self._dotenv_loaded = load_dotenv(dotenv_path=cfg.get("dotenv_path"), override=False)
        logger.info(f"{self.plugin_id}: Initialized (dotenv loaded: {self._dotenv_loaded}).")

    async def get_key(self, key_name: str) -> Optional[str]:
        key_value = (os.environ.get(key_name) or "").strip()
        if not key_value:
            logger.debug(f"{self.plugin_id}: Key '{key_name}' not set or blank.")
            return None
        logger.debug(f"{self.plugin_id}: Retrieved key '{key_name}' from environment (exists).")
        return key_value

    async def teardown(self) -> None:
        logger.debug(f"{self.plugin_id}: Teardown complete.")
