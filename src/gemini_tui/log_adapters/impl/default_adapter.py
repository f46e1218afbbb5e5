import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)
DEFAULT_LIBRARY_LOGGER_NAME = "gemini_tui"
LOG_FORMAT = "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s (%(module)s:%(lineno)d)"

class DefaultLogAdapter:
    """
    Configures standard Python logging for the `gemini_tui` logger tree.

    The interactive display owns the terminal, so when a `log_file` is given
    records go there; otherwise they go to stderr.
    """
    plugin_id: str = "default_log_adapter_v1"
    description: str = "Configures standard Python logging for the application."

    _library_logger: Optional[logging.Logger] = None
    _handler: Optional[logging.Handler] = None

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        cfg = config or {}
        log_level_str = str(cfg.get("log_level", "WARNING")).upper()
        log_level = getattr(logging, log_level_str, logging.WARNING)
        library_logger_name = cfg.get("library_logger_name", DEFAULT_LIBRARY_LOGGER_NAME)
        self._library_logger = logging.getLogger(library_logger_name)

        log_file = cfg.get("log_file")
        if log_file:
            handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        else:
            handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

        if self._handler is not None:
            self._library_logger.removeHandler(self._handler)
        self._library_logger.addHandler(handler)
        self._handler = handler
        self._library_logger.propagate = False
        self._library_logger.setLevel(log_level)
        logger.info(
            f"{self.plugin_id}: Logging configured for '{library_logger_name}' at level {log_level_str}"
            f" ({'file ' + str(log_file) if log_file else 'stderr'})."
        )

    async def teardown(self) -> None:
        if self._library_logger and self._handler:
            self._library_logger.removeHandler(self._handler)
            self._library_logger.propagate = True
            self._handler.close()
        self._handler = None
        self._library_logger = None
