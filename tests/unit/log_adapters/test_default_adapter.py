import logging

import pytest

from gemini_tui.log_adapters.impl.default_adapter import DEFAULT_LIBRARY_LOGGER_NAME, DefaultLogAdapter


@pytest.mark.asyncio
async def test_setup_defaults_to_warning_on_stderr():
    adapter = DefaultLogAdapter()
    await adapter.setup()
    lib_logger = logging.getLogger(DEFAULT_LIBRARY_LOGGER_NAME)
    try:
        assert lib_logger.level == logging.WARNING
        assert lib_logger.propagate is False
        assert adapter._handler in lib_logger.handlers
        assert isinstance(adapter._handler, logging.StreamHandler)
    finally:
        await adapter.teardown()
        lib_logger.propagate = True
        lib_logger.setLevel(logging.NOTSET)
    assert adapter._handler is None


@pytest.mark.asyncio
async def test_log_file_receives_formatted_records(tmp_path):
    log_file = tmp_path / "gemini-tui.log"
    adapter = DefaultLogAdapter()
    await adapter.setup({"log_level": "debug", "log_file": str(log_file), "library_logger_name": "gemini_tui_test_lib"})
    child = logging.getLogger("gemini_tui_test_lib.agents")
    child.debug("cycle started")
    await adapter.teardown()
    logging.getLogger("gemini_tui_test_lib").propagate = True

    text = log_file.read_text(encoding="utf-8")
    assert "gemini_tui_test_lib.agents - [DEBUG] - cycle started" in text
    assert "(test_default_adapter:" in text


@pytest.mark.asyncio
async def test_unknown_level_falls_back_to_warning():
    adapter = DefaultLogAdapter()
    await adapter.setup({"log_level": "CHATTY", "library_logger_name": "gemini_tui_test_levels"})
    try:
        assert logging.getLogger("gemini_tui_test_levels").level == logging.WARNING
    finally:
        await adapter.teardown()


@pytest.mark.asyncio
async def test_repeated_setup_replaces_handler():
    adapter = DefaultLogAdapter()
    await adapter.setup({"library_logger_name": "gemini_tui_test_repeat"})
    await adapter.setup({"library_logger_name": "gemini_tui_test_repeat"})
    try:
        assert len(logging.getLogger("gemini_tui_test_repeat").handlers) == 1
    finally:
        await adapter.teardown()
    assert logging.getLogger("gemini_tui_test_repeat").handlers == []
