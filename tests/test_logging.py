import logging

import pytest

from callcoach.utils.logging import setup_logging


@pytest.fixture
def restore_root_handlers():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_writes_to_file(tmp_path, restore_root_handlers):
    log_file = tmp_path / "calls" / "session.log"

    assert setup_logging(str(log_file), "debug") == str(log_file)
    logging.getLogger("orchestrator").debug("Transition idle -> connecting")
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = log_file.read_text()
    assert "DEBUG orchestrator - Transition idle -> connecting" in content


def test_console_handler_only_shows_critical(tmp_path, restore_root_handlers):
    setup_logging(str(tmp_path / "session.log"))

    levels = sorted(h.level for h in logging.getLogger().handlers)
    assert levels == [logging.INFO, logging.CRITICAL]
