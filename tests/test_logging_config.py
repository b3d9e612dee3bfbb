"""Test logging configuration and context fields.

Tests for bitstroke.utils.logging_config:
    - setup_logging() is idempotent (no stacked handlers)
    - Context fields appear in human and JSON output
    - pop_context removes single keys or everything
    - Rotating file handler selection

Run:
    pytest tests/test_logging_config.py -v
"""

import json
import logging
import logging.handlers

import pytest

from bitstroke.utils import logging_config
from bitstroke.utils.logging_config import (
    ContextFormatter,
    get_context,
    pop_context,
    push_context,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_logging():
    """Put the root logger and context back after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    context = get_context()
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
    pop_context()
    push_context(**context)


def _record(msg="hello"):
    return logging.LogRecord("bitstroke.test", logging.INFO, __file__, 1, msg, None, None)


def test_setup_logging_idempotent(tmp_path):
    setup_logging("INFO", log_file=str(tmp_path / "a.log"))
    handlers = setup_logging("DEBUG", log_file=str(tmp_path / "b.log"))
    root = logging.getLogger()
    assert len(handlers) == 2
    assert [h for h in root.handlers if h in handlers] == handlers
    assert not any(
        isinstance(h, logging.FileHandler) and h.baseFilename.endswith("a.log")
        for h in root.handlers
    )
    assert root.level == logging.DEBUG


def test_context_push_pop():
    pop_context()
    push_context(app="replay")
    push_context(stroke="00001-deadbeef")
    assert get_context() == {'app': 'replay', 'stroke': '00001-deadbeef'}
    pop_context(keys=["stroke", "missing"])
    assert get_context() == {'app': 'replay'}
    pop_context()
    assert get_context() == {}


def test_human_format_includes_context():
    pop_context()
    push_context(stroke="00002-cafebabe")
    line = ContextFormatter("human", use_color=False).format(_record())
    parts = line.split(" | ")
    assert parts[1].strip() == "INFO"
    assert parts[2] == "stroke=00002-cafebabe"
    assert parts[-1] == "hello"


def test_json_format_includes_context():
    pop_context()
    push_context(app="replay")
    payload = json.loads(ContextFormatter("json").format(_record("x=1")))
    assert payload['lvl'] == "INFO"
    assert payload['app'] == "replay"
    assert payload['msg'] == "x=1"


def test_unknown_format_mode():
    with pytest.raises(ValueError):
        ContextFormatter("xml")


def test_file_handler_writes_json(tmp_path):
    log_file = tmp_path / "logs" / "engine.log"
    setup_logging("INFO", log_file=str(log_file), json=True, to_stderr=False)
    logging.getLogger("bitstroke.test").info("written")
    for handler in logging.getLogger().handlers:
        handler.flush()
    lines = log_file.read_text().strip().splitlines()
    assert json.loads(lines[-1])['msg'] == "written"


def test_rotating_handlers(tmp_path):
    size = logging_config._create_file_handler(
        str(tmp_path / "s.log"), {'mode': 'size', 'max_bytes': 1000}, False, "UTC")
    timed = logging_config._create_file_handler(
        str(tmp_path / "t.log"), {'mode': 'time', 'when': 'H'}, False, "UTC")
    try:
        assert isinstance(size, logging.handlers.RotatingFileHandler)
        assert isinstance(timed, logging.handlers.TimedRotatingFileHandler)
    finally:
        size.close()
        timed.close()
    with pytest.raises(ValueError):
        logging_config._create_file_handler(str(tmp_path / "x.log"), {'mode': 'never'}, False, "UTC")


def test_get_logger_and_set_level():
    assert logging_config.get_logger("bitstroke.engine") is logging.getLogger("bitstroke.engine")
    setup_logging("INFO", to_stderr=False)
    logging_config.set_level("debug")
    assert logging.getLogger().level == logging.DEBUG
    logging_config.set_level("WARNING")
    assert logging.getLogger().level == logging.WARNING
