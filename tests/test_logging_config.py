# Area: Shared Tests
"""Tests for logging setup, fatal error reporting and error blocks."""

import json
import logging

import pytest

from buzzer_quiz._shared import JSONFormatter, TerminalFormatter, log_fatal_error, setup_logging
from buzzer_quiz.error_formatter import format_error_block, indent_json
from buzzer_quiz.errors import InvalidTeamError, PromiseTransitionError, UnknownStateError


@pytest.fixture
def restore_package_logger():
    """Put the package logger back the way the other tests expect it."""
    pkg_logger = logging.getLogger("buzzer_quiz")
    handlers = list(pkg_logger.handlers)
    level = pkg_logger.level
    propagate = pkg_logger.propagate
    yield pkg_logger
    for handler in pkg_logger.handlers:
        handler.close()
    pkg_logger.handlers[:] = handlers
    pkg_logger.setLevel(level)
    pkg_logger.propagate = propagate


def _record(msg="hello", level=logging.INFO, **extra):
    record = logging.LogRecord("buzzer_quiz.test", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestErrorBlocks:
    def test_unknown_state_block(self):
        error = UnknownStateError("nowhere", ["idle", "fetchClue"])
        block = error.format_error_log()
        assert "UNKNOWN_STATE" in block
        assert "nowhere" in block
        assert '"fetchClue"' in block
        assert "Transition:" not in block
        assert str(error) == "can't go to state named 'nowhere', state not found"

    def test_promise_block_names_cause(self):
        error = PromiseTransitionError("fetchClue", "promise:fetchClue", ValueError("bad json"))
        block = error.format_error_log()
        assert "PROMISE_REJECTED" in block
        assert "Transition:   promise:fetchClue" in block
        assert "ValueError: bad json" in block

    def test_invalid_team_message(self):
        error = InvalidTeamError(7, 4)
        assert "7" in str(error)
        assert "4" in str(error)

    def test_format_error_block_without_extras(self):
        block = format_error_block("X", "idle", None, None, None)
        assert "DETAILS" not in block
        assert "CAUSE" not in block

    def test_indent_json_falls_back_to_repr(self):
        data = {1: 2, (1, 2): "tuple key"}
        assert indent_json(data) == f" {data!r}"


class TestFormatters:
    def test_json_formatter_fields(self):
        line = JSONFormatter().format(_record("entered", game_state="waitForBuzzes"))
        data = json.loads(line)
        assert data["message"] == "entered"
        assert data["logger"] == "buzzer_quiz.test"
        assert data["game_state"] == "waitForBuzzes"
        assert "error_type" not in data

    def test_terminal_formatter_restores_levelname(self):
        record = _record(level=logging.WARNING)
        text = TerminalFormatter(fmt="%(levelname)s %(message)s").format(record)
        assert "\033[33m" in text
        assert record.levelname == "WARNING"


class TestSetupLogging:
    def test_writes_json_lines(self, restore_package_logger, tmp_path):
        log_file = tmp_path / "logs" / "game.log"
        setup_logging(str(log_file), logging.DEBUG)

        logging.getLogger("buzzer_quiz.game").debug("debug line")
        for handler in restore_package_logger.handlers:
            handler.flush()

        assert restore_package_logger.propagate is False
        entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert entries[-1]["message"] == "debug line"
        assert entries[-1]["level"] == "DEBUG"

    def test_repeated_setup_replaces_handlers(self, restore_package_logger, tmp_path):
        setup_logging(str(tmp_path / "a.log"))
        setup_logging(str(tmp_path / "b.log"))
        assert len(restore_package_logger.handlers) == 2


class TestLogFatalError:
    def test_block_to_stderr_and_critical_record(self, restore_package_logger, tmp_path, capsys):
        log_file = tmp_path / "game.log"
        setup_logging(str(log_file))

        log_fatal_error(UnknownStateError("nowhere", ["idle"]))
        for handler in restore_package_logger.handlers:
            handler.flush()

        assert "UNKNOWN_STATE" in capsys.readouterr().err
        entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert entry["level"] == "CRITICAL"
        assert entry["game_state"] == "nowhere"
        assert entry["error_type"] == "UnknownStateError"
