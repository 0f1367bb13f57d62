"""Tests for seqpipe.util.config module."""
import logging
import os

import pytest

import seqpipe.util.config
from seqpipe.util.config import get_config, get_flag, parse_key_value_str, reset_config
from seqpipe.util.constants import ITERATION_GUARD
from testutils import monkeypatched_env


def test_parse_key_value_list():
    assert parse_key_value_str("a:b,c") == {"a": "b", "c": "c"}
    assert parse_key_value_str("a:b,c:d") == {"a": "b", "c": "d"}
    assert parse_key_value_str("a,b,c") == {"a": "a", "b": "b", "c": "c"}
    assert parse_key_value_str("a, b, c: d") == {"a": "a", "b": "b", "c": "d"}
    assert parse_key_value_str("root:INFO,seqpipe.seq:DEBUG") == {"root": "INFO", "seqpipe.seq": "DEBUG"}

    assert parse_key_value_str("a:b,c", False) == {"a": "b", "c": "c"}
    with pytest.raises(ValueError):
        parse_key_value_str("a:b,c", True)


def test_get_config(tmp_path, monkeypatched_env):
    monkeypatched_env({"SEQPIPE_ITERATION_GUARD": "false"})
    reset_config()
    assert seqpipe.util.config._config is None

    test_path = tmp_path / "test.toml"

    cfg = get_config(path=test_path)
    assert seqpipe.util.config._config is not None
    assert cfg == {"iteration_guard": "false"}

    with open(test_path, "w") as file:
        file.write('iteration_guard = true\nlogger_levels = "seqpipe:INFO"\n')

    # Cached until reload is requested
    assert get_config(path=test_path) == {"iteration_guard": "false"}

    cfg = get_config(path=test_path, reload=True)
    assert cfg["iteration_guard"] == "false"
    assert cfg["logger_levels"] == "seqpipe:INFO"

    cfg = get_config(path=test_path, reload=True, ignore_env=True)
    assert cfg["iteration_guard"] is True


def test_get_config_nofile(monkeypatch, monkeypatched_env):
    monkeypatched_env({
        "SEQPIPE_FUNNY_ITEM": "silly",
        "X": "Y"
    })
    monkeypatch.setattr(os.path, "exists", lambda path: False)
    reset_config()

    cfg = get_config()
    assert cfg == {"funny_item": "silly"}


@pytest.mark.parametrize("raw,expected", [
    (True, True), (False, False), (1, True), (0, False),
    ("1", True), ("TRUE", True), ("yes", True), ("On", True),
    ("0", False), ("false", False), ("no", False), ("off", False), ("", False),
])
def test_get_flag(config_values, raw, expected):
    config_values({ITERATION_GUARD: raw})
    assert get_flag(ITERATION_GUARD) is expected


def test_get_flag_default_and_invalid(config_values):
    assert get_flag("missing") is False
    assert get_flag("missing", True) is True
    config_values({"bad": "maybe"})
    with pytest.raises(ValueError, match="not a boolean"):
        get_flag("bad")


def test_configure_logging(tmp_path, capsys):

    seqpipe.util.config.configure_logger("seqpipe.test:INFO")
    logger = logging.getLogger("seqpipe.test")
    assert logger.level == logging.INFO
    logger.debug("This is a test debug message")
    logger.info("This is a test info message")
    logger.warning("This is a test warning message")
    captured = capsys.readouterr()
    assert "DEBUG" not in captured.err
    assert "INFO" in captured.err
    assert "WARNING" in captured.err

    log_file = tmp_path / "test.log"

    seqpipe.util.config.configure_logger("seqpipe.test:WARNING", logger_files=f"seqpipe.test:{log_file}")
    logger = logging.getLogger("seqpipe.test")
    assert logger.level == logging.WARNING
    logger.info("This is a test info message")
    logger.error("This is a test error message")
    captured = capsys.readouterr()
    assert "INFO" not in captured.err
    assert "ERROR" in captured.err

    with open(log_file, "r") as file:
        log_data = file.read()
        assert "INFO" not in log_data
        assert "ERROR" in log_data


def test_configure_logging_from_config(config_values):
    config_values({"logger_levels": "seqpipe.test.fromconfig:ERROR"})
    seqpipe.util.config.configure_logger()
    assert logging.getLogger("seqpipe.test.fromconfig").level == logging.ERROR


def test_iteration_guard_from_environment(monkeypatch, tmp_path):
    from seqpipe.collections import Vec

    monkeypatch.setenv("SEQPIPE_ITERATION_GUARD", "off")
    reset_config()
    get_config(path=tmp_path / "absent.toml")

    v = Vec([1, 2])
    it = v.iter()
    v.push(3)
    assert it.collect() == [1, 2]
