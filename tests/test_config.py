# tests/test_config.py
"""
Tests for the logging configuration and the Spine CLI settings in config.py.

## Test Coverage Areas:
1. ShortNameFormatter output
2. build_logging_config() with and without a log file
3. setup_logging() fallback on a bad configuration
4. SpineCliConfig defaults
"""
import logging
from unittest.mock import patch
import pytest

from Spine2D_Json_Tools import config


def test_short_name_formatter():
    formatter = config.ShortNameFormatter("%(name)s - %(message)s")
    record = logging.LogRecord(
        "Spine2D_Json_Tools.document", logging.INFO, __file__, 1, "hello", None, None
    )
    assert formatter.format(record) == "document - hello"


def test_build_logging_config_console_only():
    cfg = config.build_logging_config("info")
    assert list(cfg["handlers"]) == ["console"]
    pkg = cfg["loggers"]["Spine2D_Json_Tools"]
    assert pkg["level"] == "INFO"
    assert pkg["handlers"] == ["console"]
    assert pkg["propagate"] is False


def test_build_logging_config_with_file(tmp_path):
    log_file = tmp_path / "logs" / "tools.log"
    cfg = config.build_logging_config("DEBUG", str(log_file))
    assert (tmp_path / "logs").is_dir()
    assert cfg["handlers"]["file"]["filename"] == str(log_file)
    assert cfg["loggers"]["Spine2D_Json_Tools"]["handlers"] == ["console", "file"]


def test_build_logging_config_rejects_unknown_level():
    with pytest.raises(ValueError):
        config.build_logging_config("LOUD")


def test_setup_logging_writes_to_file(tmp_path, clean_package_logger):
    log_file = tmp_path / "tools.log"
    config.setup_logging("INFO", str(log_file))
    logging.getLogger("Spine2D_Json_Tools.document").info("merged 3 bones")
    for h in clean_package_logger.handlers:
        h.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "document - INFO - merged 3 bones" in text


def test_setup_logging_falls_back_to_default(clean_package_logger):
    with patch.object(config, "_setup_default_logging") as fallback:
        config.setup_logging("LOUD")
    fallback.assert_called_once()


def test_setup_logging_replaces_handlers(tmp_path, clean_package_logger):
    config.setup_logging("INFO")
    config.setup_logging("ERROR")
    assert len(clean_package_logger.handlers) == 1
    assert clean_package_logger.level == logging.ERROR


def test_spine_cli_config_defaults():
    cfg = config.SpineCliConfig(executable="Spine")
    assert cfg.export_settings is None
    assert cfg.timeout == config.CLI_WAIT_TIMEOUT
    assert cfg.poll_interval == config.CLI_POLL_INTERVAL
