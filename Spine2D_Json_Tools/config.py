# config.py
"""
This file serves as the central configuration module for the 'Spine2D_Json_Tools' package.
It is responsible for several key functions:
1.  Logging Setup: It configures the logging system for the entire package through `logging.config.dictConfig`, using a custom formatter to shorten logger names for readability, with an optional log file.
2.  Default Parameters: It defines global constants used across the package, such as the root bone name, the default skin name and the wait/poll intervals of the external Spine CLI.
3.  Spine CLI Configuration: `SpineCliConfig` holds the path of the Spine executable and of the export settings file. It is passed explicitly to `spine_cli.SpineCli` instead of being stored as process-wide state.
4.  Export Settings: `BASE_EXPORT_SETTINGS` is the default JSON export descriptor understood by the Spine CLI, and `write_export_settings()` writes it (with overrides) to disk.

ATTENTION: - Every module obtains its logger with `logging.getLogger(__name__)`, so all of them hang under the "Spine2D_Json_Tools" logger configured here. `setup_logging()` replaces the package handlers each time it is called; it never touches the root logger.
"""
import os
import json
import logging
import logging.config
from dataclasses import dataclass
from typing import Any, Dict, Optional

PACKAGE_LOGGER = "Spine2D_Json_Tools"


class ShortNameFormatter(logging.Formatter):
    def format(self, record):
        record.name = record.name.split(".")[-1]
        return super().format(record)


logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def build_logging_config(
    level: str = "ERROR", log_file: Optional[str] = None
) -> Dict[str, Any]:
    """
    Returns the dictConfig mapping for the package logger.
    A file handler is added when log_file is given.
    """
    level = level.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level}")

    logging_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "()": ShortNameFormatter,
                "format": LOG_FORMAT,
                "datefmt": LOG_DATEFMT,
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
            }
        },
        "loggers": {},
    }

    active_handlers = ["console"]
    if log_file:
        log_dir = os.path.dirname(os.path.abspath(log_file))
        if not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)
        logging_config["handlers"]["file"] = {
            "class": "logging.FileHandler",
            "filename": log_file,
            "formatter": "standard",
            "level": "DEBUG",
            "encoding": "utf-8",
        }
        active_handlers.append("file")

    logging_config["loggers"][PACKAGE_LOGGER] = {
        "handlers": active_handlers,
        "level": level,
        "propagate": False,
    }
    return logging_config


def _setup_default_logging():
    try:
        logging.config.dictConfig(build_logging_config())
        logger.debug("Default logging configuration applied successfully.")
    except Exception as e:
        print("Error setting up default logging in config.py:", e)


def setup_logging(level: str = "ERROR", log_file: Optional[str] = None) -> None:
    """
    Applies the package logging configuration.
    Falls back to the default (console, ERROR) configuration if the requested one fails.
    """
    try:
        logging.config.dictConfig(build_logging_config(level, log_file))
    except (ValueError, OSError) as e:
        print(f"Error applying user logging config: {e}")
        _setup_default_logging()


logger.debug("[LOG] Loading config.py")

ROOT_BONE_NAME = "root"
DEFAULT_SKIN_NAME = "default"

# Packed weighted vertices of this length are the unweighted quad shorthand
SHORTHAND_VERTICES_LENGTH = 8

# External Spine CLI defaults (seconds)
CLI_WAIT_TIMEOUT: float = 30.0
CLI_POLL_INTERVAL: float = 1.0

# Default descriptor for `Spine -e <settings>` JSON export.
BASE_EXPORT_SETTINGS: Dict[str, Any] = {
    "class": "export-json",
    "name": "JSON",
    "open": False,
    "extension": ".json",
    "format": "JSON",
    "prettyPrint": True,
    "nonessential": True,
    "cleanUp": True,
    "packAtlas": None,
    "packSource": "attachments",
    "packTarget": "perskeleton",
    "warnings": True,
}


@dataclass
class SpineCliConfig:
    """Location of the Spine executable and how long to wait for its output."""

    executable: str
    export_settings: Optional[str] = None
    timeout: float = CLI_WAIT_TIMEOUT
    poll_interval: float = CLI_POLL_INTERVAL


def write_export_settings(path: str, **overrides: Any) -> Dict[str, Any]:
    """
    Writes BASE_EXPORT_SETTINGS merged with overrides to path and returns the written dict.
    """
    settings = dict(BASE_EXPORT_SETTINGS)
    settings.update(overrides)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings, f, ensure_ascii=False, indent=4)
    logger.info(f"Export settings saved: {path}")
    return settings
