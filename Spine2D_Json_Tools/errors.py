# errors.py
"""
Exception hierarchy shared by every module of the toolkit.

All errors derive from `SpineDataError`, so callers (and the command line) can
catch a single type. Every error here is fatal to the operation that raised it;
nothing is retried internally.
"""
from typing import Any, List, Optional


class SpineDataError(Exception):
    """Base class for all toolkit errors."""


class CycleError(SpineDataError):
    """Inserting a bone would make its parent chain loop back to itself."""

    def __init__(self, name: str, chain: List[Any]):
        self.name = name
        self.chain = chain
        names = [node.get("name") for node in chain]
        super().__init__(f"Bone '{name}' would form a cycle: {' -> '.join(map(str, names))}")


class DuplicateError(SpineDataError):
    """A bone name or a skin attachment key already exists."""

    def __init__(self, key: str, message: Optional[str] = None):
        self.key = key
        super().__init__(message or f"Duplicate key '{key}'")


class NotFoundError(SpineDataError, KeyError):
    """A required bone, skin, animation or bone reference is missing."""

    def __init__(self, key: Any, message: Optional[str] = None):
        self.key = key
        self.message = message or f"'{key}' not found"
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class GraphCorruptionError(SpineDataError):
    """A parent chain is longer than the graph itself."""


class ConfigError(SpineDataError):
    """A required configuration value is missing or invalid."""


class SpineCliError(SpineDataError):
    """The external Spine executable exited with a non-zero status."""

    def __init__(self, returncode: int, command: List[str], stderr: str = ""):
        self.returncode = returncode
        self.command = command
        self.stderr = stderr
        super().__init__(
            f"Spine CLI exited with code {returncode}: {' '.join(command)}"
        )


class CliTimeoutError(SpineDataError, TimeoutError):
    """The Spine CLI did not finish, or its output file never appeared, within the timeout."""

    def __init__(self, path: str, timeout: float, message: str = None):
        self.path = path
        self.timeout = timeout
        super().__init__(message or f"File {path} did not appear within {timeout:g}s")
