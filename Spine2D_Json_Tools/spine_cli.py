# spine_cli.py
"""
This module wraps the command line interface of the Spine editor executable.

The key functionalities are:
1.  Command Execution: `SpineCli.run()` starts the executable with an argument list (no shell), logs its output and raises `SpineCliError` on a non-zero exit code. A process still running after the configured timeout is killed and reported as `CliTimeoutError`.
2.  Output Polling: The editor may return before its output file is written. `wait_for_file()` polls for the file once per interval and raises `CliTimeoutError` when it never appears within the configured timeout.
3.  Spine Operations: importing a skeleton with a new scale (`import_and_adjust_scale`), importing a project and exporting it to JSON (`import_and_export_json`) and unpacking a texture atlas (`unpack_texture`).

ATTENTION: - The executable path and the export settings path are taken from the `SpineCliConfig` given to the constructor; nothing is read from global state. Export settings are only required by `import_and_export_json`.
"""
from __future__ import annotations

import logging
import math
import os
import subprocess
import time
from typing import List, Optional

from .config import SpineCliConfig
from .errors import CliTimeoutError, ConfigError, SpineCliError

logger = logging.getLogger(__name__)


def wait_for_file(path: str, timeout: float, poll_interval: float = 1.0) -> None:
    """
    Polls for path every poll_interval seconds, at most timeout seconds.
    Raises CliTimeoutError if the file does not exist by then.
    """
    attempts = max(1, math.ceil(timeout / poll_interval)) if poll_interval > 0 else 1
    for _ in range(attempts):
        if os.path.exists(path):
            return
        time.sleep(poll_interval)
    if os.path.exists(path):
        return
    logger.error(f"[wait_for_file] {path} did not appear within {timeout}s")
    raise CliTimeoutError(path, timeout)


class SpineCli:
    """Runs the Spine executable described by a SpineCliConfig."""

    def __init__(self, config: SpineCliConfig):
        if not config.executable:
            raise ConfigError("Spine CLI executable path is not set")
        self.config = config

    def run(self, args: List[str], output_path: Optional[str] = None) -> subprocess.CompletedProcess:
        """
        Runs the executable with args. When output_path is given, waits for it to appear.
        """
        command = [self.config.executable, *args]
        logger.info(f"[run] {' '.join(command)}")
        try:
            result = subprocess.run(
                command, capture_output=True, text=True, timeout=self.config.timeout
            )
        except subprocess.TimeoutExpired:
            logger.error(f"[run] Spine CLI still running after {self.config.timeout}s, killed")
            raise CliTimeoutError(
                self.config.executable,
                self.config.timeout,
                f"Spine CLI did not exit within {self.config.timeout:g}s",
            )
        if result.stdout:
            logger.info(result.stdout.strip())
        if result.stderr:
            logger.info(result.stderr.strip())
        if result.returncode != 0:
            raise SpineCliError(result.returncode, command, result.stderr or "")
        if output_path is not None:
            wait_for_file(output_path, self.config.timeout, self.config.poll_interval)
        return result

    def import_and_adjust_scale(self, skel_path: str, out_path: str, scale: float):
        """
        Imports skel_path into a .spine project at out_path, scaled by scale, and repacks it.
        """
        if not out_path.endswith(".spine"):
            raise ValueError(f"Output path must end with .spine: {out_path}")
        return self.run(
            ["-i", skel_path, "-o", out_path, "-s", f"{scale:g}", "-r"], out_path
        )

    def import_and_export_json(self, spine_path: str, out_path: str):
        """Imports a .spine/.skel file and exports it as JSON using the export settings."""
        if not self.config.export_settings:
            raise ConfigError("Export settings path is not set")
        return self.run(
            ["-i", spine_path, "-o", out_path, "-e", self.config.export_settings],
            out_path,
        )

    def unpack_texture(self, png_folder: str, out_path: str, atlas_path: str):
        """Unpacks the atlas pages found in png_folder into separate images in out_path."""
        return self.run(["-i", png_folder, "-o", out_path, "-c", atlas_path])
