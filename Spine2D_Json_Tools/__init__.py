# __init__.py

"""
Spine2D Json Tools
Copyright (c) 2025 Spine2D Json Tools contributors

This file is part of Spine2D Json Tools.

Spine2D Json Tools is free software: you can redistribute it
and/or modify it under the terms of the GNU General Public License as
published by the Free Software Foundation, either version 3 of the License,
or (at your option) any later version.

Spine2D Json Tools is distributed in the hope that it will
be useful, but WITHOUT ANY WARRANTY; without even the implied warranty
of MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License along
with Spine2D Json Tools. If not, see <https://www.gnu.org/licenses/>.
This file serves as the main entry point for the 'Spine2D Json Tools' package.
Its primary responsibilities are:
1.  Package Metadata: `__version__`.
2.  Public API: It re-exports the document model (`SpineDocument`), the bone graph, the vertex codec, the merge engine, the Spine CLI wrapper and the error types, so callers only import from the package root.
3.  Logging: It creates the "Spine2D_Json_Tools" package logger. Nothing is configured on import; call `config.setup_logging()` (the command line does) to attach handlers.

ATTENTION: - Importing the package must not configure logging or touch the file system. The image helpers pull in numpy and Pillow and are therefore imported lazily from `image_utils`.
"""

__version__ = "0.1.0"

import logging

logger = logging.getLogger("Spine2D_Json_Tools")

from .config import SpineCliConfig, setup_logging, write_export_settings
from .errors import (
    CliTimeoutError,
    ConfigError,
    CycleError,
    DuplicateError,
    GraphCorruptionError,
    NotFoundError,
    SpineCliError,
    SpineDataError,
)
from .bone_graph import BoneGraph
from .vertex_codec import (
    VertexData,
    convert_skins,
    to_index_addressed,
    to_name_addressed,
)
from .document import SpineDocument
from .json_merger import merge_documents, read_json, write_json
from .spine_cli import SpineCli, wait_for_file

__all__ = [
    "BoneGraph",
    "CliTimeoutError",
    "ConfigError",
    "CycleError",
    "DuplicateError",
    "GraphCorruptionError",
    "NotFoundError",
    "SpineCli",
    "SpineCliConfig",
    "SpineCliError",
    "SpineDataError",
    "SpineDocument",
    "VertexData",
    "convert_skins",
    "merge_documents",
    "read_json",
    "setup_logging",
    "to_index_addressed",
    "to_name_addressed",
    "wait_for_file",
    "write_export_settings",
    "write_json",
]
