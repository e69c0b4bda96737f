# cli.py
"""
Command line entry point: `python -m Spine2D_Json_Tools <command> ...`

Commands:
    merge PRIMARY SECONDARY -o OUT       merge SECONDARY into PRIMARY
    rename FILE --kind KIND -o OUT       prefix/suffix every identifier of one class
    extend FILE ANIMATION COUNT -o OUT   loop an animation COUNT times
    durations FILE                       print the duration of every animation
    unpremultiply INPUT OUTPUT           convert a premultiplied-alpha PNG
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import LOG_LEVELS, setup_logging
from .document import SpineDocument
from .errors import SpineDataError

logger = logging.getLogger(__name__)

RENAME_METHODS = {
    "bone": "rename_bones",
    "slot": "rename_slots",
    "attachment": "rename_attachments",
    "animation": "rename_animations",
    "transform": "rename_transform_constraints",
    "ik": "rename_ik_constraints",
    "path": "rename_path_constraints",
}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="Spine2D_Json_Tools")
    ap.add_argument("--log-level", default="WARNING", choices=list(LOG_LEVELS))
    ap.add_argument("--log-file", default=None, help="Also write logs to this file")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("merge", help="Merge SECONDARY into PRIMARY")
    p.add_argument("primary")
    p.add_argument("secondary")
    p.add_argument("-o", "--output", required=True)

    p = sub.add_parser("rename", help="Add a prefix/suffix to every identifier of a kind")
    p.add_argument("file")
    p.add_argument("--kind", choices=sorted(RENAME_METHODS), default="bone")
    p.add_argument("--prefix", default="")
    p.add_argument("--suffix", default="")
    p.add_argument("--include-root", action="store_true", help="Also rename the root bone")
    p.add_argument("-o", "--output", required=True)

    p = sub.add_parser("extend", help="Loop an animation COUNT times")
    p.add_argument("file")
    p.add_argument("animation")
    p.add_argument("count", type=int)
    p.add_argument("-o", "--output", required=True)

    p = sub.add_parser("durations", help="Print the duration of every animation")
    p.add_argument("file")

    p = sub.add_parser("unpremultiply", help="Un-premultiply the alpha of a PNG")
    p.add_argument("input")
    p.add_argument("output")
    return ap


def _merge(ns) -> None:
    primary = SpineDocument.from_file(ns.primary)
    primary.merge(SpineDocument.from_file(ns.secondary))
    primary.save(ns.output)


def _rename(ns) -> None:
    doc = SpineDocument.from_file(ns.file)

    def func(name):
        return f"{ns.prefix}{name}{ns.suffix}"

    method = getattr(doc, RENAME_METHODS[ns.kind])
    if ns.kind == "bone":
        method(func, ignore_root=not ns.include_root)
    else:
        method(func)
    doc.save(ns.output)


def _extend(ns) -> None:
    doc = SpineDocument.from_file(ns.file)
    doc.extend_animation(ns.animation, ns.count)
    doc.save(ns.output)


def _durations(ns) -> None:
    doc = SpineDocument.from_file(ns.file)
    for name, duration in doc.animation_durations().items():
        print(f"{name}\t{duration:g}")


def _unpremultiply(ns) -> None:
    from .image_utils import unpremultiply_alpha

    unpremultiply_alpha(ns.input, ns.output)


COMMANDS = {
    "merge": _merge,
    "rename": _rename,
    "extend": _extend,
    "durations": _durations,
    "unpremultiply": _unpremultiply,
}


def main(argv: Optional[List[str]] = None) -> int:
    ns = build_parser().parse_args(argv)
    setup_logging(ns.log_level, ns.log_file)
    try:
        COMMANDS[ns.command](ns)
    except (SpineDataError, OSError) as e:
        logger.error(f"[{ns.command}] {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
