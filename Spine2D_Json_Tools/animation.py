# animation.py
"""
Helpers operating on a single animation entry of the Spine2D `animations` section.

An animation is a mapping of timeline groups (`bones`, `slots`, `deform`, `drawOrder`, `path`, ...),
each ending in lists of keyframes. A keyframe may omit `time`, which then means 0. Curve data
and every other keyframe field is copied as is.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Iterator, List, Mapping

logger = logging.getLogger(__name__)

# Spine 4 adds the single axis variants
BONE_TIMELINES = (
    "rotate",
    "translate",
    "translatex",
    "translatey",
    "scale",
    "scalex",
    "scaley",
    "shear",
    "shearx",
    "sheary",
)
SLOT_TIMELINES = ("attachment", "color", "twoColor", "rgba", "rgb", "rgba2", "rgb2", "alpha")
PATH_TIMELINES = ("position", "spacing", "mix")


def _keyframe_time(keyframe: Mapping[str, Any]) -> float:
    return keyframe.get("time") or 0


def duration_channels(animation: Mapping[str, Any]) -> Iterator[List[Dict[str, Any]]]:
    """Yields the keyframe lists that define the length of an animation."""
    for bone in (animation.get("bones") or {}).values():
        for timeline in BONE_TIMELINES:
            if bone.get(timeline):
                yield bone[timeline]
    for slot in (animation.get("slots") or {}).values():
        for timeline in SLOT_TIMELINES:
            if slot.get(timeline):
                yield slot[timeline]
    for skin in (animation.get("deform") or {}).values():
        for slot in skin.values():
            for keyframes in slot.values():
                yield keyframes
    if animation.get("drawOrder"):
        yield animation["drawOrder"]


def keyframe_channels(animation: Mapping[str, Any]) -> Iterator[List[Dict[str, Any]]]:
    """Yields every keyframe list that is looped by `extend_animation`."""
    yield from duration_channels(animation)
    for constraint in (animation.get("path") or {}).values():
        for timeline in PATH_TIMELINES:
            if constraint.get(timeline):
                yield constraint[timeline]


def animation_duration(animation: Mapping[str, Any]) -> float:
    """Returns the largest keyframe time over bone, slot, deform and draw order timelines."""
    longest = 0
    for keyframes in duration_channels(animation):
        for keyframe in keyframes:
            longest = max(longest, _keyframe_time(keyframe))
    return longest


def extend_animation(animation: Dict[str, Any], repeat_count: int) -> float:
    """
    Loops an animation in place: every timeline gets `repeat_count - 1` copies of its
    keyframes appended, copy `i` shifted by `i * duration`. Returns the original duration.
    """
    duration = animation_duration(animation)
    if repeat_count <= 1:
        return duration

    channels = 0
    for keyframes in keyframe_channels(animation):
        original = copy.deepcopy(keyframes)
        for index in range(1, repeat_count):
            for keyframe in original:
                shifted = copy.deepcopy(keyframe)
                shifted["time"] = _keyframe_time(keyframe) + index * duration
                keyframes.append(shifted)
        channels += 1

    logger.debug(
        f"[extend_animation] {channels} timelines repeated x{repeat_count} (duration {duration})"
    )
    return duration
