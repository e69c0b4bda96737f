# vertex_codec.py
"""
This module converts attachment vertex arrays between the bone-index addressing used by the exported Spine2D JSON and bone-name addressing used in memory.

Weighted vertices are stored by Spine as a packed array of repeating groups:
    [pointCount, boneIndex, x, y, weight, boneIndex, x, y, weight, ..., pointCount, ...]
Every `boneIndex` is a position in the skeleton's `bones` array. Renaming, adding or merging bones renumbers that array, so in memory the index is replaced by the bone name and restored when the document is saved.

The key functionalities are:
1.  `to_name_addressed()` / `to_index_addressed()`: the two raw array transforms.
2.  `VertexData`: the in-memory form of an attachment's `vertices`. It records once, at load time, whether the array is weighted, so the decision is never re-guessed on later conversions.
3.  `convert_skins()`: applies either direction to every attachment of every skin, on a deep copy.

ATTENTION: - `to_index_addressed()` is a flat substitution of every string element. It is only correct because bone names sit exactly where `to_name_addressed()` put them. Unweighted arrays (plain x/y pairs) are never converted.
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Union

from .config import SHORTHAND_VERTICES_LENGTH
from .errors import NotFoundError

logger = logging.getLogger(__name__)

TO_NAME = "to_name"
TO_INDEX = "to_index"

Number = Union[int, float]
VertexValue = Union[int, float, str]


def _is_integral(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def looks_weighted(vertices: Sequence[Any]) -> bool:
    """
    Guesses the packed weighted format from the array alone: the first two values are
    integral and the array is not the 8 value unweighted quad shorthand.
    """
    if len(vertices) < 2:
        return False
    if len(vertices) == SHORTHAND_VERTICES_LENGTH:
        return False
    return _is_integral(vertices[0]) and _is_integral(vertices[1])


def to_name_addressed(
    vertices: List[Number], bones: Sequence[Mapping[str, Any]]
) -> List[VertexValue]:
    """
    Replaces every bone index of a packed weighted array with the bone name.
    Arrays that do not look packed are returned unchanged.
    """
    if not looks_weighted(vertices):
        return vertices
    return _walk_groups(vertices, bones)


def _walk_groups(
    vertices: Sequence[Number], bones: Sequence[Mapping[str, Any]]
) -> List[VertexValue]:
    converted: List[VertexValue] = []
    i = 0
    while i < len(vertices):
        point_count = int(vertices[i])
        converted.append(vertices[i])
        for j in range(point_count):
            offset = i + j * 4
            if offset + 4 >= len(vertices):
                raise NotFoundError(
                    offset + 1,
                    f"Vertex group at {i} is truncated ({point_count} points, {len(vertices)} values)",
                )
            bone_index = vertices[offset + 1]
            if not _is_integral(bone_index) or not 0 <= int(bone_index) < len(bones):
                raise NotFoundError(
                    bone_index,
                    f"Bone index {bone_index} not found (group at {i}, {len(bones)} bones)",
                )
            converted.append(bones[int(bone_index)]["name"])
            converted.extend(vertices[offset + 2 : offset + 5])
        i = len(converted)
    return converted


def to_index_addressed(
    vertices: Sequence[VertexValue], bones: Sequence[Mapping[str, Any]]
) -> List[Number]:
    """
    Replaces every string element with the position of the first bone of that name.
    Numbers pass through unchanged.
    """
    index_by_name: Dict[str, int] = {}
    for i, bone in enumerate(bones):
        index_by_name.setdefault(bone["name"], i)

    out: List[Number] = []
    for value in vertices:
        if isinstance(value, str):
            if value not in index_by_name:
                raise NotFoundError(value, f"Bone '{value}' not found in bones list")
            out.append(index_by_name[value])
        else:
            out.append(value)
    return out


@dataclass
class VertexData:
    """Vertex array of a mesh/path/clipping attachment plus its weighted flag."""

    values: List[VertexValue] = field(default_factory=list)
    weighted: bool = False

    def bone_names(self) -> List[str]:
        return [v for v in self.values if isinstance(v, str)]


def is_weighted_attachment(attachment: Mapping[str, Any]) -> bool:
    """
    Decides whether an attachment's vertices are weighted.

    Meshes carry one uv pair per vertex and paths/clippings carry `vertexCount`;
    an unweighted array then has exactly two values per vertex. Without that
    information the array shape is sniffed.
    """
    vertices = attachment.get("vertices") or []
    uvs = attachment.get("uvs")
    if isinstance(uvs, list) and uvs:
        return len(vertices) != len(uvs)
    vertex_count = attachment.get("vertexCount")
    if _is_integral(vertex_count) and vertex_count > 0:
        return len(vertices) != int(vertex_count) * 2
    return looks_weighted(vertices)


def decode_vertices(
    attachment: Mapping[str, Any], bones: Sequence[Mapping[str, Any]]
) -> VertexData:
    vertices = list(attachment.get("vertices") or [])
    if is_weighted_attachment(attachment):
        return VertexData(_walk_groups(vertices, bones), True)
    return VertexData(vertices, False)


def encode_vertices(
    data: VertexData, bones: Sequence[Mapping[str, Any]]
) -> List[Number]:
    if data.weighted:
        return to_index_addressed(data.values, bones)
    return list(data.values)


def convert_skins(
    skins: Sequence[Dict[str, Any]],
    bones: Sequence[Mapping[str, Any]],
    direction: str,
) -> List[Dict[str, Any]]:
    """
    Deep-copies skins and converts the `vertices` of every attachment.

    TO_NAME turns wire lists into `VertexData`, TO_INDEX turns `VertexData`
    (or name-addressed lists) back into wire lists. Other fields are untouched.
    """
    if direction not in (TO_NAME, TO_INDEX):
        raise ValueError(f"Unknown conversion direction: {direction}")

    out = copy.deepcopy(list(skins))
    converted = 0
    for skin in out:
        for slot_name, slot_atts in skin.get("attachments", {}).items():
            for att_name, att in slot_atts.items():
                if "vertices" not in att:
                    continue
                try:
                    if direction == TO_NAME:
                        att["vertices"] = decode_vertices(att, bones)
                    elif isinstance(att["vertices"], VertexData):
                        att["vertices"] = encode_vertices(att["vertices"], bones)
                    else:
                        att["vertices"] = to_index_addressed(att["vertices"], bones)
                except NotFoundError as e:
                    logger.error(
                        f"[convert_skins] skin '{skin.get('name')}', slot '{slot_name}', "
                        f"attachment '{att_name}': {e}"
                    )
                    raise
                converted += 1
    logger.debug(f"[convert_skins] {converted} vertex arrays converted ({direction}).")
    return out
