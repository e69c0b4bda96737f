# document.py
"""
This module is the in-memory model of one Spine2D JSON document.
Its primary purpose is to make the document safe to edit: bone indices are replaced by bone names on load, so bones can be renamed, added, removed or merged without invalidating any reference, and the indices are rebuilt on save.

The key functionalities are:
1.  Loading: `SpineDocument(raw)` moves the `bones` array into a `BoneGraph`, requires a "root" bone and converts the `vertices` of every skin attachment to name addressed `VertexData`. Every other field is kept as is.
2.  Editing: skins, attachments, slots and bones can be looked up, added or removed. Slot list position is draw order, index 0 is drawn first.
3.  Identifier Renaming: `rename_bones`, `rename_slots`, `rename_attachments`, `rename_animations`, `rename_transform_constraints`, `rename_ik_constraints` and `rename_path_constraints` rewrite one identifier class everywhere it is referenced, using a plain `old -> new` function.
4.  Animations: duration queries and loop extension, delegated to `animation.py`.
5.  Merging: `merge()` combines another document into this one through `json_merger.merge_documents`.
6.  Saving: `to_wire_format()` writes the bones in traversal order and converts the vertices back to bone indices against that order.

ATTENTION: - Renames other than `rename_bones` never check the result for uniqueness. Two identifiers renamed to the same value collapse into one map entry, the later one wins. `rename_bones` rebuilds the bone graph and raises `DuplicateError` on a collision, leaving the document unchanged. Bones with an inheritance `transform` mode are renamed, but a warning is logged. Documents are not thread safe; one caller owns an instance for the duration of its edits.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, List, Optional

from . import animation as anim_utils
from .bone_graph import Bone, BoneGraph
from .config import DEFAULT_SKIN_NAME, ROOT_BONE_NAME
from .errors import NotFoundError
from .json_merger import max_constraint_order, merge_documents, read_json, write_json
from .vertex_codec import TO_INDEX, TO_NAME, VertexData, convert_skins

logger = logging.getLogger(__name__)

RenameFunc = Callable[[str], str]

# Key order of a document written by the Spine editor
WIRE_KEY_ORDER = (
    "skeleton",
    "bones",
    "slots",
    "ik",
    "transform",
    "path",
    "skins",
    "events",
    "animations",
)
CONSTRAINT_KINDS = ("transform", "ik", "path")
DEFAULT_INHERIT = "normal"


def _rename_keys(mapping: Optional[Dict[str, Any]], fix: RenameFunc) -> Optional[Dict[str, Any]]:
    if mapping is None:
        return None
    return {fix(key): value for key, value in mapping.items()}


class SpineDocument:
    """A Spine2D JSON document with bones addressed by name."""

    def __init__(self, raw: Dict[str, Any], root_name: str = ROOT_BONE_NAME):
        table = copy.deepcopy(raw)
        self._key_order = list(table.keys())
        bones = table.pop("bones", None) or []
        skins = table.pop("skins", None) or []

        self.bones = BoneGraph()
        self.bones.insert(*bones)
        if root_name not in self.bones:
            raise NotFoundError(root_name, f"Document has no '{root_name}' bone")
        self.root_bone = root_name

        self.skins: List[Dict[str, Any]] = convert_skins(skins, bones, TO_NAME)
        self.table: Dict[str, Any] = table
        logger.debug(
            f"[SpineDocument] loaded {len(self.bones)} bones, {len(self.slots)} slots, "
            f"{len(self.skins)} skins, {len(self.animations)} animations."
        )

    @classmethod
    def from_file(cls, path: str) -> "SpineDocument":
        data = read_json(path)
        if not data:
            raise NotFoundError(path, f"Could not read Spine JSON from {path}")
        return cls(data)

    def save(self, path: str) -> None:
        write_json(self.to_wire_format(), path)

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------
    @property
    def skeleton(self) -> Dict[str, Any]:
        return self.table.setdefault("skeleton", {})

    @property
    def slots(self) -> List[Dict[str, Any]]:
        return self.table.get("slots") or []

    @property
    def animations(self) -> Dict[str, Any]:
        return self.table.get("animations") or {}

    def constraints(self, kind: str) -> List[Dict[str, Any]]:
        """Returns the `transform`, `ik` or `path` constraint list (empty if absent)."""
        if kind not in CONSTRAINT_KINDS:
            raise ValueError(f"Unknown constraint kind: {kind}")
        return self.table.get(kind) or []

    def max_constraint_order(self) -> int:
        """Largest `order` over all constraints, -1 when there are none."""
        return max_constraint_order(self.table)

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------
    def get_skin(self, name: str = DEFAULT_SKIN_NAME) -> Optional[Dict[str, Any]]:
        for skin in self.skins:
            if skin.get("name") == name:
                return skin
        return None

    def add_attachment(
        self, skin_name: str, slot_name: str, attachment_name: str, attachment: Dict[str, Any]
    ) -> Dict[str, Any]:
        skin = self.get_skin(skin_name)
        if skin is None:
            raise NotFoundError(skin_name, f"Skin '{skin_name}' not found")
        slot_atts = skin.setdefault("attachments", {}).setdefault(slot_name, {})
        slot_atts[attachment_name] = attachment
        return attachment

    def add_slot(self, slot: Dict[str, Any], order: int = 0) -> Dict[str, Any]:
        """Inserts a slot at draw order position `order` (0 draws first)."""
        if self.table.get("slots") is None:
            self.table["slots"] = []
        slots = self.table["slots"]
        slots.insert(min(order, len(slots)), slot)
        return slot

    def add_bone(self, bone: Bone) -> Bone:
        self.bones.insert(bone)
        return bone

    def remove_bone(self, name: str) -> None:
        self.bones.remove(name)

    def traverse_bones(self, root: str, depth: Optional[int] = None) -> List[Bone]:
        return self.bones.traverse(root, depth)

    def slots_for_bones(self, *bone_names: str) -> List[Dict[str, Any]]:
        """Returns the slots attached to the given bones, grouped by bone in argument order."""
        by_bone: Dict[str, List[Dict[str, Any]]] = {}
        for slot in self.slots:
            by_bone.setdefault(slot.get("bone"), []).append(slot)
        result: List[Dict[str, Any]] = []
        for name in bone_names:
            result.extend(by_bone.get(name, []))
        return result

    def iter_attachments(self):
        """Yields (skin, slot_name, attachment_name, attachment) for every skin attachment."""
        for skin in self.skins:
            for slot_name, slot_atts in (skin.get("attachments") or {}).items():
                for att_name, att in slot_atts.items():
                    yield skin, slot_name, att_name, att

    # -------------------------------------------------------------------------
    # Identifier renaming
    # -------------------------------------------------------------------------
    def rename_bones(self, func: RenameFunc, ignore_root: bool = True) -> None:
        """
        Renames bones everywhere: bone names and parents, slot bones, constraint bones
        and targets, animation bone timelines, skin bone lists, vertex bone names and
        linked mesh parents. The root bone keeps its name unless ignore_root is False.
        """
        root = self.root_bone

        def fix(name):
            if name is None:
                return name
            if name == root and ignore_root:
                return name
            return func(name)

        # The graph is rebuilt from copies; a duplicate or cycle leaves the document untouched.
        graph = BoneGraph()
        for bone in self.bones:
            renamed = dict(bone)
            renamed["name"] = fix(bone["name"])
            if bone.get("parent") is not None:
                renamed["parent"] = fix(bone["parent"])
            inherit = bone.get("transform") or bone.get("inherit")
            if inherit and inherit != DEFAULT_INHERIT:
                logger.warning(
                    f"[rename_bones] Bone '{renamed['name']}' has inheritance mode '{inherit}', "
                    "renaming may affect inheritance."
                )
            graph.insert(renamed)
        self.bones = graph
        self.root_bone = fix(root)

        for slot in self.slots:
            if "bone" in slot:
                slot["bone"] = fix(slot["bone"])
        for kind in CONSTRAINT_KINDS:
            for constraint in self.constraints(kind):
                if "bones" in constraint:
                    constraint["bones"] = [fix(b) for b in constraint["bones"]]
                # path constraints target a slot
                if kind != "path" and "target" in constraint:
                    constraint["target"] = fix(constraint["target"])

        for animation in self.animations.values():
            if animation.get("bones"):
                animation["bones"] = _rename_keys(animation["bones"], fix)

        for skin in self.skins:
            if skin.get("bones"):
                skin["bones"] = [fix(b) for b in skin["bones"]]
        for _, _, _, att in self.iter_attachments():
            vertices = att.get("vertices")
            if isinstance(vertices, VertexData):
                vertices.values = [fix(v) if isinstance(v, str) else v for v in vertices.values]
            elif isinstance(vertices, list):
                att["vertices"] = [fix(v) if isinstance(v, str) else v for v in vertices]
            if att.get("type") == "linkedmesh" and "parent" in att:
                att["parent"] = fix(att["parent"])

    def rename_slots(self, func: RenameFunc) -> None:
        """Renames slots in slots, path targets, clipping ends, skins and animations."""

        def fix(name):
            return name if name is None else func(name)

        for constraint in self.constraints("path"):
            if "target" in constraint:
                constraint["target"] = fix(constraint["target"])
        for slot in self.slots:
            slot["name"] = fix(slot["name"])

        for skin in self.skins:
            if skin.get("attachments") is not None:
                skin["attachments"] = _rename_keys(skin["attachments"], fix)
        for _, _, _, att in self.iter_attachments():
            if att.get("type") == "clipping" and "end" in att:
                att["end"] = fix(att["end"])

        for animation in self.animations.values():
            if animation.get("slots"):
                animation["slots"] = _rename_keys(animation["slots"], fix)
            for skin_name, deform in (animation.get("deform") or {}).items():
                animation["deform"][skin_name] = _rename_keys(deform, fix)
            for keyframe in animation.get("drawOrder") or []:
                if keyframe.get("offsets"):
                    for offset in keyframe["offsets"]:
                        if "slot" in offset:
                            offset["slot"] = fix(offset["slot"])

    def rename_attachments(self, func: RenameFunc) -> None:
        """Renames attachments in slots, skins, attachment paths and animations."""

        def fix(name):
            return name if name is None else func(name)

        for slot in self.slots:
            if slot.get("attachment"):
                slot["attachment"] = fix(slot["attachment"])

        for skin in self.skins:
            attachments = skin.get("attachments") or {}
            for slot_name, slot_atts in attachments.items():
                renamed = {}
                for att_name, att in slot_atts.items():
                    if isinstance(att.get("path"), str):
                        att["path"] = fix(att["path"])
                    renamed[fix(att_name)] = att
                attachments[slot_name] = renamed

        for animation in self.animations.values():
            for slot in (animation.get("slots") or {}).values():
                for keyframe in slot.get("attachment") or []:
                    if "name" in keyframe:
                        keyframe["name"] = fix(keyframe["name"])
            for deform in (animation.get("deform") or {}).values():
                for slot_name, atts in deform.items():
                    deform[slot_name] = _rename_keys(atts, fix)

    def rename_animations(self, func: RenameFunc) -> None:
        if self.table.get("animations") is None:
            return
        self.table["animations"] = _rename_keys(self.table["animations"], func)

    def _rename_constraints(self, kind: str, func: RenameFunc) -> None:
        for constraint in self.constraints(kind):
            constraint["name"] = func(constraint["name"])
        for skin in self.skins:
            if skin.get(kind):
                skin[kind] = [func(name) for name in skin[kind]]
        for animation in self.animations.values():
            if animation.get(kind):
                animation[kind] = _rename_keys(animation[kind], func)

    def rename_transform_constraints(self, func: RenameFunc) -> None:
        self._rename_constraints("transform", func)

    def rename_ik_constraints(self, func: RenameFunc) -> None:
        self._rename_constraints("ik", func)

    def rename_path_constraints(self, func: RenameFunc) -> None:
        self._rename_constraints("path", func)

    # -------------------------------------------------------------------------
    # Animations
    # -------------------------------------------------------------------------
    def animation_duration(self, name: str) -> Optional[float]:
        """Length of an animation in seconds, None (with a warning) when it does not exist."""
        animation = self.animations.get(name)
        if animation is None:
            logger.warning(f"[animation_duration] Animation '{name}' not found.")
            return None
        return anim_utils.animation_duration(animation)

    def animation_durations(self) -> Dict[str, Optional[float]]:
        return {name: self.animation_duration(name) for name in self.animations}

    def extend_animation(self, name: str, repeat_count: int) -> None:
        animation = self.animations.get(name)
        if animation is None:
            raise NotFoundError(name, f"Animation '{name}' not found")
        anim_utils.extend_animation(animation, repeat_count)
        logger.info(f"[extend_animation] '{name}' repeated {repeat_count} times.")

    # -------------------------------------------------------------------------
    # Merge / save
    # -------------------------------------------------------------------------
    def merge(self, other: "SpineDocument") -> "SpineDocument":
        """Merges other into this document. Rename colliding identifiers first."""
        merge_documents(self, other)
        return self

    def to_wire_format(self) -> Dict[str, Any]:
        bones = copy.deepcopy(self.bones.traverse(self.root_bone))
        if len(bones) != len(self.bones):
            logger.warning(
                f"[to_wire_format] {len(self.bones) - len(bones)} bones are not reachable "
                f"from '{self.root_bone}' and are dropped."
            )
        sections = copy.deepcopy(self.table)
        sections["bones"] = bones
        if self.skins or "skins" in self._key_order:
            sections["skins"] = convert_skins(self.skins, bones, TO_INDEX)

        order = [k for k in self._key_order if k in sections]
        order += [k for k in WIRE_KEY_ORDER if k in sections and k not in order]
        order += [k for k in sections if k not in order]
        return {key: sections[key] for key in order}
