# json_merger.py
"""
This module is responsible for merging two Spine2D JSON documents into a single, coherent one.
Its primary purpose is to combine a "primary" document, which keeps its skeleton metadata, with a "secondary" document whose bones, slots, skins, constraints and animations are added to it.

The key functionalities are:
1.  JSON Helpers: `read_json()` and `write_json()` load and save UTF-8 JSON files; `ensure_key()` and `deep_merge()` are the small dict helpers the merge is built on.
2.  Bone Merging: The secondary bone graph is walked from its root and every non-root bone is inserted into the primary graph. Both documents address vertices by bone name, so no index has to be recalculated here; the indices are rebuilt when the merged document is saved.
3.  Slot Merging: Secondary slots are placed in front of the primary slots, so the added content is drawn behind the primary content.
4.  Skin Merging: Skins are matched by name. Unknown skins are appended, shared skins are merged slot by slot.
5.  Constraint Order: Secondary transform, IK and path constraints are appended with their `order` shifted past the largest primary order, so they always run after the primary constraints.

ATTENTION: - The merge never overwrites. A secondary bone whose name already exists in the primary, or a (slot, attachment) pair already present in the same primary skin, raises `DuplicateError`. Rename the secondary identifiers first (see `SpineDocument.rename_*`). The collision check runs before anything is modified. Every other top-level field (animations, events, ...) is deep merged: dicts recursively, lists concatenated, scalars overwritten by the secondary value.
"""
import os
import copy
import json
import logging

logger = logging.getLogger(__name__)
from typing import Dict, List, Any

from .errors import DuplicateError

# Fields handled explicitly by merge_documents instead of deep_merge
MERGE_EXCLUDED_KEYS = ("bones", "skeleton", "skins", "slots", "transform", "ik", "path")
CONSTRAINT_KINDS = ("transform", "ik", "path")
SKIN_NAME_LISTS = ("bones", "ik", "transform", "path")


# =============================================================================
# Helper functions for reading/writing JSON
# =============================================================================
def read_json(file_path: str) -> Dict[str, Any]:
    """
    Reads JSON data from the file_path and returns it as a dict.
    If the file is not found or a reading error occurs, returns an empty dict.
    """
    if not os.path.isfile(file_path):
        logger.error(f"File {file_path} not found.")
        return {}
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
            return data
    except (json.JSONDecodeError, OSError) as e:
        logger.error(f"Error reading JSON {file_path}: {e}")
        return {}


def write_json(data: Dict[str, Any], out_path: str) -> None:
    """
    Writes the dict data to the out_path file in JSON format (indent=4).
    """
    try:
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=4)
        logger.info(f"File saved successfully: {out_path}")
    except OSError as e:
        logger.error(f"Failed to save file {out_path}: {e}")
        raise


# =============================================================================
# Dict helpers
# =============================================================================
def ensure_key(data_dict: Dict[str, Any], key: str, default_value: Any) -> Any:
    """
    Ensures the presence of the key in data_dict. If the key is not present, sets the default_value.
    Returns data_dict[key].
    """
    if key not in data_dict:
        data_dict[key] = default_value
    return data_dict[key]


def deep_merge(target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merges source into target:
     - lists are concatenated (target first),
     - dicts are merged key by key,
     - None never replaces an existing value,
     - any other value overwrites the target value.
    Returns target.
    """
    for key, value in source.items():
        if value is None and key in target:
            continue
        if isinstance(value, list):
            if not isinstance(target.get(key), list):
                target[key] = []
            target[key].extend(value)
        elif isinstance(value, dict):
            if not isinstance(target.get(key), dict):
                target[key] = {}
            deep_merge(target[key], value)
        else:
            target[key] = value
    return target


def max_constraint_order(table: Dict[str, Any]) -> int:
    """
    Largest `order` over the transform, IK and path constraints of table.
    Constraints without order count as 0, no constraints at all gives -1.
    """
    max_order = -1
    for kind in CONSTRAINT_KINDS:
        for constraint in table.get(kind) or []:
            max_order = max(max_order, constraint.get("order") or 0)
    return max_order


# =============================================================================
# Main merge functions
# =============================================================================
def check_merge_collisions(primary, secondary) -> None:
    """
    Raises DuplicateError if a secondary bone or skin attachment already exists in primary.
    """
    for bone in secondary.bones.traverse(secondary.root_bone):
        name = bone["name"]
        if name == secondary.root_bone:
            continue
        if name in primary.bones:
            raise DuplicateError(
                name, f"Bone '{name}' exists in both documents, rename it before merging"
            )

    for seg_skin in secondary.skins:
        main_skin = primary.get_skin(seg_skin.get("name"))
        if main_skin is None:
            continue
        main_atts = main_skin.get("attachments") or {}
        for slot_name, attach_dict in (seg_skin.get("attachments") or {}).items():
            for att_name in attach_dict:
                if att_name in main_atts.get(slot_name, {}):
                    raise DuplicateError(
                        att_name,
                        f"Skin '{seg_skin.get('name')}' has attachment '{att_name}' in slot "
                        f"'{slot_name}' in both documents (key: {att_name})",
                    )


def merge_bones(primary, secondary) -> int:
    """
    Inserts every non-root bone of secondary into the primary bone graph,
    in traversal order so parents are inserted before their children.
    """
    added = 0
    for bone in secondary.bones.traverse(secondary.root_bone):
        if bone["name"] == secondary.root_bone:
            continue
        primary.bones.insert(copy.deepcopy(bone))
        added += 1
    logger.debug(f"[merge_bones] {added} bones added, now {len(primary.bones)} bones.")
    return added


def merge_slots(
    global_slots: List[Dict[str, Any]], seg_slots: List[Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """
    Returns the slot list with the segment slots placed first (drawn behind the global slots).
    """
    merged = copy.deepcopy(seg_slots) + global_slots
    logger.debug(f"[merge_slots] {len(seg_slots)} slots prepended.")
    return merged


def merge_skins(
    main_skins: List[Dict[str, Any]], seg_skins: List[Dict[str, Any]]
) -> None:
    """
    Merges the list of skins seg_skins into main_skins.
    If a skin already exists (by name), its attachments are merged slot by slot;
    an attachment present in both raises DuplicateError.
    """
    for seg_skin in seg_skins:
        seg_skin_name = seg_skin.get("name")
        # Search in main_skins for a skin with the same name
        main_skin = None
        for ms in main_skins:
            if ms.get("name") == seg_skin_name:
                main_skin = ms
                break

        if main_skin is None:
            # There is no such skin, add it completely
            main_skins.append(copy.deepcopy(seg_skin))
            logger.debug(f"[merge_skins] Skin «{seg_skin_name}» added.")
            continue

        main_atts = ensure_key(main_skin, "attachments", {})
        for slot_name, attach_dict in (seg_skin.get("attachments") or {}).items():
            slot_main_atts = ensure_key(main_atts, slot_name, {})
            for att_name, att_data in attach_dict.items():
                if att_name in slot_main_atts:
                    raise DuplicateError(
                        att_name,
                        f"Skin '{seg_skin_name}' has attachment '{att_name}' in slot "
                        f"'{slot_name}' in both documents (key: {att_name})",
                    )
                slot_main_atts[att_name] = copy.deepcopy(att_data)

        # Skin level bone/constraint lists (Spine 4 skins)
        for key in SKIN_NAME_LISTS:
            names = seg_skin.get(key)
            if not names:
                continue
            main_names = ensure_key(main_skin, key, [])
            main_names.extend(n for n in names if n not in main_names)
        logger.debug(f"[merge_skins] Skin «{seg_skin_name}» merged.")


def merge_constraints(
    main_table: Dict[str, Any], seg_table: Dict[str, Any], order_base: int
) -> None:
    """
    Appends the segment constraints with their order shifted by order_base.
    """
    for kind in CONSTRAINT_KINDS:
        seg_constraints = seg_table.get(kind)
        if not seg_constraints:
            continue
        main_constraints = main_table.get(kind) or []
        for constraint in seg_constraints:
            new_constraint = copy.deepcopy(constraint)
            new_constraint["order"] = (constraint.get("order") or 0) + order_base
            main_constraints.append(new_constraint)
        main_table[kind] = main_constraints


def merge_documents(primary, secondary):
    """
    Merges the SpineDocument secondary into primary (in place) and returns primary.
    At the same time:
     - 'skeleton' is left from primary (the secondary one is discarded).
     - Other top-level fields are deep merged.
     - Secondary slots are drawn first, behind the primary slots.
     - Secondary bones and skins are added; collisions raise DuplicateError.
     - Secondary constraints run after all primary constraints.
    """
    check_merge_collisions(primary, secondary)

    # Computed before any constraint is appended
    order_base = max_constraint_order(primary.table) + 1

    # a) every other top-level field
    rest = {
        key: value
        for key, value in secondary.table.items()
        if key not in MERGE_EXCLUDED_KEYS
    }
    deep_merge(primary.table, copy.deepcopy(rest))

    # b) slots
    seg_slots = secondary.table.get("slots")
    if seg_slots:
        primary.table["slots"] = merge_slots(primary.table.get("slots") or [], seg_slots)

    # c) bones
    merge_bones(primary, secondary)

    # d) skins
    merge_skins(primary.skins, secondary.skins)

    # e) constraints
    merge_constraints(primary.table, secondary.table, order_base)

    logger.info(
        f"[merge_documents] Merged: {len(primary.bones)} bones, {len(primary.slots)} slots, "
        f"{len(primary.skins)} skins (constraint order base {order_base})."
    )
    return primary
