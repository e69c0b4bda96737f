# bone_graph.py
"""
This module holds the bone hierarchy of a Spine2D document as an acyclic graph of named nodes.
Bones reference their parent by name, so the graph is keyed by bone name instead of the positional index used in the exported JSON.

The key functionalities are:
1.  Cycle-checked Insertion: `insert()` validates every node independently before storing it. A node whose parent chain loops back to itself raises `CycleError`, a name already present raises `DuplicateError`.
2.  Removal and Lookup: `remove()` silently ignores absent names, `require()` raises `NotFoundError` for them.
3.  Traversal: `traverse()` performs a stack based depth-first walk from any root, optionally limited to a maximum depth. The order of the result is the order the Spine JSON `bones` array is written in, so parents always precede their children.

ATTENTION: - A batch passed to `insert()` is not a transaction. When the third node of a batch fails, the first two stay inserted. The parent chain walk is bounded by the number of stored nodes; corrupted data raises `GraphCorruptionError` instead of looping forever.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from .errors import CycleError, DuplicateError, GraphCorruptionError, NotFoundError

logger = logging.getLogger(__name__)

Bone = Dict[str, Any]


class BoneGraph:
    """Name -> bone mapping where every bone has at most one parent."""

    def __init__(self, nodes: Optional[Iterable[Bone]] = None):
        self._nodes: Dict[str, Bone] = {}
        if nodes:
            self.insert(*nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Bone]:
        return iter(list(self._nodes.values()))

    @property
    def nodes(self) -> Mapping[str, Bone]:
        return MappingProxyType(self._nodes)

    def get(self, name: str) -> Optional[Bone]:
        return self._nodes.get(name)

    def children(self, name: str) -> List[Bone]:
        return [node for node in self._nodes.values() if node.get("parent") == name]

    def insert(self, *nodes: Bone) -> None:
        for node in nodes:
            name = node["name"]
            chain = self.would_form_cycle(name, node)
            if chain:
                raise CycleError(name, chain)
            if name in self._nodes:
                raise DuplicateError(name, f"Bone '{name}' already exists")
            self._nodes[name] = node
            logger.debug(f"[insert] bone '{name}' (parent: {node.get('parent')})")

    def remove(self, *names: str) -> None:
        for name in names:
            self._nodes.pop(name, None)

    def require(self, name: str) -> Bone:
        node = self._nodes.get(name)
        if node is None:
            raise NotFoundError(name, f"Bone graph has no node '{name}'")
        return node

    def would_form_cycle(
        self, name: str, node: Optional[Bone] = None
    ) -> Union[List[Bone], bool]:
        """
        Walks the parent chain starting at ``node`` (or at the stored node called ``name``)
        and returns the visited chain if it leads back to ``name``, otherwise False.

        Without ``node`` an absent name never forms a cycle. The stored node is used
        when present, which also reports loops already present in the graph.
        """
        current = self._nodes.get(name, node)
        if current is None:
            return False

        chain: List[Bone] = []
        limit = len(self._nodes) + 1
        while current is not None:
            chain.append(current)
            if len(chain) > limit:
                raise GraphCorruptionError(
                    f"Parent chain of '{name}' is longer than the graph ({limit - 1} nodes)"
                )
            parent = current.get("parent")
            if parent is None:
                return False
            if parent == name:
                return chain
            current = self._nodes.get(parent)
        return False

    def traverse(self, root: str, max_depth: Optional[int] = None) -> List[Bone]:
        """
        Depth-first walk from ``root``: a node is appended when popped from the stack and
        its children are pushed while ``depth < max_depth``. ``None`` means unbounded.
        """
        start = self.require(root)
        result: List[Bone] = []
        visited = set()
        stack = [(start, 0)]
        while stack:
            node, depth = stack.pop()
            if node["name"] in visited:
                raise GraphCorruptionError(f"Bone '{node['name']}' reached twice")
            visited.add(node["name"])
            result.append(node)
            if max_depth is None or depth < max_depth:
                for child in self.children(node["name"]):
                    stack.append((child, depth + 1))
        return result
