"""
Balanced key tree for the static map.

A sorted run of slots is split at its midpoint into (left half, middle,
right half); the middle becomes a node and the halves become its subtrees.
Balance comes from the split itself, not from rotations, so a tree of n
slots has depth ceil(log2(n + 1)).

Once the tree is built, ``plan_paths`` runs the binary search for every
name a single time and records the turns it took. Lookups replay those
turns without comparing names again.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import logging as _logging
import typing as _typing

_logger = _logging.getLogger(__name__)


class Turn(_enum.Enum):
    """One step of a planned descent."""

    LEFT = "L"
    RIGHT = "R"


Path: _typing.TypeAlias = tuple[Turn, ...]


@_dataclasses.dataclass(slots=True)
class Slot:
    """The mutable cell a node stores its value in."""

    name: str
    value_type: _typing.Any
    value: _typing.Any


@_dataclasses.dataclass(frozen=True, slots=True)
class Node:
    """An immutable tree node; only its slot's value may change."""

    slot: Slot
    left: Node | None = None
    right: Node | None = None

    @property
    def name(self) -> str:
        return self.slot.name


def build_tree(sorted_slots: _typing.Sequence[Slot]) -> Node | None:
    """
    Build a balanced tree from slots sorted by name.

    The left half of each split holds ``(n - 1) // 2`` slots, so when n is
    even the extra slot goes right.

    Args:
        sorted_slots: Slots in ascending name order.

    Returns:
        The root node, or None for an empty sequence.
    """
    if not sorted_slots:
        return None
    middle = (len(sorted_slots) - 1) // 2
    return Node(
        slot=sorted_slots[middle],
        left=build_tree(sorted_slots[:middle]),
        right=build_tree(sorted_slots[middle + 1:]),
    )


def tree_depth(node: Node | None) -> int:
    """Number of levels in the tree (0 for an empty tree)."""
    if node is None:
        return 0
    return 1 + max(tree_depth(node.left), tree_depth(node.right))


def iter_inorder(node: Node | None) -> _typing.Iterator[Node]:
    """Yield nodes in ascending name order."""
    if node is None:
        return
    yield from iter_inorder(node.left)
    yield node
    yield from iter_inorder(node.right)


def search_path(root: Node | None, name: str) -> Path | None:
    """
    Run a binary search for name and record the turns taken.

    Args:
        root: Tree root.
        name: Name to look for.

    Returns:
        The turns leading from the root to the node, or None if absent.
    """
    turns: list[Turn] = []
    node = root
    while node is not None:
        if name < node.name:
            turns.append(Turn.LEFT)
            node = node.left
        elif node.name < name:
            turns.append(Turn.RIGHT)
            node = node.right
        else:
            return tuple(turns)
    return None


def plan_paths(root: Node | None) -> dict[str, Path]:
    """
    Plan the descent for every name in the tree.

    Args:
        root: Tree root.

    Returns:
        Mapping of name to its path, in ascending name order.
    """
    paths: dict[str, Path] = {}
    for node in iter_inorder(root):
        path = search_path(root, node.name)
        # Every in-order node is reachable by search in a well-formed tree
        assert path is not None, f"unreachable node {node.name!r}"
        paths[node.name] = path
    _logger.debug("Planned %d paths, longest %d turns", len(paths),
                  max((len(p) for p in paths.values()), default=0))
    return paths


def follow(root: Node | None, path: Path) -> Slot:
    """
    Replay a planned path from the root and return the slot it reaches.

    Args:
        root: Tree root the path was planned against.
        path: Turns to replay.

    Returns:
        The slot at the end of the path.
    """
    node = root
    for turn in path:
        assert node is not None
        node = node.left if turn is Turn.LEFT else node.right
    assert node is not None
    return node.slot
