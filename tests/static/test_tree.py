"""Tests for the balanced key tree and path planning."""

import math as _math

import pytest as _pytest

import heteromap.static._tree as _tree


def _slots(count: int) -> list[_tree.Slot]:
    return [_tree.Slot(f"k{i:03d}", int, i) for i in range(count)]


class TestBuildTree:
    """Midpoint construction."""

    def test_empty(self) -> None:
        assert _tree.build_tree([]) is None
        assert _tree.tree_depth(None) == 0

    def test_single(self) -> None:
        root = _tree.build_tree(_slots(1))

        assert root is not None
        assert root.name == "k000"
        assert root.left is None
        assert root.right is None

    def test_even_count_puts_extra_on_right(self) -> None:
        """With 4 slots the root is the second one."""
        root = _tree.build_tree(_slots(4))

        assert root is not None
        assert root.name == "k001"
        assert root.left is not None and root.left.name == "k000"
        assert root.right is not None and root.right.name == "k002"

    @_pytest.mark.parametrize("count", [1, 2, 3, 4, 7, 8, 15, 16, 100])
    def test_depth_is_logarithmic(self, count: int) -> None:
        root = _tree.build_tree(_slots(count))

        assert _tree.tree_depth(root) == _math.ceil(_math.log2(count + 1))

    def test_inorder_is_sorted(self) -> None:
        slots = _slots(20)
        root = _tree.build_tree(slots)

        assert [node.slot for node in _tree.iter_inorder(root)] == slots

    def test_nodes_are_frozen(self) -> None:
        root = _tree.build_tree(_slots(3))

        assert root is not None
        with _pytest.raises(AttributeError):
            root.left = None  # type: ignore[misc]


class TestPaths:
    """Planned descents."""

    def test_root_path_is_empty(self) -> None:
        root = _tree.build_tree(_slots(3))

        assert _tree.search_path(root, "k001") == ()

    def test_missing_name(self) -> None:
        root = _tree.build_tree(_slots(3))

        assert _tree.search_path(root, "nope") is None

    def test_plan_covers_every_name(self) -> None:
        slots = _slots(11)
        root = _tree.build_tree(slots)

        paths = _tree.plan_paths(root)

        assert list(paths) == [slot.name for slot in slots]

    def test_follow_reaches_planned_slot(self) -> None:
        slots = _slots(11)
        root = _tree.build_tree(slots)

        for name, path in _tree.plan_paths(root).items():
            assert _tree.follow(root, path).name == name

    def test_path_turns(self) -> None:
        root = _tree.build_tree(_slots(3))

        paths = _tree.plan_paths(root)

        assert paths["k000"] == (_tree.Turn.LEFT,)
        assert paths["k002"] == (_tree.Turn.RIGHT,)

    def test_plan_of_empty_tree(self) -> None:
        assert _tree.plan_paths(None) == {}
