"""
Merge sort and duplicate detection for static key sets.

The sort is a bottom-up N-way merge: every item starts as its own run and
neighbouring runs are merged pairwise until one run is left. It is stable,
so equal names keep their input order until duplicate detection rejects
them.
"""

from __future__ import annotations

import typing as _typing

import heteromap.errors as errors

T = _typing.TypeVar("T")


def merge(
    left: list[T],
    right: list[T],
    key: _typing.Callable[[T], _typing.Any],
) -> list[T]:
    """
    Merge two sorted runs into one.

    Args:
        left: First sorted run (wins ties).
        right: Second sorted run.
        key: Sort key extractor.

    Returns:
        New sorted list holding every item of both runs.
    """
    result: list[T] = []
    i = j = 0
    while i < len(left) and j < len(right):
        if key(right[j]) < key(left[i]):
            result.append(right[j])
            j += 1
        else:
            result.append(left[i])
            i += 1
    result.extend(left[i:])
    result.extend(right[j:])
    return result


def merge_sort(
    items: _typing.Iterable[T],
    key: _typing.Callable[[T], _typing.Any],
) -> list[T]:
    """
    Sort items by key with a bottom-up merge sort.

    Args:
        items: Items in any order.
        key: Sort key extractor.

    Returns:
        New sorted list.
    """
    runs: list[list[T]] = [[item] for item in items]
    if not runs:
        return []
    while len(runs) > 1:
        merged = [merge(runs[i], runs[i + 1], key) for i in range(0, len(runs) - 1, 2)]
        if len(runs) % 2:
            merged.append(runs[-1])
        runs = merged
    return runs[0]


def check_unique(
    sorted_items: _typing.Sequence[T],
    key: _typing.Callable[[T], _typing.Any],
    name_of: _typing.Callable[[T], str],
    describe: _typing.Callable[[T], str] = repr,
) -> None:
    """
    Reject repeated keys in a sorted sequence.

    Args:
        sorted_items: Items already sorted by key.
        key: Key extractor; items with equal keys are duplicates.
        name_of: Extracts the entry name reported in the error.
        describe: Renders an item for the error message.

    Raises:
        DuplicateKeyError: If two neighbouring items share a key.
    """
    for previous, current in zip(sorted_items, sorted_items[1:]):
        if key(previous) == key(current):
            raise errors.DuplicateKeyError(
                name_of(current),
                f"{describe(previous)} conflicts with {describe(current)}",
            )
