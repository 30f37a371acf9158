"""
Ordered, type-erased storage behind the dynamic map.

Entries live in a dict keyed by Key, and a parallel list keeps the keys in
Key order (name, then tag) with bisect. Every keyed operation confirms that
the holder's tag is the key's tag before touching the entry; an entry under
another tag is reported as absent.
"""

from __future__ import annotations

import bisect as _bisect
import logging as _logging
import typing as _typing

import heteromap.core.keys as keys
import heteromap.dynamic._holder as _holder
import heteromap.errors as errors

_logger = _logging.getLogger(__name__)


class TypeErasedStore:
    """
    Ordered mapping from Key to ErasedHolder.

    Not thread-safe; callers synchronize externally.
    """

    __slots__ = ("_entries", "_order")

    def __init__(self) -> None:
        self._entries: dict[keys.Key[_typing.Any], _holder.ErasedHolder] = {}
        self._order: list[keys.Key[_typing.Any]] = []

    @classmethod
    def from_pairs(
        cls,
        pairs: _typing.Iterable[tuple[keys.Key[_typing.Any], _holder.ErasedHolder]],
    ) -> TypeErasedStore:
        """
        Bulk-build a store from (Key, holder) pairs in any order.

        Duplicates are judged on (name, type) pairs: the same name under
        two different types is allowed.

        Raises:
            DuplicateKeyError: If the same Key appears twice.
            BadCastError: If a holder's tag differs from its key's tag.
        """
        ordered = sorted(pairs, key=lambda pair: pair[0].sort_key())
        for (previous, _), (current, _) in zip(ordered, ordered[1:]):
            if previous == current:
                raise errors.DuplicateKeyError(
                    current.name, f"{current!r} is listed more than once"
                )

        store = cls()
        # Already sorted, so the order list can be appended to directly
        for key, holder in ordered:
            _check_holder(key, holder)
            store._entries[key] = holder
            store._order.append(key)
        _logger.debug("Bulk-loaded %d entries", len(ordered))
        return store

    def lookup(self, key: keys.Key[_typing.Any]) -> _holder.ErasedHolder | None:
        """Return the holder for key, or None if absent or of another type."""
        holder = self._entries.get(key)
        if holder is None or not holder.holds(key.tag):
            return None
        return holder

    def put(self, key: keys.Key[_typing.Any], holder: _holder.ErasedHolder) -> bool:
        """
        Store holder under key, replacing any existing entry.

        Returns:
            True if a new entry was created, False if one was replaced.
        """
        _check_holder(key, holder)
        inserted = key not in self._entries
        if inserted:
            _bisect.insort(self._order, key)
        self._entries[key] = holder
        return inserted

    def put_new(
        self,
        key: keys.Key[_typing.Any],
        holder: _holder.ErasedHolder,
    ) -> tuple[_holder.ErasedHolder, bool]:
        """
        Store holder under key unless an entry is already there.

        Returns:
            (holder now in the store, whether holder was inserted).
        """
        existing = self.lookup(key)
        if existing is not None:
            return existing, False
        self.put(key, holder)
        return holder, True

    def remove(self, key: keys.Key[_typing.Any]) -> _holder.ErasedHolder | None:
        """Detach and return the holder for key, or None if absent."""
        holder = self.lookup(key)
        if holder is None:
            return None
        del self._entries[key]
        index = _bisect.bisect_left(self._order, key)
        del self._order[index]
        return holder

    def tags_for(self, name: str) -> tuple[_typing.Any, ...]:
        """Tags of every entry stored under name, in tag order."""
        start = _bisect.bisect_left(self._order, (name, -1), key=keys.Key.sort_key)
        found = []
        for key in self._order[start:]:
            if key.name != name:
                break
            found.append(key.tag)
        return tuple(found)

    @property
    def names(self) -> tuple[str, ...]:
        """Distinct entry names, in ascending order."""
        return tuple(dict.fromkeys(key.name for key in self._order))

    def clear(self) -> None:
        self._entries.clear()
        self._order.clear()

    @property
    def empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> _typing.Iterator[keys.Key[_typing.Any]]:
        """Iterate over keys in Key order."""
        return iter(list(self._order))

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, keys.Key):
            return False
        return self.lookup(key) is not None

    def items(self) -> _typing.Iterator[tuple[keys.Key[_typing.Any], _holder.ErasedHolder]]:
        """Yield (key, holder) pairs in Key order."""
        for key in list(self._order):
            yield key, self._entries[key]

    def copy(
        self,
        copier: _typing.Callable[[_typing.Any], _typing.Any],
    ) -> TypeErasedStore:
        """Return a new store with every value duplicated by copier."""
        new = TypeErasedStore()
        for key, holder in self.items():
            new._entries[key] = _holder.ErasedHolder(holder.tag, copier(holder.value))
            new._order.append(key)
        return new


def _check_holder(key: keys.Key[_typing.Any], holder: _holder.ErasedHolder) -> None:
    """Reject a holder built for a different type than its key."""
    if not holder.holds(key.tag):
        raise errors.BadCastError(
            f"Cannot store a holder of {holder.tag.type_name} under {key!r}"
        )
