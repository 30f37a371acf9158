"""
Result types for dynamic map operations.

- Entry: a live reference to one stored entry (what ``find`` returns).
- EntryHandle: an entry detached by ``extract``, owning its holder until a
  map takes it back with ``insert``.
- InsertOutcome: what ``insert`` did with each handle.
- StoragePolicy: the storage class of a map. A handle can be moved into a
  map only when the map's policy matches the one it was extracted under;
  otherwise the value is copied with the destination's copier.
- MISSING: marks an absent key in multi-key results, where None may be a
  stored value.
"""

from __future__ import annotations

import copy as _copy
import dataclasses as _dataclasses
import enum as _enum
import typing as _typing

import heteromap.core.keys as keys
import heteromap.dynamic._holder as _holder
import heteromap.errors as errors

if _typing.TYPE_CHECKING:
    import heteromap.config as config

V = _typing.TypeVar("V")


@_dataclasses.dataclass(frozen=True, slots=True)
class StoragePolicy:
    """Storage class of a dynamic map."""

    name: str
    copier: _typing.Callable[[_typing.Any], _typing.Any]

    def compatible(self, other: StoragePolicy) -> bool:
        """Whether holders can move between maps using the two policies."""
        return self == other

    @classmethod
    def default(cls, settings: config.Settings) -> StoragePolicy:
        """The shared policy selected by ``settings.copy_strategy``."""
        if settings.copy_strategy == "copy":
            return SHALLOW
        return DEEP


DEEP = StoragePolicy("deepcopy", _copy.deepcopy)
SHALLOW = StoragePolicy("copy", _copy.copy)


def _get_missing_singleton() -> _MissingType:
    """Return the MISSING singleton. Called by pickle and copy to reconstruct."""
    return MISSING


class _MissingType:
    """Sentinel type marking a key that was not found."""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __reduce__(self) -> tuple[_typing.Callable[[], _MissingType], tuple[()]]:
        """Pickle support: ensure singleton is preserved."""
        return (_get_missing_singleton, ())


MISSING: _typing.Final = _MissingType()


class Transfer(_enum.Enum):
    """How a handle's value reached its destination."""

    MOVED = "moved"
    COPIED = "copied"
    NONE = "none"


@_dataclasses.dataclass(frozen=True, slots=True)
class InsertOutcome:
    """Result of inserting one handle."""

    key: keys.Key[_typing.Any]
    inserted: bool
    transfer: Transfer

    @property
    def copied(self) -> bool:
        """True when a copy was substituted for a move."""
        return self.transfer is Transfer.COPIED


class Entry(_typing.Generic[V]):
    """
    Live reference to a stored entry.

    Reading ``value`` sees the current stored value; assigning it writes
    through to the map. Unpacks like a pair: ``key, value = entry``.
    """

    __slots__ = ("_key", "_holder")

    def __init__(self, key: keys.Key[V], holder: _holder.ErasedHolder) -> None:
        self._key = key
        self._holder = holder

    @property
    def key(self) -> keys.Key[V]:
        return self._key

    @property
    def value(self) -> V:
        return _typing.cast(V, self._holder.value)

    @value.setter
    def value(self, value: V) -> None:
        self._holder.value = value

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        yield self._key
        yield self._holder.value

    def __repr__(self) -> str:
        return f"Entry({self._key!r}, {self._holder.value!r})"


class EntryHandle(_typing.Generic[V]):
    """
    An extracted entry, detached from any map.

    An empty handle (nothing was extracted, or the handle was already
    consumed) is falsy.
    """

    __slots__ = ("_key", "_holder", "_policy")

    def __init__(
        self,
        key: keys.Key[V],
        holder: _holder.ErasedHolder | None,
        policy: StoragePolicy,
    ) -> None:
        self._key = key
        self._holder = holder
        self._policy = policy

    @property
    def key(self) -> keys.Key[V]:
        """The key the entry was extracted under."""
        return self._key

    @property
    def policy(self) -> StoragePolicy:
        """Storage policy of the map the entry came from."""
        return self._policy

    @property
    def empty(self) -> bool:
        return self._holder is None

    @property
    def value(self) -> V:
        """
        The extracted value.

        Raises:
            KeyNotFoundError: If the handle is empty.
        """
        if self._holder is None:
            raise errors.KeyNotFoundError(self._key)
        return _typing.cast(V, self._holder.value)

    def holder(self) -> _holder.ErasedHolder | None:
        """The owned holder, without giving it up."""
        return self._holder

    def release(self) -> _holder.ErasedHolder:
        """
        Give up ownership of the holder, leaving the handle empty.

        Raises:
            KeyNotFoundError: If the handle is empty.
        """
        if self._holder is None:
            raise errors.KeyNotFoundError(self._key)
        holder, self._holder = self._holder, None
        return holder

    def __bool__(self) -> bool:
        return self._holder is not None

    def __repr__(self) -> str:
        if self._holder is None:
            return f"EntryHandle({self._key!r}, empty)"
        return f"EntryHandle({self._key!r}, {self._holder.value!r})"
