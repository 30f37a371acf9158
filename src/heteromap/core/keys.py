"""
Keys for the dynamic map.

A Key pairs a name with the tag of its value type. Keys order by name
first and by tag second, so ``Key("id", int)`` and ``Key("id", str)`` are
two distinct entries that happen to share a label.

Example:
    >>> count = Key("count", int)
    >>> count.name, count.value_type
    ('count', <class 'int'>)
    >>> Key("id", int) == Key("id", str)
    False
"""

from __future__ import annotations

import functools as _functools
import typing as _typing

import heteromap.core.tags as tags

V = _typing.TypeVar("V")


@_functools.total_ordering
class Key(_typing.Generic[V]):
    """
    A (name, type identity) pair addressing one map entry.

    Args:
        name: The entry's name.
        value_type: The type of value stored under this key.
        default_factory: Zero-argument callable used by
            ``DynamicMap.get_or_default``. Defaults to ``value_type``.
            Not part of the key's identity.
    """

    __slots__ = ("_name", "_tag", "_default_factory")

    def __init__(
        self,
        name: str,
        value_type: type[V] | _typing.Any,
        *,
        default_factory: _typing.Callable[[], V] | None = None,
    ) -> None:
        if not isinstance(name, str):
            raise TypeError(f"Key name must be a string, got {type(name).__name__}")
        self._name = name
        self._tag = tags.KeyTag.of(value_type)
        self._default_factory = default_factory

    @property
    def name(self) -> str:
        return self._name

    @property
    def tag(self) -> tags.KeyTag:
        return self._tag

    @property
    def value_type(self) -> _typing.Any:
        return self._tag.value_type

    @property
    def default_factory(self) -> _typing.Callable[[], V]:
        """Factory for default values (the value type itself unless overridden)."""
        if self._default_factory is not None:
            return self._default_factory
        factory = self._tag.value_type
        # Parameterized generics (list[int]) build through their origin
        origin = _typing.get_origin(factory)
        if isinstance(origin, type):
            factory = origin
        return _typing.cast(_typing.Callable[[], V], factory)

    def sort_key(self) -> tuple[str, int]:
        """Ordering key: name first, then tag registration order."""
        return (self._name, self._tag.serial)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self._name == other._name and self._tag is other._tag

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self) -> int:
        return hash((self._name, id(self._tag)))

    def __repr__(self) -> str:
        return f"Key({self._name!r}, {self._tag.type_name})"


def dk(name: str, value_type: type[V] | _typing.Any) -> Key[V]:
    """Shorthand for ``Key(name, value_type)``."""
    return Key(name, value_type)
