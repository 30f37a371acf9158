"""
Read-only view of a StaticMap.

The view shares the map's live values (reads see later writes to the map)
but rejects every write made through it. It is a Mapping from entry name
to value, so ``keys()``, ``values()``, ``items()`` and ``get()`` work with
plain names; descriptors are accepted wherever a name is.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import heteromap.errors as errors
import heteromap.static._schema as _schema

if _typing.TYPE_CHECKING:
    import heteromap.static._map as _map


class StaticMapView(_abc.Mapping[str, _typing.Any]):
    """
    Read-only view of a StaticMap.

    Example:
        >>> view = m.view()
        >>> view[ik("foo")]  # Works
        1
        >>> view["foo"]  # Names work too
        1
        >>> view[ik("foo")] = 2  # TypeError: read-only
    """

    __slots__ = ("_map",)

    def __init__(self, static_map: _map.StaticMap) -> None:
        self._map = static_map

    @property
    def schema(self) -> _schema.Schema:
        return self._map.schema

    def __getitem__(self, descriptor: _typing.Any) -> _typing.Any:
        """
        Read a value by name or descriptor.

        Raises:
            KeyNotFoundError: If a plain name is not in the schema.
            UnknownKeyError: If a descriptor names a key the schema lacks.
            KeyTypeMismatchError: If a typed descriptor declares another type.
        """
        if isinstance(descriptor, str):
            if descriptor not in self._map:
                raise errors.KeyNotFoundError(descriptor)
            descriptor = _schema.ik(descriptor)
        return self._map[descriptor]

    def get(self, descriptor: _typing.Any, default: _typing.Any = None) -> _typing.Any:  # type: ignore[override]
        """Read a value, or return default if the schema lacks it."""
        if descriptor not in self._map:
            return default
        return self[descriptor]

    def __setitem__(self, descriptor: _typing.Any, value: _typing.Any) -> None:
        raise TypeError(f"'{type(self).__name__}' is read-only")

    def __delitem__(self, descriptor: _typing.Any) -> None:
        raise TypeError(f"'{type(self).__name__}' is read-only")

    def __contains__(self, descriptor: object) -> bool:
        return descriptor in self._map

    def __len__(self) -> int:
        return len(self._map)

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self._map)

    def to_dict(self) -> dict[str, _typing.Any]:
        return self._map.to_dict()

    def __repr__(self) -> str:
        return f"StaticMapView({self._map!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Mapping with the same names and values."""
        if isinstance(other, _abc.Mapping):
            return dict(self) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        """StaticMapView is not hashable (values may be mutable)."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")
