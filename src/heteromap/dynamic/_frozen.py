"""
Read-only view of a DynamicMap.

Exposes the non-mutating accessors only. Values are shared with the map,
so the view sees later writes made through the map itself.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import heteromap.core.keys as keys

if _typing.TYPE_CHECKING:
    import heteromap.dynamic._map as _map

V = _typing.TypeVar("V")


class DynamicMapView(_abc.Mapping[keys.Key[_typing.Any], _typing.Any]):
    """
    Read-only view of a DynamicMap.

    A Mapping from Key to value; ``keys()``, ``values()`` and ``items()``
    follow key order.
    """

    __slots__ = ("_map",)

    def __init__(self, dynamic_map: _map.DynamicMap) -> None:
        self._map = dynamic_map

    def at(self, key: keys.Key[V]) -> V:
        return self._map.at(key)

    def get(self, key: keys.Key[V], default: _typing.Any = None) -> V | _typing.Any:  # type: ignore[override]
        return self._map.get(key, default)

    def lookup(self, *keys_: keys.Key[_typing.Any]) -> tuple[_typing.Any, ...]:
        return self._map.lookup(*keys_)

    def types_for(self, name: str) -> tuple[_typing.Any, ...]:
        return self._map.types_for(name)

    @property
    def empty(self) -> bool:
        return self._map.empty

    def size(self) -> int:
        return self._map.size()

    def __getitem__(self, key: keys.Key[V]) -> V:
        return self._map.at(key)

    def __setitem__(self, key: _typing.Any, value: _typing.Any) -> None:
        raise TypeError(f"'{type(self).__name__}' is read-only")

    def __delitem__(self, key: _typing.Any) -> None:
        raise TypeError(f"'{type(self).__name__}' is read-only")

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __len__(self) -> int:
        return len(self._map)

    def __iter__(self) -> _typing.Iterator[keys.Key[_typing.Any]]:
        return iter(self._map)

    def __repr__(self) -> str:
        return f"DynamicMapView({self._map!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Mapping with the same entries."""
        if isinstance(other, _abc.Mapping):
            return dict(self) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        """DynamicMapView is not hashable (values may be mutable)."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")
