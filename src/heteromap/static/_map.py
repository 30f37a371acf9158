"""
StaticMap: a fixed-schema heterogeneous map.

The map is built once from ``(descriptor, value)`` pairs in any order.
Construction sorts the pairs by name, rejects repeated names (whatever
their types), builds a balanced tree and interns the schema. After that,
the set of keys never changes; only stored values can be rewritten.

Example:
    >>> m = make_static_map((tk("foo", int), 1), (tk("bar", float), 2.0),
    ...                     (tk("baz", str), "hello"))
    >>> m[tk("baz", str)]
    'hello'
    >>> m[ik("baz")] = "goodbye"
    >>> m[ik("baz")]
    'goodbye'
    >>> m[tk("baz", int)]
    Traceback (most recent call last):
      ...
    heteromap.errors.KeyTypeMismatchError: ...
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import heteromap.config as config
import heteromap.core.conversion as conversion
import heteromap.errors as errors
import heteromap.static._frozen as _frozen
import heteromap.static._schema as _schema
import heteromap.static._sort as _sort
import heteromap.static._tree as _tree

_logger = _logging.getLogger(__name__)

V = _typing.TypeVar("V")


def _slot_from_pair(pair: _typing.Any) -> _tree.Slot:
    """Unpack one (StaticKey, value) construction pair."""
    try:
        descriptor, value = pair
    except (TypeError, ValueError) as e:
        raise TypeError(f"Static map entries are (tk(name, type), value) pairs, got {pair!r}") from e
    if not isinstance(descriptor, _schema.StaticKey):
        raise errors.SchemaError(
            f"Static map entries need a typed descriptor, got {descriptor!r}"
        )
    return _tree.Slot(descriptor.name, descriptor.value_type, value)


def _describe(slot: _tree.Slot) -> str:
    return repr(_schema.StaticKey(slot.name, slot.value_type))


class StaticMap:
    """
    A heterogeneous map over a fixed, construction-time schema.

    Args:
        *pairs: ``(tk(name, type), value)`` tuples, in any order.
        settings: Overrides the process-wide settings.

    Raises:
        DuplicateKeyError: If two pairs share a name.
        ValueTypeError: If a value does not conform to its declared type
            (only when ``settings.verify_values`` is on).

    Note:
        Reads and writes through a resolved descriptor perform no type
        checks. Assigning a value of the wrong type is a caller error that
        a static type checker reports; the map does not.
    """

    __slots__ = ("_schema", "_root")

    def __init__(
        self,
        *pairs: tuple[_schema.StaticKey[_typing.Any], _typing.Any],
        settings: config.Settings | None = None,
    ) -> None:
        settings = settings or config.get_settings()
        slots = [_slot_from_pair(pair) for pair in pairs]

        if settings.verify_values:
            for slot in slots:
                if not conversion.conforms(slot.value, slot.value_type):
                    raise errors.ValueTypeError(slot.name, slot.value_type, slot.value)

        ordered = _sort.merge_sort(slots, key=lambda s: s.name)
        _sort.check_unique(
            ordered,
            key=lambda s: s.name,
            name_of=lambda s: s.name,
            describe=_describe,
        )

        self._root = _tree.build_tree(ordered)
        self._schema = _schema.Schema.intern(self._root)
        _logger.debug(
            "Built static map with %d keys, depth %d", len(ordered), self._schema.depth
        )

    @property
    def schema(self) -> _schema.Schema:
        """The interned schema this map was built with."""
        return self._schema

    def accessor(self, descriptor: _typing.Any) -> _schema.Accessor[_typing.Any]:
        """
        Resolve a descriptor once, for repeated use.

        Raises:
            UnknownKeyError: If the name is not in the schema.
            KeyTypeMismatchError: If a typed descriptor declares another type.
        """
        return self._schema.resolve(descriptor)

    @_typing.overload
    def __getitem__(self, descriptor: _schema.StaticKey[V]) -> V: ...

    @_typing.overload
    def __getitem__(self, descriptor: _schema.Accessor[V]) -> V: ...

    @_typing.overload
    def __getitem__(self, descriptor: _schema.InferredKey) -> _typing.Any: ...

    def __getitem__(self, descriptor: _typing.Any) -> _typing.Any:
        """
        Read the live value for a descriptor.

        Raises:
            UnknownKeyError: If the name is not in the schema.
            KeyTypeMismatchError: If a typed descriptor declares another type.
        """
        return self._schema.resolve(descriptor).slot(self._root).value

    @_typing.overload
    def __setitem__(self, descriptor: _schema.StaticKey[V], value: V) -> None: ...

    @_typing.overload
    def __setitem__(self, descriptor: _schema.Accessor[V], value: V) -> None: ...

    @_typing.overload
    def __setitem__(self, descriptor: _schema.InferredKey, value: _typing.Any) -> None: ...

    def __setitem__(self, descriptor: _typing.Any, value: _typing.Any) -> None:
        """
        Overwrite the value stored for a descriptor.

        Raises:
            UnknownKeyError: If the name is not in the schema.
            KeyTypeMismatchError: If a typed descriptor declares another type.
        """
        self._schema.resolve(descriptor).slot(self._root).value = value

    def __delitem__(self, descriptor: _typing.Any) -> None:
        raise TypeError("StaticMap keys are fixed at construction; entries cannot be deleted")

    def __contains__(self, descriptor: object) -> bool:
        """Check whether a descriptor (or bare name) resolves against the schema."""
        return descriptor in self._schema

    def __len__(self) -> int:
        return len(self._schema)

    def __iter__(self) -> _typing.Iterator[str]:
        """Iterate over names in ascending order."""
        return iter(self._schema)

    def items(self) -> _typing.Iterator[tuple[str, _typing.Any]]:
        """Yield (name, value) pairs in ascending name order."""
        for node in _tree.iter_inorder(self._root):
            yield node.name, node.slot.value

    def to_dict(self) -> dict[str, _typing.Any]:
        """Return a plain dict snapshot of name -> value."""
        return dict(self.items())

    def view(self) -> _frozen.StaticMapView:
        """Return a read-only view sharing this map's values."""
        return _frozen.StaticMapView(self)

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{_describe(node.slot)}: {node.slot.value!r}"
            for node in _tree.iter_inorder(self._root)
        )
        return f"StaticMap({fields})"


def make_static_map(
    *pairs: tuple[_schema.StaticKey[_typing.Any], _typing.Any],
    settings: config.Settings | None = None,
) -> StaticMap:
    """Build a StaticMap from (descriptor, value) pairs in any order."""
    return StaticMap(*pairs, settings=settings)
