"""
Static map schemas, key descriptors and resolved accessors.

A Schema is the sorted, fixed set of (name, type) pairs a StaticMap was
built from, together with the descent path planned for every name.
Schemas are interned: two maps built from the same key set share one
Schema object, so an accessor resolved once serves both.

Descriptors come in two forms:

- ``tk("baz", str)``: a typed descriptor. Resolving it checks that the
  name exists and that ``str`` is the type the schema declares.
- ``ik("baz")``: a name-only descriptor whose type is taken from the
  schema.

Resolution failures raise SchemaError subclasses. Resolve descriptors at
module level (``ACCESSOR = schema.resolve(tk(...))``) to have a bad
descriptor rejected as soon as the module is imported.
"""

from __future__ import annotations

import threading as _threading
import typing as _typing
import weakref as _weakref

import heteromap.core.tags as tags
import heteromap.errors as errors
import heteromap.static._tree as _tree

if _typing.TYPE_CHECKING:
    import heteromap.static._map as _map

V = _typing.TypeVar("V")


class StaticKey(_typing.Generic[V]):
    """Typed descriptor naming a static map entry and its value type."""

    __slots__ = ("_name", "_tag")

    def __init__(self, name: str, value_type: type[V] | _typing.Any) -> None:
        if not isinstance(name, str):
            raise TypeError(f"Key name must be a string, got {type(name).__name__}")
        self._name = name
        self._tag = tags.KeyTag.of(value_type)

    @property
    def name(self) -> str:
        return self._name

    @property
    def tag(self) -> tags.KeyTag:
        return self._tag

    @property
    def value_type(self) -> _typing.Any:
        return self._tag.value_type

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StaticKey):
            return NotImplemented
        return self._name == other._name and self._tag is other._tag

    def __hash__(self) -> int:
        return hash((self._name, id(self._tag)))

    def __repr__(self) -> str:
        return f"tk({self._name!r}, {self._tag.type_name})"


class InferredKey:
    """Name-only descriptor; the value type comes from the schema."""

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        if not isinstance(name, str):
            raise TypeError(f"Key name must be a string, got {type(name).__name__}")
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InferredKey):
            return NotImplemented
        return self._name == other._name

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        return f"ik({self._name!r})"


def tk(name: str, value_type: type[V] | _typing.Any) -> StaticKey[V]:
    """Build a typed static descriptor."""
    return StaticKey(name, value_type)


def ik(name: str) -> InferredKey:
    """Build a name-only static descriptor."""
    return InferredKey(name)


class Accessor(_typing.Generic[V]):
    """
    A descriptor resolved against a schema.

    Holds the planned descent path, so reading and writing through it
    performs no name comparisons and no type checks.
    """

    __slots__ = ("_schema", "_name", "_tag", "_path")

    def __init__(
        self,
        schema: Schema,
        name: str,
        tag: tags.KeyTag,
        path: _tree.Path,
    ) -> None:
        self._schema = schema
        self._name = name
        self._tag = tag
        self._path = path

    @property
    def schema(self) -> Schema:
        return self._schema

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
    def path(self) -> _tree.Path:
        return self._path

    def slot(self, root: _tree.Node | None) -> _tree.Slot:
        """Replay this accessor's path from root."""
        return _tree.follow(root, self._path)

    def get(self, static_map: _map.StaticMap) -> V:
        """Read this entry from static_map."""
        return _typing.cast(V, static_map[self])

    def set(self, static_map: _map.StaticMap, value: V) -> None:
        """Overwrite this entry in static_map."""
        static_map[self] = value

    def __repr__(self) -> str:
        turns = "".join(turn.value for turn in self._path) or "root"
        return f"Accessor({self._name!r}, {self._tag.type_name}, path={turns})"


class Schema:
    """
    The fixed (name, type) layout of a static map.

    Never construct directly; StaticMap interns one per key set. The intern
    table holds schemas weakly, so a schema is dropped once no map or
    accessor refers to it.
    """

    __slots__ = ("_entries", "_paths", "_depth", "_resolved", "__weakref__")

    _interned: _typing.ClassVar[
        _weakref.WeakValueDictionary[tuple[tuple[str, tags.KeyTag], ...], Schema]
    ] = _weakref.WeakValueDictionary()
    _lock: _typing.ClassVar[_threading.Lock] = _threading.Lock()

    def __init__(
        self,
        entries: tuple[tuple[str, tags.KeyTag], ...],
        paths: dict[str, _tree.Path],
        depth: int,
    ) -> None:
        self._entries = dict(entries)
        self._paths = paths
        self._depth = depth
        self._resolved: dict[StaticKey[_typing.Any] | InferredKey, Accessor[_typing.Any]] = {}

    @classmethod
    def intern(cls, root: _tree.Node | None) -> Schema:
        """
        Return the shared schema for the tree's key set.

        Args:
            root: Root of a freshly built tree.

        Returns:
            The interned Schema for that (name, type) set.
        """
        entries = tuple(
            (node.name, tags.KeyTag.of(node.slot.value_type))
            for node in _tree.iter_inorder(root)
        )
        schema = cls._interned.get(entries)
        if schema is not None:
            return schema
        with cls._lock:
            schema = cls._interned.get(entries)
            if schema is None:
                schema = cls(entries, _tree.plan_paths(root), _tree.tree_depth(root))
                cls._interned[entries] = schema
        return schema

    @property
    def names(self) -> tuple[str, ...]:
        """Names in ascending order."""
        return tuple(self._entries)

    @property
    def depth(self) -> int:
        return self._depth

    def type_of(self, name: str) -> _typing.Any:
        """
        Declared value type for name.

        Raises:
            UnknownKeyError: If the schema has no such name.
        """
        tag = self._entries.get(name)
        if tag is None:
            raise errors.UnknownKeyError(name)
        return tag.value_type

    @_typing.overload
    def resolve(self, descriptor: StaticKey[V]) -> Accessor[V]: ...

    @_typing.overload
    def resolve(self, descriptor: Accessor[V]) -> Accessor[V]: ...

    @_typing.overload
    def resolve(self, descriptor: InferredKey) -> Accessor[_typing.Any]: ...

    def resolve(self, descriptor: _typing.Any) -> Accessor[_typing.Any]:
        """
        Resolve a descriptor into an accessor for this schema.

        Args:
            descriptor: A typed or name-only descriptor, or an accessor
                resolved against any schema.

        Returns:
            The accessor (cached per descriptor).

        Raises:
            UnknownKeyError: If the name is not in the schema.
            KeyTypeMismatchError: If a typed descriptor declares another type.
            TypeError: If descriptor is not a static descriptor at all.
        """
        if isinstance(descriptor, Accessor):
            if descriptor.schema is self:
                return descriptor
            descriptor = StaticKey(descriptor.name, descriptor.value_type)

        accessor = self._resolved.get(descriptor)
        if accessor is not None:
            return accessor

        if isinstance(descriptor, StaticKey):
            tag = self._entries.get(descriptor.name)
            if tag is None:
                raise errors.UnknownKeyError(descriptor.name)
            if tag is not descriptor.tag:
                raise errors.KeyTypeMismatchError(
                    descriptor.name, descriptor.value_type, tag.value_type
                )
        elif isinstance(descriptor, InferredKey):
            tag = self._entries.get(descriptor.name)
            if tag is None:
                raise errors.UnknownKeyError(descriptor.name)
        else:
            raise TypeError(
                f"Static maps are indexed by tk()/ik() descriptors, got {type(descriptor).__name__}"
            )

        accessor = Accessor(self, descriptor.name, tag, self._paths[descriptor.name])
        self._resolved[descriptor] = accessor
        return accessor

    def __contains__(self, descriptor: object) -> bool:
        """Check whether a descriptor would resolve against this schema."""
        if isinstance(descriptor, str):
            return descriptor in self._entries
        if isinstance(descriptor, StaticKey):
            return self._entries.get(descriptor.name) is descriptor.tag
        if isinstance(descriptor, Accessor):
            return descriptor.schema is self or self._entries.get(descriptor.name) is descriptor.tag
        if isinstance(descriptor, InferredKey):
            return descriptor.name in self._entries
        return False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self._entries)

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}: {tag.type_name}" for name, tag in self._entries.items())
        return f"Schema({fields})"
