"""
DynamicMap: an open-schema heterogeneous map with runtime type checks.

Every entry is addressed by a Key (name + type tag). Operations verify
the key's tag against the stored holder's tag; an entry stored under the
same name but another type is simply "not found" for that key.

Example:
    >>> m = make_dynamic_map((Key("foo", int), 1), (Key("baz", str), "hello"))
    >>> m.at(Key("baz", str))
    'hello'
    >>> m.find(Key("foo", float)) is None
    True
    >>> m.erase(Key("foo", int))
    1

Transfers between maps:
    >>> other = DynamicMap()
    >>> other.insert(m.extract(Key("baz", str)), Key("baz", str))
    (InsertOutcome(key=Key('baz', str), inserted=True, transfer=<Transfer.MOVED: 'moved'>),)

Thread safety: not thread-safe. Sequences of calls across two maps
(extract then insert, checkout then checkin) are not atomic.
"""

from __future__ import annotations

import inspect as _inspect
import logging as _logging
import typing as _typing

import heteromap.config as config
import heteromap.core.conversion as conversion
import heteromap.core.keys as keys
import heteromap.dynamic._frozen as _frozen
import heteromap.dynamic._handles as _handles
import heteromap.dynamic._holder as _holder
import heteromap.dynamic._store as _store
import heteromap.errors as errors

_logger = _logging.getLogger(__name__)

V = _typing.TypeVar("V")


def _check_key(key: object) -> keys.Key[_typing.Any]:
    if not isinstance(key, keys.Key):
        raise TypeError(f"Dynamic maps are indexed by Key objects, got {type(key).__name__}")
    return key


def _check_arity(operation: str, items: tuple[_typing.Any, ...], dest: tuple[_typing.Any, ...]) -> None:
    if len(items) != len(dest):
        raise ValueError(
            f"{operation}() got {len(items)} values for {len(dest)} keys"
        )


def _make_default(key: keys.Key[V]) -> V:
    """
    Call key.default_factory with no arguments.

    Only a factory that cannot be called without arguments is reported as
    NotDefaultConstructibleError; a TypeError raised while a factory runs
    propagates unchanged.
    """
    factory = key.default_factory
    # Special forms and aliases (Any, Optional[int], Literal[...]) are never constructible
    if getattr(factory, "__module__", None) == "typing":
        raise errors.NotDefaultConstructibleError(key, TypeError(f"{factory!r} is not a class"))
    try:
        signature = _inspect.signature(factory)
    except (TypeError, ValueError):
        # Some builtins expose no signature; their TypeError is the call check
        try:
            return factory()
        except TypeError as e:
            raise errors.NotDefaultConstructibleError(key, e) from e
    try:
        signature.bind()
    except TypeError as e:
        raise errors.NotDefaultConstructibleError(key, e) from e
    return factory()


class DynamicMap:
    """
    A heterogeneous map over an open, runtime-determined key set.

    Args:
        *pairs: ``(Key, value)`` tuples, in any order.
        policy: Storage policy; defaults to the one selected by settings.
        settings: Overrides the process-wide settings.

    Raises:
        DuplicateKeyError: If the same (name, type) key appears twice.
        ValueTypeError: If a value does not conform to its key's type
            (only when ``settings.verify_values`` is on).
    """

    __slots__ = ("_store", "_policy", "_settings")

    def __init__(
        self,
        *pairs: tuple[keys.Key[_typing.Any], _typing.Any],
        policy: _handles.StoragePolicy | None = None,
        settings: config.Settings | None = None,
    ) -> None:
        self._settings = settings or config.get_settings()
        self._policy = policy or _handles.StoragePolicy.default(self._settings)
        self._store = _store.TypeErasedStore.from_pairs(
            self._pair_to_holder(pair) for pair in pairs
        )

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _pair_to_holder(
        self, pair: _typing.Any
    ) -> tuple[keys.Key[_typing.Any], _holder.ErasedHolder]:
        try:
            key, value = pair
        except (TypeError, ValueError) as e:
            raise TypeError(f"Dynamic map entries are (Key, value) pairs, got {pair!r}") from e
        key = _check_key(key)
        return key, self._make_holder(key, value)

    def _make_holder(self, key: keys.Key[_typing.Any], value: _typing.Any) -> _holder.ErasedHolder:
        """Box a value for key, checking it when verify_values is on."""
        if self._settings.verify_values and not conversion.conforms(value, key.value_type):
            raise errors.ValueTypeError(key.name, key.value_type, value)
        return _holder.ErasedHolder(key.tag, value)

    def _store_value(self, key: keys.Key[_typing.Any], value: _typing.Any) -> bool:
        """Insert or overwrite value at key. Returns True if inserted."""
        holder = self._store.lookup(key)
        if holder is None:
            return self._store.put(key, self._make_holder(key, value))
        if self._settings.verify_values and not conversion.conforms(value, key.value_type):
            raise errors.ValueTypeError(key.name, key.value_type, value)
        holder.value = value
        return False

    def _check_transfers(
        self,
        sources: _typing.Iterable[keys.Key[_typing.Any] | None],
        destinations: tuple[keys.Key[_typing.Any], ...],
    ) -> None:
        """Reject any source -> destination pair whose types don't convert."""
        for source, destination in zip(sources, destinations):
            _check_key(destination)
            if source is None:
                continue
            if not conversion.is_convertible(source.value_type, destination.value_type):
                raise errors.IncompatibleKeyError(source, destination)

    # =========================================================================
    # Single-key access
    # =========================================================================

    def get_or_default(self, key: keys.Key[V]) -> V:
        """
        Return the stored value, creating a default one if absent.

        The default comes from ``key.default_factory`` (the value type
        itself unless the key overrides it).

        Raises:
            NotDefaultConstructibleError: If the factory cannot be called
                without arguments. The map is left unchanged.
        """
        key = _check_key(key)
        holder = self._store.lookup(key)
        if holder is not None:
            return _typing.cast(V, holder.value)
        value = _make_default(key)
        self._store.put(key, self._make_holder(key, value))
        return value

    def at(self, key: keys.Key[V]) -> V:
        """
        Return the stored value.

        Raises:
            KeyNotFoundError: If key is absent or stored under another type.
        """
        key = _check_key(key)
        holder = self._store.lookup(key)
        if holder is None:
            raise errors.KeyNotFoundError(key, self.types_for(key.name))
        return _typing.cast(V, holder.cast(key.tag))

    def get(self, key: keys.Key[V], default: _typing.Any = None) -> V | _typing.Any:
        """Return the stored value, or default if not found."""
        holder = self._store.lookup(_check_key(key))
        if holder is None:
            return default
        return holder.value

    def find(self, key: keys.Key[V]) -> _handles.Entry[V] | None:
        """Return a live entry for key, or None if absent or of another type."""
        key = _check_key(key)
        holder = self._store.lookup(key)
        if holder is None:
            return None
        return _handles.Entry(key, holder)

    def try_insert(self, key: keys.Key[V], value: V) -> tuple[_handles.Entry[V], bool]:
        """
        Insert value only if key is absent.

        Returns:
            (entry now stored at key, whether the insertion happened).
        """
        key = _check_key(key)
        existing = self._store.lookup(key)
        if existing is not None:
            return _handles.Entry(key, existing), False
        holder, inserted = self._store.put_new(key, self._make_holder(key, value))
        return _handles.Entry(key, holder), inserted

    def insert_or_assign(self, key: keys.Key[V], value: V) -> tuple[_handles.Entry[V], bool]:
        """
        Insert value, or overwrite the existing one.

        Returns:
            (entry now stored at key, True if inserted / False if assigned).
        """
        key = _check_key(key)
        inserted = self._store_value(key, value)
        holder = self._store.lookup(key)
        assert holder is not None
        return _handles.Entry(key, holder), inserted

    def erase(self, key: keys.Key[_typing.Any]) -> int:
        """Remove key's entry. Returns the number removed (0 or 1)."""
        return 0 if self._store.remove(_check_key(key)) is None else 1

    # =========================================================================
    # Batch transfer
    # =========================================================================

    def extract(self, *keys_: keys.Key[_typing.Any]) -> tuple[_handles.EntryHandle[_typing.Any], ...]:
        """
        Detach each key's entry from the map.

        Returns:
            One handle per key, empty where the key was not found.
        """
        handles = []
        for key in keys_:
            key = _check_key(key)
            handles.append(_handles.EntryHandle(key, self._store.remove(key), self._policy))
        _logger.debug(
            "Extracted %d of %d entries", sum(1 for h in handles if h), len(handles)
        )
        return tuple(handles)

    def insert(
        self,
        handles: _typing.Iterable[_handles.EntryHandle[_typing.Any]],
        *keys_: keys.Key[_typing.Any],
    ) -> tuple[_handles.InsertOutcome, ...]:
        """
        Insert extracted entries, each under its paired destination key.

        Per pair:
        - empty handle: skipped;
        - destination already present: left alone, the handle keeps its value;
        - same key and compatible storage policy: the holder is moved;
        - otherwise: the value is copied (and promoted) into a new holder.

        Every non-empty pair is checked for type convertibility before any
        entry is touched.

        Raises:
            ValueError: If handles and keys differ in number.
            IncompatibleKeyError: If a handle's type doesn't convert to its
                destination key's type.
        """
        handles = tuple(handles)
        _check_arity("insert", handles, keys_)
        for handle in handles:
            if not isinstance(handle, _handles.EntryHandle):
                raise TypeError(f"insert() expects EntryHandle objects, got {type(handle).__name__}")
        self._check_transfers((h.key if h else None for h in handles), keys_)
        return tuple(self._insert_one(handle, key) for handle, key in zip(handles, keys_))

    def _insert_one(
        self,
        handle: _handles.EntryHandle[_typing.Any],
        key: keys.Key[_typing.Any],
    ) -> _handles.InsertOutcome:
        if not handle:
            _logger.debug("Skipping empty handle for %r", key)
            return _handles.InsertOutcome(key, False, _handles.Transfer.NONE)
        if self._store.lookup(key) is not None:
            return _handles.InsertOutcome(key, False, _handles.Transfer.NONE)

        if key == handle.key and self._policy.compatible(handle.policy):
            self._store.put(key, handle.release())
            return _handles.InsertOutcome(key, True, _handles.Transfer.MOVED)

        value = conversion.convert(handle.value, key.value_type, self._policy.copier)
        _logger.debug("Copying %r into %r (policy %s)", handle.key, key, self._policy.name)
        self._store.put(key, _holder.ErasedHolder(key.tag, value))
        handle.release()
        return _handles.InsertOutcome(key, True, _handles.Transfer.COPIED)

    def checkout(self, *keys_: keys.Key[_typing.Any]) -> tuple[_typing.Any, ...]:
        """
        Remove each key's value from the map and return it.

        Returns:
            One value per key; MISSING where the key was not found.
        """
        values = []
        for key in keys_:
            key = _check_key(key)
            holder = self._store.remove(key)
            values.append(_handles.MISSING if holder is None else holder.cast(key.tag))
        return tuple(values)

    def checkin(self, values: _typing.Iterable[_typing.Any], *keys_: keys.Key[_typing.Any]) -> None:
        """
        Store each value at its paired key, overwriting.

        MISSING values are skipped, so the result of ``checkout`` can be
        passed straight back. None is stored like any other value.

        Raises:
            ValueError: If values and keys differ in number.
        """
        values = tuple(values)
        _check_arity("checkin", values, keys_)
        for value, key in zip(values, keys_):
            key = _check_key(key)
            if value is not _handles.MISSING:
                self._store_value(key, value)

    def copy_out(self, *keys_: keys.Key[_typing.Any]) -> tuple[_handles.Entry[_typing.Any] | None, ...]:
        """
        Return a live entry per key without removing anything.

        Returns:
            One entry per key; None where the key was not found.
        """
        return tuple(self.find(key) for key in keys_)

    def copy_in(
        self,
        entries: _typing.Iterable[_handles.Entry[_typing.Any] | None],
        *keys_: keys.Key[_typing.Any],
    ) -> None:
        """
        Store a copy of each entry's value at its paired key, overwriting.

        None entries are skipped. Source entries are left untouched.

        Raises:
            ValueError: If entries and keys differ in number.
            IncompatibleKeyError: If an entry's type doesn't convert to its
                destination key's type.
        """
        entries = tuple(entries)
        _check_arity("copy_in", entries, keys_)
        self._check_transfers((e.key if e is not None else None for e in entries), keys_)
        for entry, key in zip(entries, keys_):
            if entry is None:
                continue
            value = conversion.convert(entry.value, key.value_type, self._policy.copier)
            self._store_value(key, value)

    def lookup(self, *keys_: keys.Key[_typing.Any]) -> tuple[_typing.Any, ...]:
        """
        Look up several keys at once.

        Returns:
            The stored object per key (not a copy); MISSING where not found.
        """
        return tuple(self.get(key, _handles.MISSING) for key in keys_)

    # =========================================================================
    # Whole-map operations
    # =========================================================================

    @property
    def policy(self) -> _handles.StoragePolicy:
        return self._policy

    @property
    def empty(self) -> bool:
        return self._store.empty

    def size(self) -> int:
        return len(self._store)

    def clear(self) -> None:
        self._store.clear()

    def types_for(self, name: str) -> tuple[_typing.Any, ...]:
        """Value types stored under name, in key order."""
        return tuple(tag.value_type for tag in self._store.tags_for(name))

    def items(self) -> _typing.Iterator[tuple[keys.Key[_typing.Any], _typing.Any]]:
        """Yield (key, value) pairs in key order."""
        for key, holder in self._store.items():
            yield key, holder.value

    def copy(self) -> DynamicMap:
        """Return a new map whose values are duplicated with the policy copier."""
        new = DynamicMap(policy=self._policy, settings=self._settings)
        new._store = self._store.copy(self._policy.copier)
        return new

    def view(self) -> _frozen.DynamicMapView:
        """Return a read-only view sharing this map's values."""
        return _frozen.DynamicMapView(self)

    def __copy__(self) -> DynamicMap:
        return self.copy()

    def __getitem__(self, key: keys.Key[V]) -> V:
        """Same as ``at``."""
        return self.at(key)

    def __setitem__(self, key: keys.Key[V], value: V) -> None:
        """Same as ``insert_or_assign``."""
        self.insert_or_assign(key, value)

    def __delitem__(self, key: keys.Key[_typing.Any]) -> None:
        """
        Remove key's entry.

        Raises:
            KeyNotFoundError: If key is absent or stored under another type.
        """
        if not self.erase(key):
            raise errors.KeyNotFoundError(key, self.types_for(key.name))

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)

    def __iter__(self) -> _typing.Iterator[keys.Key[_typing.Any]]:
        """Iterate over keys in key order."""
        return iter(self._store)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DynamicMap):
            return NotImplemented
        return list(self.items()) == list(other.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{key!r}: {value!r}" for key, value in self.items())
        return f"DynamicMap({fields})"


def make_dynamic_map(
    *pairs: tuple[keys.Key[_typing.Any], _typing.Any],
    policy: _handles.StoragePolicy | None = None,
    settings: config.Settings | None = None,
) -> DynamicMap:
    """Build a DynamicMap from (Key, value) pairs in any order."""
    return DynamicMap(*pairs, policy=policy, settings=settings)
