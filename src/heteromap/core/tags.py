"""
Type identity tags.

A KeyTag is a process-wide singleton standing for one value type. Tags are
compared by identity, never by type name or hash, and are ordered by the
serial number handed out when each tag is first registered. The registry
never forgets a tag, so a tag outlives every key that refers to it.

Example:
    >>> KeyTag.of(int) is KeyTag.of(int)
    True
    >>> KeyTag.of(int) == KeyTag.of(float)
    False
"""

from __future__ import annotations

import itertools as _itertools
import logging as _logging
import threading as _threading
import types as _types
import typing as _typing

_logger = _logging.getLogger(__name__)

# Guards direct construction; only the registry passes it
_REGISTRY_TOKEN = object()


def _get_tag(value_type: _typing.Any) -> KeyTag:
    """Return the registered tag for value_type. Called by pickle."""
    return KeyTag.of(value_type)


def normalize_type(value_type: _typing.Any) -> _typing.Any:
    """
    Canonicalize equivalent spellings of the same type.

    ``Optional[int]``, ``Union[int, None]`` and ``int | None`` all name the
    same type, but are not guaranteed to hash alike. They are folded into
    the ``typing.Union`` form. ``None`` is folded into ``NoneType``.

    Args:
        value_type: A class or typing form.

    Returns:
        The canonical form used as the registry key.
    """
    if value_type is None:
        return type(None)
    origin = _typing.get_origin(value_type)
    if origin is _typing.Union or origin is _types.UnionType:
        args = tuple(normalize_type(arg) for arg in _typing.get_args(value_type))
        return _typing.Union[args]
    return value_type


class KeyTag:
    """
    Identity token for one value type.

    Never construct directly; use ``KeyTag.of(value_type)``. Copying and
    unpickling return the registered instance.
    """

    __slots__ = ("_value_type", "_serial")

    _registry: _typing.ClassVar[dict[_typing.Any, KeyTag]] = {}
    _lock: _typing.ClassVar[_threading.Lock] = _threading.Lock()
    _serials: _typing.ClassVar[_typing.Iterator[int]] = _itertools.count()

    def __init__(self, value_type: _typing.Any, serial: int, token: object = None) -> None:
        if token is not _REGISTRY_TOKEN:
            raise TypeError("KeyTag cannot be constructed directly; use KeyTag.of()")
        self._value_type = value_type
        self._serial = serial

    @classmethod
    def of(cls, value_type: _typing.Any) -> KeyTag:
        """
        Get the tag for a value type, registering it on first use.

        Args:
            value_type: A class or hashable typing form.

        Returns:
            The unique tag for that type.

        Raises:
            TypeError: If the type form is not hashable.
        """
        canonical = normalize_type(value_type)
        try:
            tag = cls._registry.get(canonical)
        except TypeError as e:
            raise TypeError(f"Value type {value_type!r} is not hashable: {e}") from e
        if tag is not None:
            return tag

        with cls._lock:
            tag = cls._registry.get(canonical)
            if tag is None:
                tag = cls(canonical, next(cls._serials), _REGISTRY_TOKEN)
                cls._registry[canonical] = tag
                _logger.debug("Registered key tag #%d for %r", tag._serial, canonical)
        return tag

    @property
    def value_type(self) -> _typing.Any:
        """The (canonical) type this tag stands for."""
        return self._value_type

    @property
    def serial(self) -> int:
        """Registration order; the tag's position in the total ordering."""
        return self._serial

    @property
    def type_name(self) -> str:
        if isinstance(self._value_type, type):
            return self._value_type.__qualname__
        return repr(self._value_type)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, KeyTag):
            return NotImplemented
        return self._serial < other._serial

    def __le__(self, other: object) -> bool:
        if not isinstance(other, KeyTag):
            return NotImplemented
        return self._serial <= other._serial

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, KeyTag):
            return NotImplemented
        return self._serial > other._serial

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, KeyTag):
            return NotImplemented
        return self._serial >= other._serial

    # Equality and hashing stay on object identity

    def __copy__(self) -> KeyTag:
        return self

    def __deepcopy__(self, memo: dict[int, _typing.Any]) -> KeyTag:
        return self

    def __reduce__(self) -> tuple[_typing.Callable[[_typing.Any], KeyTag], tuple[_typing.Any]]:
        """Pickle support: unpickling yields the registered tag."""
        return (_get_tag, (self._value_type,))

    def __repr__(self) -> str:
        return f"<KeyTag #{self._serial} {self.type_name}>"
