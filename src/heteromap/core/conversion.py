"""
Value conformance and convertibility rules.

These rules decide whether a value may be stored under a declared type and
whether a value of one declared type may be transferred into a key of
another. They follow the numeric tower of PEP 484: an int is acceptable
where a float is declared, and an int or float where a complex is declared.

Typing forms that cannot be checked at runtime (TypeVars, Protocols that
are not runtime-checkable, Callable signatures, ...) are accepted
unverified.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import heteromap.core.tags as tags

_logger = _logging.getLogger(__name__)

# Declared type -> types that promote into it
_NUMERIC_PROMOTIONS: dict[type, tuple[type, ...]] = {
    float: (int,),
    complex: (int, float),
}


def conforms(value: _typing.Any, value_type: _typing.Any) -> bool:
    """
    Check whether value may be stored under value_type.

    Args:
        value: The candidate value.
        value_type: A class or typing form.

    Returns:
        True if the value conforms (or cannot be checked), False otherwise.
    """
    value_type = tags.normalize_type(value_type)

    if value_type is _typing.Any or value_type is object:
        return True

    origin = _typing.get_origin(value_type)
    if origin is _typing.Union:
        return any(conforms(value, arm) for arm in _typing.get_args(value_type))
    if origin is _typing.Literal:
        return value in _typing.get_args(value_type)
    if origin is _typing.Annotated:
        return conforms(value, _typing.get_args(value_type)[0])
    if isinstance(origin, type):
        # Parameterized generic: only the container class is checked
        return isinstance(value, origin)

    if isinstance(value_type, type):
        if isinstance(value, value_type):
            return True
        promoted = _NUMERIC_PROMOTIONS.get(value_type, ())
        return isinstance(value, promoted)

    _logger.debug("Accepting value for unverifiable type form %r", value_type)
    return True


def is_convertible(source: _typing.Any, destination: _typing.Any) -> bool:
    """
    Check whether values declared as source may be stored as destination.

    Args:
        source: The declared type of the value being transferred.
        destination: The declared type of the receiving key.

    Returns:
        True if every source value is an acceptable destination value.
    """
    source = tags.normalize_type(source)
    destination = tags.normalize_type(destination)

    if source == destination:
        return True
    if destination is _typing.Any or destination is object:
        return True

    dst_origin = _typing.get_origin(destination)
    if dst_origin is _typing.Union:
        return any(is_convertible(source, arm) for arm in _typing.get_args(destination))

    src_origin = _typing.get_origin(source)
    if src_origin is _typing.Union:
        return all(is_convertible(arm, destination) for arm in _typing.get_args(source))
    if src_origin is _typing.Literal:
        return all(conforms(v, destination) for v in _typing.get_args(source))

    if isinstance(destination, type):
        # list[int] converts to list
        src_class = src_origin if isinstance(src_origin, type) else source
        if isinstance(src_class, type):
            if issubclass(src_class, destination):
                return True
            return any(
                issubclass(src_class, promoted)
                for promoted in _NUMERIC_PROMOTIONS.get(destination, ())
            )
    return False


def convert(
    value: _typing.Any,
    destination: _typing.Any,
    copier: _typing.Callable[[_typing.Any], _typing.Any],
) -> _typing.Any:
    """
    Produce a copy of value suitable for storage under destination.

    Numeric promotion builds a new destination number; every other
    conversion copies the value with copier.

    Args:
        value: The value to copy.
        destination: The receiving key's declared type.
        copier: Copy function of the receiving storage policy.

    Returns:
        The converted copy.
    """
    destination = tags.normalize_type(destination)
    if (
        isinstance(destination, type)
        and destination in _NUMERIC_PROMOTIONS
        and not isinstance(value, destination)
    ):
        return destination(value)
    return copier(value)
