"""
Conversion from static descriptors to dynamic keys.

Lets a caller move a fixed-schema key into the dynamic map's addressing
space. Both sides share KeyTag, so the resulting Key carries the very tag
the static descriptor was declared with.
"""

from __future__ import annotations

import typing as _typing

import heteromap.core.keys as keys
import heteromap.static._schema as _schema

V = _typing.TypeVar("V")


@_typing.overload
def static_key_to_dynamic_key(descriptor: _schema.StaticKey[V]) -> keys.Key[V]: ...


@_typing.overload
def static_key_to_dynamic_key(descriptor: _schema.Accessor[V]) -> keys.Key[V]: ...


@_typing.overload
def static_key_to_dynamic_key(
    descriptor: _schema.InferredKey, schema: _schema.Schema
) -> keys.Key[_typing.Any]: ...


def static_key_to_dynamic_key(
    descriptor: _typing.Any,
    schema: _schema.Schema | None = None,
) -> keys.Key[_typing.Any]:
    """
    Build the dynamic Key matching a static descriptor.

    Args:
        descriptor: A typed descriptor or a resolved accessor; or a
            name-only descriptor together with the schema that types it.
        schema: Required for name-only descriptors, ignored otherwise.

    Returns:
        A Key with the same name and the same type tag.

    Raises:
        TypeError: If a name-only descriptor comes without a schema.
        UnknownKeyError: If the schema does not contain the name.
    """
    if isinstance(descriptor, (_schema.StaticKey, _schema.Accessor)):
        return keys.Key(descriptor.name, descriptor.value_type)
    if isinstance(descriptor, _schema.InferredKey):
        if schema is None:
            raise TypeError(
                f"{descriptor!r} has no type of its own; pass the schema that declares it"
            )
        return keys.Key(descriptor.name, schema.type_of(descriptor.name))
    raise TypeError(f"Expected a static descriptor, got {type(descriptor).__name__}")
