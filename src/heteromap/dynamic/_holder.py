"""
Type-erased value holder.

The holder stores a value next to the tag of the type it was stored as.
Recovering the value requires presenting that tag; any other tag is a
contract violation. The tag comparison is the whole check: the value's
runtime type is not re-examined on reads.
"""

from __future__ import annotations

import typing as _typing

import heteromap.core.tags as tags
import heteromap.errors as errors


class ErasedHolder:
    """A (tag, value) box with a checked cast."""

    __slots__ = ("_tag", "value")

    def __init__(self, tag: tags.KeyTag, value: _typing.Any) -> None:
        self._tag = tag
        self.value = value

    @property
    def tag(self) -> tags.KeyTag:
        return self._tag

    def holds(self, tag: tags.KeyTag) -> bool:
        """Check whether the value was stored under tag."""
        return self._tag is tag

    def cast(self, tag: tags.KeyTag) -> _typing.Any:
        """
        Recover the value as the type tag stands for.

        Raises:
            BadCastError: If the holder was built with another tag.
        """
        if self._tag is not tag:
            raise errors.BadCastError(
                f"Holder of {self._tag.type_name} cannot be cast to {tag.type_name}"
            )
        return self.value

    def __repr__(self) -> str:
        return f"ErasedHolder({self._tag.type_name}, {self.value!r})"
