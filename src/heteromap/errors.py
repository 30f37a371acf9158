"""
Exception hierarchy for heteromap.

Three families of failure exist:

- Schema violations (SchemaError and subclasses): a key set or a typed
  descriptor disagrees with the declared schema. These are raised while a
  map is being built or a descriptor is being bound, never as the result of
  an ordinary lookup.
- Contract violations (KeyNotFoundError, BadCastError): a throwing accessor
  was asked for something that is not there.
- Precondition violations (NotDefaultConstructibleError).

"Not found" on non-throwing operations is not an exception at all: it is
reported as None, 0 or ``inserted=False``.
"""


class HeteroMapError(Exception):
    """Base class for all heteromap errors."""

    pass


class SchemaError(HeteroMapError, TypeError):
    """A key set or descriptor violates the declared schema."""

    pass


class DuplicateKeyError(SchemaError):
    """Raised when a bulk key set contains the same key twice."""

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        message = f"Duplicate key {name!r}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class UnknownKeyError(SchemaError):
    """Raised when a static descriptor names a key the schema lacks."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Schema doesn't contain key {name!r}")


class KeyTypeMismatchError(SchemaError):
    """Raised when a static descriptor declares the wrong value type."""

    def __init__(self, name: str, declared: object, actual: object) -> None:
        self.name = name
        self.declared = declared
        self.actual = actual
        super().__init__(
            f"Schema contains key {name!r}, but it has the wrong type: "
            f"declared {_type_name(declared)}, stored {_type_name(actual)}"
        )


class ValueTypeError(SchemaError):
    """Raised when a value does not conform to its key's declared type."""

    def __init__(self, name: str, expected: object, value: object) -> None:
        self.name = name
        self.expected = expected
        self.value = value
        super().__init__(
            f"Value for key {name!r} must be {_type_name(expected)}, "
            f"got {type(value).__name__}"
        )


class IncompatibleKeyError(SchemaError):
    """Raised when a value cannot be transferred to a destination key's type."""

    def __init__(self, source: object, destination: object) -> None:
        self.source = source
        self.destination = destination
        super().__init__(
            f"Cannot transfer {source!r} into {destination!r}: value type is not convertible"
        )


class KeyNotFoundError(HeteroMapError, KeyError):
    """Raised by throwing accessors when a key is absent or has another type."""

    def __init__(self, key: object, stored_types: tuple[object, ...] = ()) -> None:
        self.key = key
        self.stored_types = stored_types
        message = f"Key not found: {key!r}"
        if stored_types:
            names = ", ".join(_type_name(t) for t in stored_types)
            message += f" (name is present with type {names})"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class BadCastError(HeteroMapError, TypeError):
    """Raised when an erased holder is cast with a tag it was not built with."""

    pass


class NotDefaultConstructibleError(HeteroMapError, TypeError):
    """Raised when a key's value type cannot be built without arguments."""

    def __init__(self, key: object, cause: BaseException | None = None) -> None:
        self.key = key
        message = f"Cannot default-construct a value for {key!r}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


def _type_name(tp: object) -> str:
    """Readable name for a type or typing form."""
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)
