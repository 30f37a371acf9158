"""Tests for StaticMap construction, resolution and access."""

import gc as _gc
import weakref as _weakref

import pytest as _pytest

import heteromap.config as config
import heteromap.errors as errors
import heteromap.static as static


class TestConstruction:
    """Building a static map from (descriptor, value) pairs."""

    def test_values_readable(self, example_static_map: static.StaticMap) -> None:
        assert example_static_map[static.tk("foo", int)] == 1
        assert example_static_map[static.tk("bar", float)] == 2.0
        assert example_static_map[static.tk("baz", str)] == "hello"

    def test_input_order_irrelevant(self, settings: config.Settings) -> None:
        first = static.make_static_map(
            (static.tk("a", int), 1), (static.tk("b", str), "x"), settings=settings
        )
        second = static.make_static_map(
            (static.tk("b", str), "x"), (static.tk("a", int), 1), settings=settings
        )

        assert first.to_dict() == second.to_dict()
        assert first.schema is second.schema

    def test_empty_map(self, settings: config.Settings) -> None:
        empty = static.StaticMap(settings=settings)

        assert len(empty) == 0
        assert list(empty) == []
        assert empty.schema.depth == 0

    def test_duplicate_name_same_type(self, settings: config.Settings) -> None:
        with _pytest.raises(errors.DuplicateKeyError) as exc_info:
            static.make_static_map(
                (static.tk("foo", int), 1), (static.tk("foo", int), 2), settings=settings
            )

        assert exc_info.value.name == "foo"

    def test_duplicate_name_different_type(self, settings: config.Settings) -> None:
        """Static names must be unique whatever their types."""
        with _pytest.raises(errors.DuplicateKeyError):
            static.make_static_map(
                (static.tk("foo", int), 1), (static.tk("foo", str), "x"), settings=settings
            )

    def test_duplicate_is_a_type_error(self, settings: config.Settings) -> None:
        with _pytest.raises(TypeError):
            static.make_static_map(
                (static.tk("foo", int), 1), (static.tk("foo", int), 2), settings=settings
            )

    def test_name_only_descriptor_rejected(self, settings: config.Settings) -> None:
        with _pytest.raises(errors.SchemaError, match="typed descriptor"):
            static.make_static_map((static.ik("foo"), 1), settings=settings)  # type: ignore[arg-type]

    def test_malformed_pair(self, settings: config.Settings) -> None:
        with _pytest.raises(TypeError, match="pairs"):
            static.make_static_map(static.tk("foo", int), settings=settings)  # type: ignore[arg-type]

    def test_value_type_verified(self, settings: config.Settings) -> None:
        with _pytest.raises(errors.ValueTypeError, match="'foo' must be int"):
            static.make_static_map((static.tk("foo", int), "one"), settings=settings)

    def test_verification_can_be_disabled(self, unchecked_settings: config.Settings) -> None:
        m = static.make_static_map((static.tk("foo", int), "one"), settings=unchecked_settings)

        assert m[static.ik("foo")] == "one"

    def test_int_accepted_for_float(self, settings: config.Settings) -> None:
        m = static.make_static_map((static.tk("ratio", float), 1), settings=settings)

        assert m[static.tk("ratio", float)] == 1


class TestResolution:
    """Descriptor checks against the schema."""

    def test_unknown_name(self, example_static_map: static.StaticMap) -> None:
        with _pytest.raises(errors.UnknownKeyError, match="doesn't contain key 'qux'"):
            example_static_map[static.tk("qux", int)]

    def test_unknown_inferred_name(self, example_static_map: static.StaticMap) -> None:
        with _pytest.raises(errors.UnknownKeyError):
            example_static_map[static.ik("qux")]

    def test_wrong_type(self, example_static_map: static.StaticMap) -> None:
        with _pytest.raises(errors.KeyTypeMismatchError) as exc_info:
            example_static_map[static.tk("baz", int)]

        assert exc_info.value.declared is int
        assert exc_info.value.actual is str
        assert "wrong type" in str(exc_info.value)

    def test_wrong_type_on_write(self, example_static_map: static.StaticMap) -> None:
        with _pytest.raises(errors.KeyTypeMismatchError):
            example_static_map[static.tk("baz", int)] = 3

    def test_non_descriptor_index(self, example_static_map: static.StaticMap) -> None:
        with _pytest.raises(TypeError, match="descriptors"):
            example_static_map["foo"]  # type: ignore[call-overload]

    def test_inferred_matches_typed(self, example_static_map: static.StaticMap) -> None:
        assert example_static_map[static.ik("baz")] == example_static_map[static.tk("baz", str)]

    def test_accessor_is_cached(self, example_static_map: static.StaticMap) -> None:
        first = example_static_map.accessor(static.tk("foo", int))
        second = example_static_map.accessor(static.tk("foo", int))

        assert first is second
        assert first.value_type is int

    def test_accessor_shared_by_same_schema(self, settings: config.Settings) -> None:
        pairs = ((static.tk("x", int), 1), (static.tk("y", int), 2))
        first = static.make_static_map(*pairs, settings=settings)
        second = static.make_static_map(*pairs, settings=settings)
        accessor = first.accessor(static.tk("y", int))

        second[accessor] = 20

        assert first[accessor] == 2
        assert second[accessor] == 20

    def test_accessor_from_other_schema(self, settings: config.Settings) -> None:
        """An accessor from another schema is re-resolved by name and type."""
        small = static.make_static_map((static.tk("x", int), 1), settings=settings)
        large = static.make_static_map(
            (static.tk("w", int), 0), (static.tk("x", int), 5), settings=settings
        )

        assert large[small.accessor(static.tk("x", int))] == 5

    def test_contains(self, example_static_map: static.StaticMap) -> None:
        assert "foo" in example_static_map
        assert static.tk("foo", int) in example_static_map
        assert static.ik("baz") in example_static_map
        assert static.tk("foo", str) not in example_static_map
        assert static.ik("qux") not in example_static_map
        assert 42 not in example_static_map


class TestAccess:
    """Reads and writes."""

    def test_scenario(self, example_static_map: static.StaticMap) -> None:
        """Write through a name-only key, read back through a typed one."""
        example_static_map[static.ik("baz")] = "goodbye"

        assert example_static_map[static.tk("baz", str)] == "goodbye"
        assert example_static_map[static.tk("foo", int)] == 1
        assert example_static_map[static.tk("bar", float)] == 2.0

    def test_writes_are_not_checked(self, example_static_map: static.StaticMap) -> None:
        """Value types on write are left to static type checkers."""
        example_static_map[static.ik("foo")] = "not an int"

        assert example_static_map[static.ik("foo")] == "not an int"

    def test_reads_are_live(self, settings: config.Settings) -> None:
        items: list[int] = []
        m = static.make_static_map((static.tk("items", list), items), settings=settings)

        m[static.ik("items")].append(1)

        assert items == [1]

    def test_cannot_delete(self, example_static_map: static.StaticMap) -> None:
        with _pytest.raises(TypeError, match="cannot be deleted"):
            del example_static_map[static.ik("foo")]

    def test_iteration_order(self, example_static_map: static.StaticMap) -> None:
        assert list(example_static_map) == ["bar", "baz", "foo"]
        assert list(example_static_map.items()) == [("bar", 2.0), ("baz", "hello"), ("foo", 1)]
        assert len(example_static_map) == 3

    def test_schema_layout(self, example_static_map: static.StaticMap) -> None:
        schema = example_static_map.schema

        assert schema.names == ("bar", "baz", "foo")
        assert schema.type_of("bar") is float
        assert schema.depth == 2
        assert repr(schema) == "Schema(bar: float, baz: str, foo: int)"

    def test_repr(self, example_static_map: static.StaticMap) -> None:
        assert repr(example_static_map) == (
            "StaticMap(tk('bar', float): 2.0, tk('baz', str): 'hello', tk('foo', int): 1)"
        )

    def test_many_keys(self, settings: config.Settings) -> None:
        pairs = [(static.tk(f"key{i:02d}", int), i) for i in reversed(range(50))]
        m = static.make_static_map(*pairs, settings=settings)

        for i in range(50):
            assert m[static.tk(f"key{i:02d}", int)] == i
        assert m.schema.depth == 6


class TestAccessorReadWrite:
    """Reading and writing through a resolved accessor."""

    def test_get_and_set(self, example_static_map: static.StaticMap) -> None:
        baz = example_static_map.accessor(static.tk("baz", str))

        baz.set(example_static_map, "goodbye")

        assert baz.get(example_static_map) == "goodbye"
        assert example_static_map[static.ik("baz")] == "goodbye"

    def test_path_and_repr(self, example_static_map: static.StaticMap) -> None:
        root = example_static_map.accessor(static.ik("baz"))
        left = example_static_map.accessor(static.ik("bar"))

        assert root.path == ()
        assert repr(root) == "Accessor('baz', str, path=root)"
        assert repr(left) == "Accessor('bar', float, path=L)"


class TestSchemaInterning:
    """The intern table does not keep unused schemas alive."""

    def test_unused_schema_is_released(self, settings: config.Settings) -> None:
        m = static.make_static_map((static.tk("released_only_here", int), 1), settings=settings)
        m.accessor(static.ik("released_only_here"))
        schema_ref = _weakref.ref(m.schema)

        del m
        _gc.collect()

        assert schema_ref() is None

    def test_live_schema_is_shared(self, settings: config.Settings) -> None:
        first = static.make_static_map((static.tk("shared_schema", int), 1), settings=settings)
        _gc.collect()
        second = static.make_static_map((static.tk("shared_schema", int), 2), settings=settings)

        assert first.schema is second.schema
