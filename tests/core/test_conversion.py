"""Tests for value conformance and convertibility rules."""

import copy as _copy
import typing as _typing

import heteromap.core.conversion as conversion


class _Base:
    pass


class _Derived(_Base):
    pass


class TestConforms:
    """Which values may be stored under a declared type."""

    def test_exact_class(self) -> None:
        assert conversion.conforms("hello", str)
        assert not conversion.conforms("hello", int)

    def test_subclass_instance(self) -> None:
        assert conversion.conforms(_Derived(), _Base)
        assert not conversion.conforms(_Base(), _Derived)

    def test_numeric_promotion(self) -> None:
        """int is acceptable for float, int/float for complex."""
        assert conversion.conforms(2, float)
        assert conversion.conforms(2, complex)
        assert conversion.conforms(2.5, complex)
        assert not conversion.conforms(2.5, int)

    def test_any_and_object(self) -> None:
        assert conversion.conforms(object(), _typing.Any)
        assert conversion.conforms(None, object)

    def test_optional(self) -> None:
        assert conversion.conforms(None, int | None)
        assert conversion.conforms(3, _typing.Optional[int])
        assert not conversion.conforms("3", int | None)

    def test_literal(self) -> None:
        assert conversion.conforms("a", _typing.Literal["a", "b"])
        assert not conversion.conforms("c", _typing.Literal["a", "b"])

    def test_parameterized_generic_checks_origin(self) -> None:
        assert conversion.conforms([1, 2], list[int])
        assert not conversion.conforms((1, 2), list[int])

    def test_annotated_uses_inner_type(self) -> None:
        assert conversion.conforms(1, _typing.Annotated[int, "meta"])

    def test_unverifiable_forms_accepted(self) -> None:
        T = _typing.TypeVar("T")

        assert conversion.conforms("anything", T)


class TestIsConvertible:
    """Which declared types may flow into which."""

    def test_identity(self) -> None:
        assert conversion.is_convertible(int, int)

    def test_subclass_to_base(self) -> None:
        assert conversion.is_convertible(_Derived, _Base)
        assert not conversion.is_convertible(_Base, _Derived)

    def test_numeric_promotion(self) -> None:
        assert conversion.is_convertible(int, float)
        assert conversion.is_convertible(float, complex)
        assert not conversion.is_convertible(float, int)

    def test_into_union(self) -> None:
        assert conversion.is_convertible(int, int | None)
        assert not conversion.is_convertible(str, int | None)

    def test_from_union_requires_every_arm(self) -> None:
        assert conversion.is_convertible(int | bool, int)
        assert not conversion.is_convertible(int | None, int)

    def test_generic_to_origin(self) -> None:
        assert conversion.is_convertible(list[int], list)
        assert not conversion.is_convertible(list[int], list[str])

    def test_anything_into_object(self) -> None:
        assert conversion.is_convertible(str, object)
        assert conversion.is_convertible(str, _typing.Any)


class TestConvert:
    """Copies made for cross-type transfers."""

    def test_promotes_numbers(self) -> None:
        result = conversion.convert(5, float, _copy.deepcopy)

        assert result == 5.0
        assert isinstance(result, float)

    def test_copies_other_values(self) -> None:
        original = [1, [2, 3]]
        result = conversion.convert(original, list, _copy.deepcopy)

        assert result == original
        assert result is not original
        assert result[1] is not original[1]

    def test_uses_given_copier(self) -> None:
        original = [1, [2, 3]]
        result = conversion.convert(original, list, _copy.copy)

        assert result is not original
        assert result[1] is original[1]
