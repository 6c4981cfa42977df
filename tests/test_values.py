"""Tests for runtime value equality, type names and display formatting."""

from __future__ import annotations

import pytest

from quill.values import (
    Array,
    Boolean,
    Callable,
    Number,
    Object,
    String,
    format_value,
    type_name,
)


class TestEquality:
    def test_structural_numbers(self) -> None:
        assert Number(1.5) == Number(1.5)
        assert Number(1.5) != Number(2.0)

    def test_variants_never_equal(self) -> None:
        assert Number(1.0) != Boolean(True)
        assert String("1") != Number(1.0)

    def test_nested_arrays(self) -> None:
        a = Array((Number(1.0), Array((String("x"),))))
        b = Array((Number(1.0), Array((String("x"),))))
        assert a == b

    def test_objects_ignore_insertion_order(self) -> None:
        a = Object({"x": Number(1.0), "y": Boolean(False)})
        b = Object({"y": Boolean(False), "x": Number(1.0)})
        assert a == b

    def test_callable_compares_name_and_arity_only(self) -> None:
        first = Callable("add", 2, lambda args: Number(0.0))
        second = Callable("add", 2, lambda args: Number(1.0))
        assert first == second
        assert first != Callable("add", 3, first.function)
        assert first != Callable("sub", 2, first.function)

    def test_callable_shares_function(self) -> None:
        def fn(args):
            return Number(1.0)

        assert Callable("f", 0, fn).function is Callable("g", 0, fn).function


class TestHashing:
    def test_object_is_hashable(self) -> None:
        a = Object({"x": Number(1.0)})
        b = Object({"x": Number(1.0)})
        assert hash(a) == hash(b)

    def test_containers_holding_objects_are_hashable(self) -> None:
        value = Array((Object({"k": String("v")}), Number(2.0)))
        assert value in {value}


class TestTypeName:
    @pytest.mark.parametrize(
        "value,name",
        [
            (Number(1.0), "Number"),
            (String(""), "String"),
            (Boolean(True), "Boolean"),
            (Array(), "Array"),
            (Object(), "Object"),
            (Callable("f", 0, lambda args: Number(0.0)), "Callable"),
        ],
    )
    def test_names(self, value, name) -> None:
        assert type_name(value) == name


class TestFormatValue:
    def test_integral_number(self) -> None:
        assert format_value(Number(8.0)) == "8"

    def test_fractional_number(self) -> None:
        assert format_value(Number(2.5)) == "2.5"

    def test_negative_number(self) -> None:
        assert format_value(Number(-5.0)) == "-5"

    def test_string_is_raw(self) -> None:
        assert format_value(String("hi")) == "hi"

    def test_booleans(self) -> None:
        assert format_value(Boolean(True)) == "true"
        assert format_value(Boolean(False)) == "false"

    def test_array(self) -> None:
        value = Array((Number(1.0), String("a"), Array()))
        assert format_value(value) == "[1, a, []]"

    def test_object_keys_sorted(self) -> None:
        value = Object({"b": Number(2.0), "a": Boolean(True)})
        assert format_value(value) == "{a: true, b: 2}"

    def test_callable(self) -> None:
        assert format_value(Callable("add", 2, lambda args: Number(0.0))) == "<fn add/2>"

    def test_not_a_value(self) -> None:
        with pytest.raises(TypeError):
            format_value(42)  # type: ignore[arg-type]
