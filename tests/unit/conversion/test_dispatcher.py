"""Unit tests for the Dispatcher (convert_value / convert_based_on_kind)."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Literal, Optional, Union

import pytest

from structbridge import (
    ConverterSettings,
    ShapeMismatchError,
    StructConverter,
    UnsupportedConversionError,
    convert_based_on_kind,
    convert_value,
)

# -------------------- Fakes / helpers --------------------


class Color(Enum):
    RED = "red"
    GREEN = "green"


class Shade(Enum):
    RED = "red"


class Int32(int):
    pass


class Int64(int):
    pass


class UserName(str):
    pass


@dataclass
class Address:
    street: str
    city: str


@dataclass
class AddressView:
    street: str = ""
    city: str = ""


# --------------------------- Tests ---------------------------


class TestAbsentSource:
    @pytest.mark.parametrize(
        "target_type, expected",
        [
            (int, 0),
            (float, 0.0),
            (str, ""),
            (bool, False),
            (list[int], []),
            (dict[str, int], {}),
            (Optional[int], None),
            (Any, None),
            (tuple[int, str], (0, "")),
        ],
    )
    def test_none_yields_zero_value(self, target_type: Any, expected: Any) -> None:
        assert convert_value(None, target_type) == expected

    def test_none_into_record_builds_zero_record(self) -> None:
        assert convert_value(None, Address) == Address("", "")

    def test_none_through_kind_routing(self) -> None:
        assert convert_based_on_kind(None, list[str]) == []


class TestScalarAssignment:
    def test_identical_type_returned_as_is(self) -> None:
        value = "same"
        assert convert_value(value, str) is value

    def test_any_target_passes_through(self) -> None:
        marker = object()
        assert convert_value(marker, Any) is marker
        assert convert_value(marker, object) is marker

    def test_numeric_widening(self) -> None:
        result = convert_value(5, float)
        assert result == 5.0
        assert isinstance(result, float)

    def test_int_subclass_coercion(self) -> None:
        result = convert_value(Int32(7), Int64)
        assert result == 7
        assert type(result) is Int64

    def test_float_truncated_into_int(self) -> None:
        assert convert_value(3.9, int) == 3

    def test_decimal_into_float(self) -> None:
        assert convert_value(Decimal("1.5"), float) == 1.5

    def test_narrowing_rejected_when_not_lossy(self) -> None:
        strict = StructConverter(ConverterSettings(lossy_numeric=False))
        with pytest.raises(UnsupportedConversionError, match="lossy_numeric"):
            strict.convert_value(3.9, int)
        assert strict.convert_value(3, float) == 3.0

    def test_text_subclass(self) -> None:
        result = convert_value("ada", UserName)
        assert type(result) is UserName

    def test_text_to_bytes_and_back(self) -> None:
        assert convert_value("héllo", bytes) == "héllo".encode("utf-8")
        assert convert_value(b"abc", str) == "abc"

    def test_undecodable_bytes_reported(self) -> None:
        with pytest.raises(UnsupportedConversionError):
            convert_value(b"\xff\xfe", str)

    def test_text_bytes_can_be_disabled(self) -> None:
        converter = StructConverter(ConverterSettings(text_bytes=False))
        with pytest.raises(UnsupportedConversionError):
            converter.convert_value("abc", bytes)

    def test_value_into_enum(self) -> None:
        assert convert_value("red", Color) is Color.RED

    def test_unknown_enum_value_reported(self) -> None:
        with pytest.raises(UnsupportedConversionError, match="cannot coerce"):
            convert_value("blue", Color)

    def test_enum_into_value_and_other_enum(self) -> None:
        assert convert_value(Color.GREEN, str) == "green"
        assert convert_value(Color.RED, Shade) is Shade.RED

    def test_literal_target_checks_class_only(self) -> None:
        assert convert_value("b", Literal["a", "b"]) == "b"

    def test_unrelated_scalars_rejected(self) -> None:
        with pytest.raises(UnsupportedConversionError) as exc_info:
            convert_value("abc", int)
        assert "cannot convert str" in str(exc_info.value)
        assert exc_info.value.source == "abc"
        assert exc_info.value.target_type is int

    def test_scalar_into_composite_target_rejected(self) -> None:
        with pytest.raises(UnsupportedConversionError, match="sequence type"):
            convert_value("abc", list[str])


class TestIndirection:
    def test_optional_target_converts_pointee(self) -> None:
        assert convert_value(3, Optional[float]) == 3.0

    def test_optional_record_target_wraps_fresh_copy(self) -> None:
        src = Address("Elm", "City")
        result = convert_value(src, Optional[AddressView])
        assert result == AddressView("Elm", "City")

    def test_optional_union_pointee(self) -> None:
        assert convert_value("x", Optional[Union[int, str]]) == "x"


class TestUnion:
    def test_exact_member_wins(self) -> None:
        assert convert_value("5", Union[int, str]) == "5"
        assert convert_value(5, Union[float, int]) == 5
        assert type(convert_value(5, Union[float, int])) is int

    def test_declaration_order_without_exact_member(self) -> None:
        result = convert_value(3, Union[float, str])
        assert result == 3.0
        assert isinstance(result, float)

    def test_falls_through_rejecting_members(self) -> None:
        result = convert_value(Address("a", "b"), Union[int, AddressView])
        assert result == AddressView("a", "b")

    def test_failing_exact_member_falls_back(self) -> None:
        assert convert_value(["a"], Union[list[int], list[str]]) == ["a"]

    def test_same_container_members_tried_in_order(self) -> None:
        result = convert_value([2], Union[list[float], list[int]])
        assert result == [2.0]
        assert type(result[0]) is float

    def test_no_member_accepts(self) -> None:
        with pytest.raises(UnsupportedConversionError, match="no member"):
            convert_value([1], Union[int, str])


class TestKindRouting:
    def test_record_into_scalar_is_shape_mismatch(self) -> None:
        with pytest.raises(ShapeMismatchError):
            convert_value(Address("a", "b"), int)

    def test_sequence_into_mapping_is_shape_mismatch(self) -> None:
        with pytest.raises(ShapeMismatchError):
            convert_value([1, 2], dict[str, int])

    def test_mapping_into_record_is_shape_mismatch(self) -> None:
        with pytest.raises(ShapeMismatchError):
            convert_value({"street": "a", "city": "b"}, AddressView)

    def test_based_on_kind_routes_scalars(self) -> None:
        assert convert_based_on_kind(2, float) == 2.0

    def test_based_on_kind_routes_records(self) -> None:
        assert convert_based_on_kind(Address("a", "b"), AddressView) == AddressView("a", "b")

    def test_based_on_kind_resolves_union_target(self) -> None:
        result = convert_based_on_kind(Address("a", "b"), Union[int, AddressView])
        assert result == AddressView("a", "b")

    def test_based_on_kind_any_target_passes_through(self) -> None:
        src = [1, 2]
        assert convert_based_on_kind(src, Any) is src

    def test_based_on_kind_optional_target(self) -> None:
        assert convert_based_on_kind([1], Optional[list[float]]) == [1.0]
