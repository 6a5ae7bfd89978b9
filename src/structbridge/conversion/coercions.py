"""Scalar coercions.

A coercion is the single conversion step applied to a leaf value whose class
is not already an instance of the target class. The registry is queried in
order and the first matching coercion is used; when nothing matches, the
leaf is reported as an unsupported conversion.
"""

from __future__ import annotations

import logging
import numbers
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any, Iterator

from ..config import ConverterSettings
from ..core.protocols import Coercion

logger = logging.getLogger(__name__)

_TEXT = (str,)
_BINARY = (bytes, bytearray)


def _is_numeric(tp: type) -> bool:
    return issubclass(tp, (numbers.Number, Decimal)) and not issubclass(tp, bool)


class EnumToEnumCoercion:
    """Between two Enum classes, by member value."""

    def matches(self, source_tp: type, target_tp: type, settings: ConverterSettings) -> bool:
        return issubclass(source_tp, Enum) and issubclass(target_tp, Enum)

    def coerce(self, value: Any, target_tp: type, settings: ConverterSettings) -> Any:
        return target_tp(value.value)


class ValueToEnumCoercion:
    """Plain value into the Enum member carrying it."""

    def matches(self, source_tp: type, target_tp: type, settings: ConverterSettings) -> bool:
        return issubclass(target_tp, Enum) and not issubclass(source_tp, Enum)

    def coerce(self, value: Any, target_tp: type, settings: ConverterSettings) -> Any:
        return target_tp(value)


class EnumToValueCoercion:
    """Enum member into its value, when the value already fits the target."""

    def matches(self, source_tp: type, target_tp: type, settings: ConverterSettings) -> bool:
        return issubclass(source_tp, Enum) and not issubclass(target_tp, Enum)

    def coerce(self, value: Any, target_tp: type, settings: ConverterSettings) -> Any:
        inner = value.value
        if not isinstance(inner, target_tp):
            raise TypeError(
                f"{value!r} holds a {type(inner).__name__}, not a {target_tp.__name__}"
            )
        return inner


class NumericCoercion:
    """
    Between numeric classes (int, float, complex, Decimal, Fraction and
    their subclasses). Narrowing steps need ``settings.lossy_numeric``.
    ``bool`` is not numeric here.
    """

    def matches(self, source_tp: type, target_tp: type, settings: ConverterSettings) -> bool:
        return _is_numeric(source_tp) and _is_numeric(target_tp)

    def coerce(self, value: Any, target_tp: type, settings: ConverterSettings) -> Any:
        if issubclass(target_tp, numbers.Integral):
            if isinstance(value, numbers.Integral):
                return target_tp(value)
            self._require_lossy(value, target_tp, settings)
            return target_tp(self._real_part(value))

        if issubclass(target_tp, Decimal):
            if isinstance(value, Fraction):
                return target_tp(value.numerator) / target_tp(value.denominator)
            if isinstance(value, complex):
                self._require_lossy(value, target_tp, settings)
                value = value.real
            return target_tp(value)

        if issubclass(target_tp, numbers.Real):
            if isinstance(value, (complex, Decimal)):
                self._require_lossy(value, target_tp, settings)
            return target_tp(self._real_part(value))

        return target_tp(value)

    @staticmethod
    def _real_part(value: Any) -> Any:
        return value.real if isinstance(value, complex) else value

    @staticmethod
    def _require_lossy(value: Any, target_tp: type, settings: ConverterSettings) -> None:
        if not settings.lossy_numeric:
            raise ValueError(
                f"narrowing {type(value).__name__} to {target_tp.__name__} "
                "is disabled (lossy_numeric=False)"
            )


class SameBaseCoercion:
    """Between subclasses of the same text or binary builtin (``str`` → ``UserName``)."""

    def matches(self, source_tp: type, target_tp: type, settings: ConverterSettings) -> bool:
        return (issubclass(source_tp, _TEXT) and issubclass(target_tp, _TEXT)) or (
            issubclass(source_tp, _BINARY) and issubclass(target_tp, _BINARY)
        )

    def coerce(self, value: Any, target_tp: type, settings: ConverterSettings) -> Any:
        return target_tp(value)


class TextBytesCoercion:
    """``str`` ↔ ``bytes``/``bytearray`` through ``settings.encoding``."""

    def matches(self, source_tp: type, target_tp: type, settings: ConverterSettings) -> bool:
        if not settings.text_bytes:
            return False
        return (issubclass(source_tp, _TEXT) and issubclass(target_tp, _BINARY)) or (
            issubclass(source_tp, _BINARY) and issubclass(target_tp, _TEXT)
        )

    def coerce(self, value: Any, target_tp: type, settings: ConverterSettings) -> Any:
        if isinstance(value, str):
            return target_tp(value.encode(settings.encoding))
        return target_tp(bytes(value).decode(settings.encoding))


class CoercionRegistry:
    """
    Ordered sequence of coercions; `resolve` returns the first match.

    Attributes:
        _coercions: Coercions queried in order.
    """

    def __init__(self, *coercions: Coercion) -> None:
        self._coercions: list[Coercion] = list(coercions)
        self._logger = logger.getChild(self.__class__.__name__)

    def register(self, coercion: Coercion, *, first: bool = False) -> None:
        """Add a coercion, by default with the lowest priority."""
        if first:
            self._coercions.insert(0, coercion)
        else:
            self._coercions.append(coercion)
        self._logger.info(f"Registered coercion '{coercion.__class__.__name__}'")

    def resolve(
        self, source_tp: type, target_tp: type, settings: ConverterSettings
    ) -> Coercion | None:
        """
        Find a coercion for the given class pair.

        Returns:
            The first matching coercion, None otherwise.
        """
        return next(
            (c for c in self._coercions if c.matches(source_tp, target_tp, settings)),
            None,
        )

    def __iter__(self) -> Iterator[Coercion]:
        return iter(self._coercions)

    def __len__(self) -> int:
        return len(self._coercions)


def default_coercions() -> CoercionRegistry:
    """Registry holding the built-in coercions, most specific first."""
    return CoercionRegistry(
        EnumToEnumCoercion(),
        ValueToEnumCoercion(),
        EnumToValueCoercion(),
        NumericCoercion(),
        SameBaseCoercion(),
        TextBytesCoercion(),
    )
