"""
Package façade – a single import gives users everything they need:

    from structbridge import convert_structs

    convert_structs(api_payload, domain_model, tag_name="model")

Design
------
* Thin re-export of the conversion package (keeps public API tiny).
* Advanced callers build their own `StructConverter` with non-default
  settings, record backends or coercions.
"""

from __future__ import annotations

from .config import ConverterSettings
from .conversion import (
    CoercionRegistry,
    StructConverter,
    convert_based_on_kind,
    convert_map,
    convert_slice,
    convert_struct,
    convert_structs,
    convert_value,
    default_coercions,
)
from .core import BackendRegistry, TypeDescriptor, TypeKind, describe, zero_value
from .exceptions import (
    ConversionError,
    CyclicStructureError,
    InvalidArgumentError,
    ShapeMismatchError,
    UnsupportedConversionError,
)

__all__ = [
    "BackendRegistry",
    "CoercionRegistry",
    "ConversionError",
    "ConverterSettings",
    "CyclicStructureError",
    "InvalidArgumentError",
    "ShapeMismatchError",
    "StructConverter",
    "TypeDescriptor",
    "TypeKind",
    "UnsupportedConversionError",
    "convert_based_on_kind",
    "convert_map",
    "convert_slice",
    "convert_struct",
    "convert_structs",
    "convert_value",
    "default_coercions",
    "describe",
    "zero_value",
]
