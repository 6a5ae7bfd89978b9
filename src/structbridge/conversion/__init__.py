"""
Conversion package

Recursive value conversion: the dispatcher, the record / sequence / mapping
strategies it recurses through, and the scalar coercions at the leaves.
No I/O happens here.

Public helpers
--------------
StructConverter
    Configurable façade exposing every operation as a method.
convert_structs(source, target, tag_name="")
    Populate an existing record in place from another record.
convert_value / convert_based_on_kind / convert_struct / convert_slice / convert_map
    Produce a new value of a target annotation, using the default converter.
"""

from .coercions import CoercionRegistry, default_coercions
from .context import ConversionContext
from .converter import (
    StructConverter,
    convert_based_on_kind,
    convert_map,
    convert_slice,
    convert_struct,
    convert_structs,
    convert_value,
    get_default_converter,
)
from .dispatcher import Dispatcher

__all__ = [
    "CoercionRegistry",
    "ConversionContext",
    "Dispatcher",
    "StructConverter",
    "convert_based_on_kind",
    "convert_map",
    "convert_slice",
    "convert_struct",
    "convert_structs",
    "convert_value",
    "default_coercions",
    "get_default_converter",
]
