"""
Backends package

One backend per family of record classes. Each one turns a class into a
field table and knows how to allocate and populate its instances.
"""

from .base_backend import BaseRecordBackend
from .dataclass_backend import DataclassBackend
from .namedtuple_backend import NamedTupleBackend
from .pydantic_backend import ALIAS_TAG, PydanticBackend

__all__ = [
    "ALIAS_TAG",
    "BaseRecordBackend",
    "DataclassBackend",
    "NamedTupleBackend",
    "PydanticBackend",
]
