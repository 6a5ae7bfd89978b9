from .backend_registry import BackendRegistry, get_global_registry
from .descriptors import FieldDescriptor, TypeDescriptor, TypeKind, describe, zero_value

__all__ = [
    "BackendRegistry",
    "FieldDescriptor",
    "TypeDescriptor",
    "TypeKind",
    "describe",
    "get_global_registry",
    "zero_value",
]
