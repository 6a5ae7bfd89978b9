"""
descriptors.py – runtime type descriptors
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

A `TypeDescriptor` is the converter's only view of a type: a tagged variant
over record / sequence / mapping / scalar / indirection / union / any,
built once per annotation by `describe()` and cached. Record descriptors
carry a field table (name → `FieldDescriptor`) computed lazily on first use,
which is what keeps self-referencing record types from recursing forever.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import types
import typing
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property, lru_cache
from typing import Any, Callable, Mapping

from .backend_registry import BackendRegistry, get_global_registry
from .protocols import RecordBackend

logger = logging.getLogger(__name__)

NoneType = type(None)

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TypeKind(str, Enum):
    """Shape of a type as seen by the dispatcher."""

    RECORD = "record"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    SCALAR = "scalar"
    INDIRECTION = "indirection"
    UNION = "union"
    ANY = "any"


# Abstract collection annotations and the concrete class built for them.
_ABSTRACT_SEQUENCES: dict[Any, type] = {
    cabc.Sequence: list,
    cabc.MutableSequence: list,
    cabc.Iterable: list,
    cabc.Collection: list,
    cabc.Set: set,
    cabc.MutableSet: set,
}
_ABSTRACT_MAPPINGS: dict[Any, type] = {
    cabc.Mapping: dict,
    cabc.MutableMapping: dict,
}
# Sequence-like builtins that are converted as leaves.
_TEXT_TYPES = (str, bytes, bytearray, memoryview)

_MISSING = object()

# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class FieldDescriptor:
    """One entry of a record's field table."""

    name: str
    index: int
    annotation: Any
    registry: BackendRegistry = field(repr=False)
    tags: Mapping[str, Any] = field(default_factory=dict)
    visible: bool = True
    settable: bool = True
    assignable: bool = True
    init: bool = True
    default: Any = field(default=_MISSING, repr=False)
    default_factory: Callable[[], Any] | None = field(default=None, repr=False)

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING or self.default_factory is not None

    @property
    def descriptor(self) -> "TypeDescriptor":
        return describe(self.annotation, self.registry)


@dataclass(frozen=True, eq=False)
class TypeDescriptor:
    """Cached description of one annotation."""

    annotation: Any
    kind: TypeKind
    origin: Any
    registry: BackendRegistry = field(repr=False)
    args: tuple[Any, ...] = ()
    fixed_length: bool = False
    backend: RecordBackend | None = field(default=None, repr=False)

    @property
    def children(self) -> tuple["TypeDescriptor", ...]:
        """Descriptors of `args` (element, key/value, members or pointee)."""
        return tuple(describe(arg, self.registry) for arg in self.args)

    @cached_property
    def fields(self) -> dict[str, FieldDescriptor]:
        """Field table of a record type (empty for every other kind)."""
        if self.backend is None:
            return {}
        table = self.backend.fields(self.origin, self.registry)
        logger.debug(
            "Built field table for %s: %s", self.name, ", ".join(table)
        )
        return table

    @property
    def name(self) -> str:
        if isinstance(self.annotation, type) and not isinstance(
            self.annotation, types.GenericAlias
        ):
            return self.annotation.__qualname__
        return repr(self.annotation)

    @property
    def is_nullable(self) -> bool:
        if self.kind in (TypeKind.INDIRECTION, TypeKind.ANY):
            return True
        return self.kind is TypeKind.UNION and any(
            arg is NoneType for arg in self.args
        )


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def describe(annotation: Any, registry: BackendRegistry | None = None) -> TypeDescriptor:
    """
    Return the (cached) descriptor of *annotation*.

    Parameters
    ----------
    annotation
        Any class or typing construct (``list[int]``, ``Optional[Foo]``, ...).
    registry
        Backend registry used to recognise record classes; defaults to the
        global registry with the built-in backends.
    """
    if registry is None:
        registry = get_global_registry()
    try:
        hash(annotation)
    except TypeError:
        # e.g. Annotated[...] carrying unhashable metadata
        return _build_descriptor(annotation, registry)
    return _describe_cached(annotation, registry, registry.version)


def zero_value(descriptor: TypeDescriptor, *, seen: frozenset = frozenset()) -> Any:
    """
    Return a fresh "empty" value of the described type.

    *seen* holds record classes already being zero-built further up; a
    record required to contain itself yields ``None`` instead of recursing.
    """
    kind = descriptor.kind
    if kind in (TypeKind.INDIRECTION, TypeKind.ANY):
        return None
    if kind is TypeKind.UNION:
        if descriptor.is_nullable:
            return None
        return zero_value(descriptor.children[0], seen=seen)
    if kind is TypeKind.SEQUENCE:
        if descriptor.fixed_length:
            return tuple(zero_value(child, seen=seen) for child in descriptor.children)
        return descriptor.origin()
    if kind is TypeKind.MAPPING:
        return descriptor.origin()
    if kind is TypeKind.RECORD:
        return _zero_record(descriptor, seen)
    return _zero_scalar(descriptor.origin)


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1024)
def _describe_cached(
    annotation: Any, registry: BackendRegistry, version: int
) -> TypeDescriptor:
    return _build_descriptor(annotation, registry)


def _build_descriptor(annotation: Any, registry: BackendRegistry) -> TypeDescriptor:
    def make(kind: TypeKind, origin: Any, args: tuple = (), **extra: Any) -> TypeDescriptor:
        return TypeDescriptor(
            annotation=annotation,
            kind=kind,
            origin=origin,
            registry=registry,
            args=args,
            **extra,
        )

    if annotation is Any or annotation is object or isinstance(annotation, typing.TypeVar):
        return make(TypeKind.ANY, object)
    if annotation is None or annotation is NoneType:
        return make(TypeKind.SCALAR, NoneType)

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin is typing.Annotated:
        inner = describe(args[0], registry)
        return make(
            inner.kind,
            inner.origin,
            inner.args,
            fixed_length=inner.fixed_length,
            backend=inner.backend,
        )

    if origin is typing.Union or origin is types.UnionType:
        members = tuple(arg for arg in args if arg is not NoneType)
        if len(members) == len(args):
            return make(TypeKind.UNION, object, args)
        pointee = members[0] if len(members) == 1 else typing.Union[members]
        return make(TypeKind.INDIRECTION, object, (pointee,))

    if origin is typing.Literal:
        # Literal values are checked against their own classes.
        literal_types = tuple(dict.fromkeys(type(v) for v in args))
        if len(literal_types) == 1:
            return make(TypeKind.SCALAR, literal_types[0])
        return make(TypeKind.UNION, object, literal_types)

    cls = origin if origin is not None else annotation
    if not isinstance(cls, type):
        logger.debug("Treating unsupported annotation %r as Any", annotation)
        return make(TypeKind.ANY, object)

    backend = registry.backend_for(cls)
    if backend is not None:
        return make(TypeKind.RECORD, cls, backend=backend)

    if issubclass(cls, _TEXT_TYPES):
        return make(TypeKind.SCALAR, cls)

    if cls in _ABSTRACT_MAPPINGS or issubclass(cls, cabc.Mapping):
        key_value = args if len(args) == 2 else (Any, Any)
        return make(TypeKind.MAPPING, _ABSTRACT_MAPPINGS.get(cls, cls), key_value)

    if issubclass(cls, tuple):
        if args == ((),) or (not args and origin is tuple and annotation is not typing.Tuple):
            # tuple[()]
            return make(TypeKind.SEQUENCE, tuple, (), fixed_length=True)
        if not args:
            return make(TypeKind.SEQUENCE, tuple, (Any,))
        if len(args) == 2 and args[1] is Ellipsis:
            return make(TypeKind.SEQUENCE, tuple, (args[0],))
        return make(TypeKind.SEQUENCE, tuple, args, fixed_length=True)

    if cls in _ABSTRACT_SEQUENCES or issubclass(cls, (cabc.Sequence, cabc.Set)):
        element = args[:1] or (Any,)
        return make(TypeKind.SEQUENCE, _ABSTRACT_SEQUENCES.get(cls, cls), element)

    return make(TypeKind.SCALAR, cls)


def _zero_record(descriptor: TypeDescriptor, seen: frozenset) -> Any:
    origin = descriptor.origin
    if origin in seen:
        return None
    seen = seen | {origin}
    fields = descriptor.fields
    values = {
        f.name: zero_value(f.descriptor, seen=seen)
        for f in fields.values()
        if f.init and not f.has_default
    }
    return descriptor.backend.instantiate(origin, values, fields)


def _zero_scalar(cls: type) -> Any:
    if cls is NoneType:
        return None
    if issubclass(cls, Enum):
        return next(iter(cls), None)
    try:
        return cls()
    except (TypeError, ValueError):
        # No argument-free constructor (datetime, Path subclasses, ...).
        return None
