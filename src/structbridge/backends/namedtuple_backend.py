"""Records declared as ``typing.NamedTuple`` (or ``collections.namedtuple``)."""

from __future__ import annotations

from typing import Any, Mapping

from ..core.backend_registry import BackendRegistry
from ..core.descriptors import FieldDescriptor
from .base_backend import BaseRecordBackend


class NamedTupleBackend(BaseRecordBackend):
    """Immutable records: buildable, never assignable in place. No tags."""

    name = "namedtuple"

    def can_describe(self, tp: type) -> bool:
        return (
            isinstance(tp, type)
            and issubclass(tp, tuple)
            and isinstance(getattr(tp, "_fields", None), tuple)
        )

    def fields(
        self, tp: type, registry: BackendRegistry
    ) -> dict[str, FieldDescriptor]:
        hints = self._type_hints(tp)
        defaults = getattr(tp, "_field_defaults", {})

        table: dict[str, FieldDescriptor] = {}
        for index, name in enumerate(tp._fields):
            extra = {"default": defaults[name]} if name in defaults else {}
            table[name] = FieldDescriptor(
                name=name,
                index=index,
                annotation=hints.get(name, Any),
                registry=registry,
                visible=not name.startswith("_"),
                settable=True,
                assignable=False,
                init=True,
                **extra,
            )
        return table

    def instantiate(
        self,
        tp: type,
        values: Mapping[str, Any],
        fields: Mapping[str, FieldDescriptor],
    ) -> Any:
        return tp(**values)

    def is_mutable(self, tp: type) -> bool:
        return False

    def assign(self, target: Any, values: Mapping[str, Any]) -> None:
        raise TypeError(f"{type(target).__name__} instances are immutable")
