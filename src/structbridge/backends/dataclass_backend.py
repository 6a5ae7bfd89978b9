"""Records declared with ``@dataclasses.dataclass``."""

from __future__ import annotations

import dataclasses
from typing import Any, Mapping

from ..core.backend_registry import BackendRegistry
from ..core.descriptors import FieldDescriptor
from .base_backend import BaseRecordBackend


class DataclassBackend(BaseRecordBackend):
    """
    Field tables come from `dataclasses.fields()`; annotations are resolved
    with `typing.get_type_hints` so string annotations work. Tags are the
    entries of each field's ``metadata`` mapping.
    """

    name = "dataclass"

    def can_describe(self, tp: type) -> bool:
        return isinstance(tp, type) and dataclasses.is_dataclass(tp)

    def fields(
        self, tp: type, registry: BackendRegistry
    ) -> dict[str, FieldDescriptor]:
        hints = self._type_hints(tp)
        frozen = self._is_frozen(tp)

        table: dict[str, FieldDescriptor] = {}
        for index, f in enumerate(dataclasses.fields(tp)):
            table[f.name] = FieldDescriptor(
                name=f.name,
                index=index,
                annotation=hints.get(f.name, Any),
                registry=registry,
                tags=dict(f.metadata),
                visible=not f.name.startswith("_"),
                # init=False fields can only be set after construction
                settable=f.init or not frozen,
                assignable=not frozen,
                init=f.init,
                **self._defaults(f),
            )
        return table

    def instantiate(
        self,
        tp: type,
        values: Mapping[str, Any],
        fields: Mapping[str, FieldDescriptor],
    ) -> Any:
        init_values = {k: v for k, v in values.items() if fields[k].init}
        record = tp(**init_values)
        for name, value in values.items():
            if not fields[name].init:
                setattr(record, name, value)
        return record

    def is_mutable(self, tp: type) -> bool:
        return not self._is_frozen(tp)

    @staticmethod
    def _is_frozen(tp: type) -> bool:
        return tp.__dataclass_params__.frozen

    @staticmethod
    def _defaults(f: dataclasses.Field) -> dict[str, Any]:
        if f.default is not dataclasses.MISSING:
            return {"default": f.default}
        if f.default_factory is not dataclasses.MISSING:
            return {"default_factory": f.default_factory}
        return {}
