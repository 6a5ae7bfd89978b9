"""Records declared as pydantic (v2) models."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..core.backend_registry import BackendRegistry
from ..core.descriptors import FieldDescriptor
from .base_backend import BaseRecordBackend

#: Pseudo-tag exposing a field's pydantic alias to tag-based matching.
ALIAS_TAG = "alias"


class PydanticBackend(BaseRecordBackend):
    """
    Field tables come from ``model_fields``. Tags are the entries of
    ``Field(json_schema_extra={...})`` plus the field alias under ``"alias"``.

    New records are built with ``model_construct``: values reaching this
    backend were already converted to the declared field types, and the
    converter is not a schema validator.
    """

    name = "pydantic"

    def can_describe(self, tp: type) -> bool:
        return isinstance(tp, type) and issubclass(tp, BaseModel) and tp is not BaseModel

    def fields(
        self, tp: type, registry: BackendRegistry
    ) -> dict[str, FieldDescriptor]:
        model_frozen = self._is_frozen(tp)

        table: dict[str, FieldDescriptor] = {}
        for index, (name, info) in enumerate(tp.model_fields.items()):
            table[name] = FieldDescriptor(
                name=name,
                index=index,
                annotation=info.annotation if info.annotation is not None else Any,
                registry=registry,
                tags=self._tags(info),
                visible=not name.startswith("_"),
                settable=True,
                assignable=not (model_frozen or info.frozen),
                init=True,
                **self._defaults(info),
            )
        return table

    def instantiate(
        self,
        tp: type,
        values: Mapping[str, Any],
        fields: Mapping[str, FieldDescriptor],
    ) -> Any:
        model_fields = tp.model_fields
        # model_construct always honours aliases, names only without one
        by_key = {
            (model_fields[name].alias or name): value
            for name, value in values.items()
        }
        return tp.model_construct(**by_key)

    def is_mutable(self, tp: type) -> bool:
        return not self._is_frozen(tp)

    @staticmethod
    def _is_frozen(tp: type) -> bool:
        return bool(tp.model_config.get("frozen", False))

    @staticmethod
    def _tags(info: FieldInfo) -> dict[str, Any]:
        extra = info.json_schema_extra
        tags = dict(extra) if isinstance(extra, dict) else {}
        if info.alias:
            tags.setdefault(ALIAS_TAG, info.alias)
        return tags

    @staticmethod
    def _defaults(info: FieldInfo) -> dict[str, Any]:
        if info.is_required():
            return {}
        if info.default_factory is not None:
            if getattr(info, "default_factory_takes_data", False):
                # Factory needs the validated sibling data; zero-fill instead.
                return {}
            return {"default_factory": info.default_factory}
        return {"default": info.default}
