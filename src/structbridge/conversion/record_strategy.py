"""Record → record conversion, field by field."""

from __future__ import annotations

from typing import Any

from ..core.descriptors import TypeDescriptor, TypeKind, describe, zero_value
from ..exceptions import ShapeMismatchError
from .base_strategy import BaseStrategy
from .context import ConversionContext


class RecordStrategy(BaseStrategy):
    """
    Converts one record into a freshly built record of another class.

    Fields are matched by identical name. Private source fields (leading
    underscore) and source fields without a settable counterpart on the
    target are skipped: the target may model a subset of the source. Target
    fields nobody filled keep their declared default, or get the zero value
    of their type when they have none.

    Fails fast: the first field that cannot be converted aborts the record.
    """

    target_kind = TypeKind.RECORD

    def convert(
        self, source: Any, target: TypeDescriptor, ctx: ConversionContext
    ) -> Any:
        target = self._unwrap(target)

        source_backend = self.registry.backend_for(type(source))
        if source_backend is None:
            raise ShapeMismatchError(
                f"{type(source).__name__} is not a record",
                source=source,
                target_type=target.annotation,
            )
        self._require_kind(source, target)

        source_fields = describe(type(source), self.registry).fields
        target_fields = target.fields
        values: dict[str, Any] = {}

        with ctx.enter(source, target):
            for field in source_fields.values():
                if not field.visible:
                    self.logger.debug("Skipping private field '%s'", field.name)
                    continue

                match = target_fields.get(field.name)
                if match is None or not match.settable:
                    self.logger.debug(
                        "No settable field '%s' on %s, skipping",
                        field.name,
                        target.name,
                    )
                    continue

                values[match.name] = self._convert_child(
                    source_backend.read(source, field.name),
                    match.descriptor,
                    ctx,
                    field.name,
                )

        return self._build(target, values)

    def _build(self, target: TypeDescriptor, values: dict[str, Any]) -> Any:
        for field in target.fields.values():
            if field.name not in values and field.init and not field.has_default:
                values[field.name] = zero_value(
                    field.descriptor, seen=frozenset({target.origin})
                )
        return target.backend.instantiate(target.origin, values, target.fields)
