"""Routes a source value to the strategy (or scalar path) that converts it."""

from __future__ import annotations

import collections.abc as cabc
import logging
from typing import Any

from ..core.backend_registry import BackendRegistry
from ..core.descriptors import TypeDescriptor, TypeKind, zero_value
from ..exceptions import ShapeMismatchError, UnsupportedConversionError
from .base_strategy import is_sequence_value
from .coercions import CoercionRegistry
from .context import ConversionContext
from .mapping_strategy import MappingStrategy
from .record_strategy import RecordStrategy
from .sequence_strategy import SequenceStrategy

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Entry point of the recursive conversion.

    `convert_value` resolves the target side first (absent source, Optional
    wrapper, ``Any``, unions), then `convert_based_on_kind` branches on the
    runtime kind of the source: records, sequences and mappings go to their
    strategy, everything else to `assign_scalar`.
    """

    def __init__(self, registry: BackendRegistry, coercions: CoercionRegistry) -> None:
        self.registry = registry
        self.coercions = coercions
        self.records = RecordStrategy(self)
        self.sequences = SequenceStrategy(self)
        self.mappings = MappingStrategy(self)
        self._logger = logger.getChild(self.__class__.__name__)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def convert_value(
        self, source: Any, target: TypeDescriptor, ctx: ConversionContext
    ) -> Any:
        """
        Convert *source* into a new value of *target*.

        ``None`` is the absent value and yields the target's zero value.
        An Optional target converts against its inner type; the fresh
        result is the wrapped value.
        """
        if source is None:
            return zero_value(target)

        kind = target.kind
        if kind is TypeKind.ANY:
            return source
        if kind is TypeKind.INDIRECTION:
            return self.convert_value(source, target.children[0], ctx)
        if kind is TypeKind.UNION:
            return self._convert_union(source, target, ctx)
        return self.convert_based_on_kind(source, target, ctx)

    def convert_based_on_kind(
        self, source: Any, target: TypeDescriptor, ctx: ConversionContext
    ) -> Any:
        """Pick the strategy from the runtime kind of *source*."""
        if source is None:
            return zero_value(target)
        if target.kind in (TypeKind.ANY, TypeKind.INDIRECTION, TypeKind.UNION):
            # resolved on the target side first
            return self.convert_value(source, target, ctx)

        if self.registry.is_record(source):
            self._logger.debug("Record %s → %s", type(source).__name__, target.name)
            return self.records.convert(source, target, ctx)
        if is_sequence_value(source):
            self._logger.debug("Sequence %s → %s", type(source).__name__, target.name)
            return self.sequences.convert(source, target, ctx)
        if isinstance(source, cabc.Mapping):
            self._logger.debug("Mapping %s → %s", type(source).__name__, target.name)
            return self.mappings.convert(source, target, ctx)
        return self.assign_scalar(source, target, ctx)

    def assign_scalar(
        self, source: Any, target: TypeDescriptor, ctx: ConversionContext
    ) -> Any:
        """
        Direct assignment when *source* already is an instance of the target
        class, otherwise one registered coercion step.

        Raises:
            UnsupportedConversionError: If neither applies, or the coercion
                rejects this particular value
        """
        if target.kind in (TypeKind.ANY, TypeKind.INDIRECTION, TypeKind.UNION):
            return self.convert_value(source, target, ctx)

        if target.kind is not TypeKind.SCALAR:
            raise UnsupportedConversionError(
                source,
                target.annotation,
                f"cannot convert {type(source).__name__} (value: {source!r}) "
                f"into {target.kind.value} type {target.name}",
            )

        cls = target.origin
        if isinstance(source, cls):
            return source

        coercion = self.coercions.resolve(type(source), cls, ctx.settings)
        if coercion is None:
            raise UnsupportedConversionError(source, target.annotation)

        try:
            return coercion.coerce(source, cls, ctx.settings)
        except (TypeError, ValueError, ArithmeticError) as exc:
            raise UnsupportedConversionError(
                source,
                target.annotation,
                f"cannot coerce {source!r} to {target.name}: {exc}",
            ) from exc

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _convert_union(
        self, source: Any, target: TypeDescriptor, ctx: ConversionContext
    ) -> Any:
        members = target.children
        # Members of exactly the source's class go first, then declaration order.
        exact = [m for m in members if m.origin is type(source)]
        ordered = exact + [m for m in members if m.origin is not type(source)]

        for member in ordered:
            try:
                return self.convert_value(source, member, ctx)
            except (ShapeMismatchError, UnsupportedConversionError) as exc:
                self._logger.debug("Union member %s rejected: %s", member.name, exc)

        raise UnsupportedConversionError(
            source,
            target.annotation,
            f"no member of {target.name} accepts "
            f"{type(source).__name__} (value: {source!r})",
        )
