"""Abstract base class for the composite conversion strategies."""

from __future__ import annotations

import collections.abc as cabc
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..core.backend_registry import BackendRegistry
from ..core.descriptors import TypeDescriptor, TypeKind
from ..exceptions import ConversionError, ShapeMismatchError
from .context import ConversionContext

if TYPE_CHECKING:
    from .dispatcher import Dispatcher

logger = logging.getLogger(__name__)

_LEAF_SEQUENCES = (str, bytes, bytearray, memoryview)


def is_sequence_value(value: Any) -> bool:
    """Ordered or set-like collection that is not text/binary data."""
    return isinstance(value, (cabc.Sequence, cabc.Set)) and not isinstance(
        value, _LEAF_SEQUENCES
    )


class BaseStrategy(ABC):
    """
    Abstract base class for converting one composite source value.

    Each concrete strategy handles one source shape (record, sequence,
    mapping) and requires a matching target kind. Nested values are handed
    back to the dispatcher, which is how strategies recurse into each other.
    """

    #: Kind the target descriptor must have once an Optional is stripped.
    target_kind: TypeKind

    def __init__(self, dispatcher: "Dispatcher") -> None:
        self._dispatcher = dispatcher
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def registry(self) -> BackendRegistry:
        return self._dispatcher.registry

    # --------------------------------------------------------------------- #
    # Abstract interface
    # --------------------------------------------------------------------- #

    @abstractmethod
    def convert(
        self, source: Any, target: TypeDescriptor, ctx: ConversionContext
    ) -> Any:
        """
        Produce a new value of *target* from *source*.

        Raises:
            ShapeMismatchError: If *target* cannot receive this source shape
            ConversionError: Propagated from the first failing child value
        """

    # --------------------------------------------------------------------- #
    # Shared utility methods
    # --------------------------------------------------------------------- #

    def _unwrap(self, target: TypeDescriptor) -> TypeDescriptor:
        """Strip one Optional wrapper from the target, if present."""
        if target.kind is TypeKind.INDIRECTION:
            return target.children[0]
        return target

    def _require_kind(self, source: Any, target: TypeDescriptor) -> None:
        if target.kind is not self.target_kind:
            raise ShapeMismatchError(
                f"cannot convert {type(source).__name__} into {target.name}: "
                f"target is a {target.kind.value}, expected a "
                f"{self.target_kind.value}",
                source=source,
                target_type=target.annotation,
            )

    def _convert_child(
        self,
        value: Any,
        target: TypeDescriptor,
        ctx: ConversionContext,
        step: Any,
    ) -> Any:
        """Convert a nested value, recording *step* in the error path."""
        try:
            return self._dispatcher.convert_value(value, target, ctx)
        except ConversionError as exc:
            exc.with_prefix(step)
            raise
