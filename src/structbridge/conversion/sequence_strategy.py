"""Sequence → sequence conversion, element by element."""

from __future__ import annotations

import itertools
from typing import Any

from ..core.descriptors import TypeDescriptor, TypeKind
from ..exceptions import ShapeMismatchError
from .base_strategy import BaseStrategy, is_sequence_value
from .context import ConversionContext


class SequenceStrategy(BaseStrategy):
    """
    Converts every element against the target element type, keeping order
    and length. ``tuple[A, B]`` targets convert element ``i`` against member
    ``i`` and require a source of the same length.
    """

    target_kind = TypeKind.SEQUENCE

    def convert(
        self, source: Any, target: TypeDescriptor, ctx: ConversionContext
    ) -> Any:
        target = self._unwrap(target)
        self._require_kind(source, target)
        if not is_sequence_value(source):
            raise ShapeMismatchError(
                f"{type(source).__name__} is not a sequence",
                source=source,
                target_type=target.annotation,
            )

        items = list(source)
        if target.fixed_length:
            if len(items) != len(target.args):
                raise ShapeMismatchError(
                    f"{target.name} holds exactly {len(target.args)} "
                    f"element(s), source has {len(items)}",
                    source=source,
                    target_type=target.annotation,
                )
            element_types = target.children
        else:
            element_types = itertools.repeat(target.children[0])

        with ctx.enter(source, target):
            converted = [
                self._convert_child(item, element_type, ctx, index)
                for index, (item, element_type) in enumerate(
                    zip(items, element_types)
                )
            ]

        return self._build(source, target, converted)

    def _build(self, source: Any, target: TypeDescriptor, converted: list) -> Any:
        if target.origin is list:
            return converted
        try:
            return target.origin(converted)
        except TypeError as exc:
            # e.g. unhashable elements for a set target
            raise ShapeMismatchError(
                f"cannot build {target.name} from converted elements: {exc}",
                source=source,
                target_type=target.annotation,
            ) from exc
