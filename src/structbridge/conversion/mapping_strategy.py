"""Mapping → mapping conversion, key by key and value by value."""

from __future__ import annotations

import collections.abc as cabc
from typing import Any

from ..core.descriptors import TypeDescriptor, TypeKind
from ..exceptions import ShapeMismatchError
from .base_strategy import BaseStrategy
from .context import ConversionContext


class MappingStrategy(BaseStrategy):
    """
    Converts each key against the target key type and each value against
    the target value type.

    Entries are processed in the source's own iteration order (insertion
    order for ``dict``). When two source keys convert to the same target
    key, the entry processed last wins.
    """

    target_kind = TypeKind.MAPPING

    def convert(
        self, source: Any, target: TypeDescriptor, ctx: ConversionContext
    ) -> Any:
        target = self._unwrap(target)
        self._require_kind(source, target)
        if not isinstance(source, cabc.Mapping):
            raise ShapeMismatchError(
                f"{type(source).__name__} is not a mapping",
                source=source,
                target_type=target.annotation,
            )

        key_type, value_type = target.children
        converted: dict[Any, Any] = {}

        with ctx.enter(source, target):
            for key, value in source.items():
                new_key = self._convert_child(key, key_type, ctx, key)
                new_value = self._convert_child(value, value_type, ctx, key)
                try:
                    if new_key in converted:
                        self.logger.debug(
                            "Key %r collides on %r in %s, keeping the later entry",
                            key,
                            new_key,
                            target.name,
                        )
                    converted[new_key] = new_value
                except TypeError as exc:
                    raise ShapeMismatchError(
                        f"converted key {new_key!r} cannot key {target.name}: {exc}",
                        source=source,
                        target_type=target.annotation,
                    ).with_prefix(key) from exc

        if target.origin is dict:
            return converted
        # update() rather than the constructor: defaultdict takes a factory first
        result = target.origin()
        result.update(converted)
        return result
