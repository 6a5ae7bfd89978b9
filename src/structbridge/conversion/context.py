"""Per-call conversion state."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

from ..config import ConverterSettings
from ..core.descriptors import TypeDescriptor
from ..exceptions import CyclicStructureError


@dataclass
class ConversionContext:
    """
    State owned by one top-level conversion call.

    Tracks the current nesting depth and the composite source objects that
    are still being converted (the active path), so that a value reachable
    from itself fails with `CyclicStructureError` instead of exhausting the
    interpreter stack.
    """

    settings: ConverterSettings
    depth: int = 0
    _active: set[tuple[int, int]] = field(default_factory=set, repr=False)

    @contextmanager
    def enter(self, source: Any, target: TypeDescriptor) -> Iterator[None]:
        """Guard one composite conversion step of *source* into *target*."""
        if self.depth >= self.settings.max_depth:
            raise CyclicStructureError(
                f"maximum nesting depth {self.settings.max_depth} exceeded",
                source=source,
                target_type=target.annotation,
            )
        key = (id(source), id(target))
        if key in self._active:
            raise CyclicStructureError(
                f"{type(source).__name__} object refers back to itself "
                f"while converting to {target.name}",
                source=source,
                target_type=target.annotation,
            )

        self._active.add(key)
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1
            self._active.discard(key)
