"""
exceptions.py

Custom, typed exception hierarchy used across the struct → struct converter
"""

from __future__ import annotations

import types
from typing import Any

# --------------------------------------------------------------------------- #
#                              Base hierarchy                                 #
# --------------------------------------------------------------------------- #


class ConversionError(Exception):
    """
    Root of all conversion errors raised by this project.

    Attributes
    ----------
    message
        Human-readable description of the failure.
    source
        The value that failed to convert (if known).
    target_type
        The annotation we attempted to convert to (if known).
    path
        Field names, sequence indices and mapping keys leading from the
        top-level value down to the failure point.
    """

    def __init__(
        self,
        message: str,
        *,
        source: Any = None,
        target_type: Any = None,
        path: tuple[Any, ...] = (),
    ) -> None:
        self.message = message
        self.source = source
        self.target_type = target_type
        self.path = path
        super().__init__(message)

    def with_prefix(self, step: Any) -> "ConversionError":
        """Prepend *step* to the error path (used while unwinding)."""
        self.path = (step, *self.path)
        return self

    def __str__(self) -> str:
        if not self.path:
            return self.message
        location = "".join(
            f"[{step!r}]" if not isinstance(step, str) else f".{step}"
            for step in self.path
        ).lstrip(".")
        return f"{location}: {self.message}"


class ShapeMismatchError(ConversionError):
    """
    Raised when the target type's kind cannot receive the source's kind.

    Examples
    --------
    * A list source converted into a ``dict[str, int]`` target
    * A dataclass source converted into an ``int`` target
    * A 3-element list converted into a ``tuple[int, int]`` target
    """


class UnsupportedConversionError(ConversionError):
    """
    Raised for a scalar source/target pair that is neither assignable nor
    covered by a registered coercion.
    """

    def __init__(
        self,
        source: Any,
        target_type: Any,
        message: str | None = None,
        *,
        path: tuple[Any, ...] = (),
    ) -> None:
        if message is None:
            message = (
                f"cannot convert {type(source).__name__} "
                f"(value: {source!r}) to {_type_name(target_type)}"
            )
        super().__init__(message, source=source, target_type=target_type, path=path)


class InvalidArgumentError(ConversionError):
    """
    Raised by the entry point when ``source``/``target`` are not record
    instances, or when ``target`` cannot be mutated in place.
    """


class CyclicStructureError(ConversionError):
    """
    Raised when a source object is re-entered while it is still being
    converted to the same target type, or when the configured maximum
    nesting depth is exceeded.
    """


def _type_name(tp: Any) -> str:
    if isinstance(tp, type) and not isinstance(tp, types.GenericAlias):
        return tp.__name__
    return repr(tp)
