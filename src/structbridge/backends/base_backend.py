"""Abstract base-class for all record backends."""

from __future__ import annotations

import logging
import typing
from abc import ABC, abstractmethod
from typing import Any, Mapping

from ..core.backend_registry import BackendRegistry
from ..core.descriptors import FieldDescriptor
from ..core.protocols import RecordBackend
from ..exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


class BaseRecordBackend(RecordBackend, ABC):
    """
    Base class for record backends.

    Provides the logic most record families share (reading attributes,
    publishing values into a live instance) and leaves the family-specific
    introspection to subclasses.

    Subclasses must implement:
    - can_describe(): recognise the record classes of the family
    - fields(): build the field table
    - instantiate(): allocate a new record from a complete set of values
    """

    name = "base"

    def __init__(self) -> None:
        self._logger = logger.getChild(self.__class__.__name__)

    @abstractmethod
    def can_describe(self, tp: type) -> bool: ...

    @abstractmethod
    def fields(
        self, tp: type, registry: BackendRegistry
    ) -> dict[str, FieldDescriptor]: ...

    @abstractmethod
    def instantiate(
        self,
        tp: type,
        values: Mapping[str, Any],
        fields: Mapping[str, FieldDescriptor],
    ) -> Any: ...

    # --- Common logic ---

    def read(self, value: Any, field_name: str) -> Any:
        return getattr(value, field_name, None)

    def is_mutable(self, tp: type) -> bool:
        return True

    def assign(self, target: Any, values: Mapping[str, Any]) -> None:
        for name, value in values.items():
            setattr(target, name, value)

    def _type_hints(self, tp: type) -> dict[str, Any]:
        """
        Resolved field annotations of *tp*.

        Raises:
            InvalidArgumentError: If a string annotation names something
                that is not importable from the class's module
        """
        try:
            return typing.get_type_hints(tp, include_extras=True)
        except NameError as exc:
            raise InvalidArgumentError(
                f"cannot resolve the field annotations of {tp.__qualname__}: {exc}",
                target_type=tp,
            ) from exc
