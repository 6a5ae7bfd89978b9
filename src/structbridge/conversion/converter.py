"""StructConverter – high-level orchestration of record → record conversion."""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..config import ConverterSettings
from ..core.backend_registry import BackendRegistry, get_global_registry
from ..core.descriptors import FieldDescriptor, TypeDescriptor, describe
from ..core.protocols import RecordBackend
from ..exceptions import ConversionError, CyclicStructureError, InvalidArgumentError
from .coercions import CoercionRegistry, default_coercions
from .context import ConversionContext
from .dispatcher import Dispatcher

logger = logging.getLogger(__name__)


class StructConverter:
    """
    Converts values between independently declared record types.

    Bundles the settings, the record backends and the scalar coercions a
    conversion needs. Every public method starts a fresh per-call context,
    so one instance can be shared between threads.
    """

    def __init__(
        self,
        settings: ConverterSettings | None = None,
        *,
        backends: BackendRegistry | None = None,
        coercions: CoercionRegistry | None = None,
    ) -> None:
        """
        Parameters
        ----------
        settings
            Tunables; defaults to `ConverterSettings()`.
        backends
            Record backends; defaults to the global registry.
        coercions
            Scalar coercions; defaults to `default_coercions()`.
        """
        self._settings = settings if settings is not None else ConverterSettings()
        self._registry = backends if backends is not None else get_global_registry()
        self._coercions = coercions if coercions is not None else default_coercions()
        self._dispatcher = Dispatcher(self._registry, self._coercions)
        self._logger = logger.getChild(self.__class__.__name__)

    @property
    def settings(self) -> ConverterSettings:
        return self._settings

    @property
    def backends(self) -> BackendRegistry:
        return self._registry

    @property
    def coercions(self) -> CoercionRegistry:
        return self._coercions

    def describe(self, target_type: Any) -> TypeDescriptor:
        """Descriptor of *target_type* as seen by this converter."""
        return describe(target_type, self._registry)

    # ------------------------------------------------------------------ #
    # Value-level operations
    # ------------------------------------------------------------------ #

    def convert_value(self, source: Any, target_type: Any) -> Any:
        """Convert any value into a new value of *target_type*."""
        return self._run(self._dispatcher.convert_value, source, target_type)

    def convert_based_on_kind(self, source: Any, target_type: Any) -> Any:
        """Convert routing on the runtime kind of *source* only."""
        return self._run(self._dispatcher.convert_based_on_kind, source, target_type)

    def convert_struct(self, source: Any, target_type: Any) -> Any:
        """Convert a record into a new record of *target_type*."""
        return self._run(self._dispatcher.records.convert, source, target_type)

    def convert_slice(self, source: Any, target_type: Any) -> Any:
        """Convert a sequence into a new sequence of *target_type*."""
        return self._run(self._dispatcher.sequences.convert, source, target_type)

    def convert_map(self, source: Any, target_type: Any) -> Any:
        """Convert a mapping into a new mapping of *target_type*."""
        return self._run(self._dispatcher.mappings.convert, source, target_type)

    # ------------------------------------------------------------------ #
    # Record → existing record
    # ------------------------------------------------------------------ #

    def convert_structs(self, source: Any, target: Any, tag_name: str | None = None) -> None:
        """
        Populate the record *target* in place from the record *source*.

        Each public source field is matched to a target field: first by the
        value of its *tag_name* tag (when given and present), then by its own
        name. Unmatched fields are skipped, and so is an absent (``None``)
        source value whose target field is not nullable: the target keeps
        its current value. Matched values are converted and
        staged; *target* is only written once every field succeeded, so on
        failure it is left untouched.

        Parameters
        ----------
        source
            Populated record instance (dataclass, pydantic model, NamedTuple).
        target
            Mutable record instance to populate.
        tag_name
            Metadata tag holding the target field name; empty disables tag
            matching, None falls back to ``settings.default_tag_name``.

        Raises
        ------
        InvalidArgumentError
            If source/target are not record instances or target is immutable.
        ConversionError
            The first field conversion failure (path starts with the field).
        """
        source_backend = self._registry.backend_for(type(source))
        target_backend = self._registry.backend_for(type(target))
        if source_backend is None or target_backend is None:
            raise InvalidArgumentError(
                "source and target must both be record instances, got "
                f"{type(source).__name__} and {type(target).__name__}",
                source=source,
                target_type=type(target),
            )
        if not target_backend.is_mutable(type(target)):
            raise InvalidArgumentError(
                f"target {type(target).__name__} is immutable and cannot be "
                "populated in place",
                source=source,
                target_type=type(target),
            )

        if tag_name is None:
            tag_name = self._settings.default_tag_name

        target_desc = self.describe(type(target))
        try:
            staged = self._stage(source, source_backend, target_desc, tag_name)
        except RecursionError as exc:
            raise self._too_deep(source, type(target)) from exc

        target_backend.assign(target, staged)
        self._logger.debug(
            "Converted %s → %s: %d field(s) set",
            type(source).__name__,
            target_desc.name,
            len(staged),
        )

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _stage(
        self,
        source: Any,
        source_backend: RecordBackend,
        target_desc: TypeDescriptor,
        tag_name: str,
    ) -> dict[str, Any]:
        """Convert every matched field of *source*; nothing is written yet."""
        source_fields = self.describe(type(source)).fields
        ctx = self._new_context()
        staged: dict[str, Any] = {}

        with ctx.enter(source, target_desc):
            for field in source_fields.values():
                if not field.visible:
                    self._logger.debug("Skipping private field '%s'", field.name)
                    continue

                match = self._match_field(field, target_desc.fields, tag_name)
                if match is None:
                    self._logger.debug(
                        "No target field for '%s' on %s, skipping",
                        field.name,
                        target_desc.name,
                    )
                    continue

                value = source_backend.read(source, field.name)
                if value is None and not match.descriptor.is_nullable:
                    self._logger.debug(
                        "Absent value for '%s', keeping the target's current value",
                        field.name,
                    )
                    continue

                try:
                    staged[match.name] = self._dispatcher.convert_value(
                        value,
                        match.descriptor,
                        ctx,
                    )
                except ConversionError as exc:
                    exc.with_prefix(field.name)
                    raise
        return staged

    @staticmethod
    def _match_field(
        field: FieldDescriptor,
        target_fields: dict[str, FieldDescriptor],
        tag_name: str,
    ) -> FieldDescriptor | None:
        """Tag value first, identical name second; only assignable fields."""
        if tag_name:
            tag_value = field.tags.get(tag_name)
            if isinstance(tag_value, str) and tag_value:
                candidate = target_fields.get(tag_value)
                if candidate is not None and candidate.assignable:
                    return candidate

        candidate = target_fields.get(field.name)
        if candidate is not None and candidate.assignable:
            return candidate
        return None

    def _new_context(self) -> ConversionContext:
        return ConversionContext(settings=self._settings)

    def _run(
        self,
        operation: Callable[[Any, TypeDescriptor, ConversionContext], Any],
        source: Any,
        target_type: Any,
    ) -> Any:
        try:
            return operation(source, self.describe(target_type), self._new_context())
        except RecursionError as exc:
            raise self._too_deep(source, target_type) from exc

    def _too_deep(self, source: Any, target_type: Any) -> CyclicStructureError:
        # max_depth set above what the interpreter stack can hold
        return CyclicStructureError(
            "nesting exceeds the interpreter recursion limit "
            f"(max_depth={self._settings.max_depth} is too high)",
            source=source,
            target_type=target_type,
        )


# --------------------------------------------------------------------------- #
#                         Module-level convenience API                        #
# --------------------------------------------------------------------------- #

_default_converter: StructConverter | None = None


def get_default_converter() -> StructConverter:
    """Shared converter with default settings and the global backends."""
    global _default_converter
    if _default_converter is None:
        _default_converter = StructConverter()
    return _default_converter


def convert_structs(source: Any, target: Any, tag_name: str = "") -> None:
    """Populate *target* in place from *source*; see `StructConverter.convert_structs`."""
    get_default_converter().convert_structs(source, target, tag_name)


def convert_value(source: Any, target_type: Any) -> Any:
    return get_default_converter().convert_value(source, target_type)


def convert_based_on_kind(source: Any, target_type: Any) -> Any:
    return get_default_converter().convert_based_on_kind(source, target_type)


def convert_struct(source: Any, target_type: Any) -> Any:
    return get_default_converter().convert_struct(source, target_type)


def convert_slice(source: Any, target_type: Any) -> Any:
    return get_default_converter().convert_slice(source, target_type)


def convert_map(source: Any, target_type: Any) -> Any:
    return get_default_converter().convert_map(source, target_type)
