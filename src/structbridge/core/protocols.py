from typing import TYPE_CHECKING, Any, Mapping, Protocol

if TYPE_CHECKING:
    from ..config import ConverterSettings
    from .backend_registry import BackendRegistry
    from .descriptors import FieldDescriptor


class RecordBackend(Protocol):
    """Defines the contract for introspecting and building one family of records."""

    name: str

    def can_describe(self, tp: type) -> bool:
        """
        Checks whether this backend understands the given class.

        Args:
            tp: A class object (never an instance)

        Returns:
            True if instances of *tp* are records handled by this backend.
        """
        ...

    def fields(
        self, tp: type, registry: "BackendRegistry"
    ) -> dict[str, "FieldDescriptor"]:
        """
        Builds the field table of *tp*, keyed by field name, in declaration order.

        Args:
            tp: Record class accepted by `can_describe`
            registry: Registry used to resolve the fields' own types lazily
        """
        ...

    def read(self, value: Any, field_name: str) -> Any:
        """Returns the current value of a field (None when unset)."""
        ...

    def instantiate(
        self,
        tp: type,
        values: Mapping[str, Any],
        fields: Mapping[str, "FieldDescriptor"],
    ) -> Any:
        """
        Allocates a new record of *tp* holding exactly *values*.

        Fields missing from *values* must fall back to their declared default.
        """
        ...

    def is_mutable(self, tp: type) -> bool:
        """Whether existing instances of *tp* accept field assignment."""
        ...

    def assign(self, target: Any, values: Mapping[str, Any]) -> None:
        """Publishes *values* into an existing, mutable record instance."""
        ...


class Coercion(Protocol):
    """Defines the contract for a single scalar-to-scalar coercion step."""

    def matches(
        self, source_tp: type, target_tp: type, settings: "ConverterSettings"
    ) -> bool:
        """
        Checks whether this coercion can convert *source_tp* into *target_tp*.

        Args:
            source_tp: Runtime class of the source value
            target_tp: Concrete target class
            settings: Active converter settings (some coercions are opt-in)
        """
        ...

    def coerce(
        self, value: Any, target_tp: type, settings: "ConverterSettings"
    ) -> Any:
        """
        Converts *value* into an instance of *target_tp*.

        Raises:
            ValueError / TypeError: when this particular value cannot be
                represented in the target type.
        """
        ...
