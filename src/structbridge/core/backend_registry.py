"""Backend registry for managing the record families the converter understands."""

import logging

from .protocols import RecordBackend

logger = logging.getLogger(__name__)


class BackendRegistry:
    """
    Ordered registry of record backends.

    Maps backend names to `RecordBackend` instances and answers "which
    backend owns this class?". Backends are queried in registration order,
    so a more specific backend must be registered before a more general one.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._backends: dict[str, RecordBackend] = {}
        self._lookup_cache: dict[type, RecordBackend | None] = {}
        self._version = 0
        self._logger = logger.getChild(self.__class__.__name__)

    @property
    def version(self) -> int:
        """Bumped on every change; part of the descriptor cache key."""
        return self._version

    def register_backend(self, name: str, backend: RecordBackend) -> None:
        """
        Register a record backend under a name.

        Args:
            name: Identifier of the backend (e.g., 'dataclass', 'pydantic')
            backend: The backend instance to register

        Raises:
            ValueError: If name is empty or backend is None
        """
        if not name or not name.strip():
            raise ValueError("Backend name cannot be empty")

        if backend is None:
            raise ValueError("Backend cannot be None")

        name = name.strip().lower()

        if name in self._backends:
            self._logger.warning(
                f"Overwriting existing backend registration for '{name}'"
            )

        self._backends[name] = backend
        self._invalidate()
        self._logger.info(
            f"Registered backend '{backend.__class__.__name__}' as '{name}'"
        )

    def unregister_backend(self, name: str) -> None:
        """
        Remove a backend by name.

        Raises:
            ValueError: If the backend is not registered
        """
        name = (name or "").strip().lower()
        if name not in self._backends:
            raise ValueError(f"Unknown backend '{name}'")
        del self._backends[name]
        self._invalidate()
        self._logger.info(f"Unregistered backend '{name}'")

    def backend_for(self, tp: type) -> RecordBackend | None:
        """
        Find the backend that owns a record class.

        Args:
            tp: The class to look up (not an instance)

        Returns:
            The first registered backend accepting *tp*, or None when *tp*
            is not a record type
        """
        if not isinstance(tp, type):
            return None
        try:
            return self._lookup_cache[tp]
        except KeyError:
            pass

        found = next(
            (b for b in self._backends.values() if b.can_describe(tp)), None
        )
        self._lookup_cache[tp] = found
        return found

    def is_record(self, value: object) -> bool:
        """Whether *value* is an instance of a record class."""
        return self.backend_for(type(value)) is not None

    def get_available_names(self) -> list[str]:
        """Registered backend names, in query order."""
        return list(self._backends)

    def clear(self) -> None:
        """Clear all registered backends."""
        self._backends.clear()
        self._invalidate()
        self._logger.info("Cleared all backend registrations")

    def _invalidate(self) -> None:
        self._lookup_cache.clear()
        self._version += 1

    def __len__(self) -> int:
        """Return the number of registered backends."""
        return len(self._backends)

    def __contains__(self, name: str) -> bool:
        """Check if a backend name is registered (supports 'in' operator)."""
        return bool(name) and name.strip().lower() in self._backends


# Global backend registry instance
_global_registry = BackendRegistry()
_builtins_registered = False


def get_global_registry() -> BackendRegistry:
    """Get the global backend registry instance, with built-ins registered."""
    global _builtins_registered
    if not _builtins_registered:
        register_builtin_backends()
        _builtins_registered = True
    return _global_registry


def register_builtin_backends() -> None:
    """Register the dataclass, pydantic and NamedTuple backends globally."""
    # Import here to avoid circular imports
    from ..backends.dataclass_backend import DataclassBackend
    from ..backends.namedtuple_backend import NamedTupleBackend
    from ..backends.pydantic_backend import PydanticBackend

    # Only register if not already registered to avoid duplicate warnings
    for name, backend_cls in (
        ("dataclass", DataclassBackend),
        ("pydantic", PydanticBackend),
        ("namedtuple", NamedTupleBackend),
    ):
        if name not in _global_registry:
            _global_registry.register_backend(name, backend_cls())
