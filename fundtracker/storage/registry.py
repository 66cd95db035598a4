"""Mini README: Registry mapping backend names to store implementations.

Structure:
    * StoreRegistry - registers CollectionStore classes by ``backend_name``.
    * create_store - builds the backend selected in settings.
"""

from __future__ import annotations

from typing import Dict, Iterable, Type

from ..configuration import FundTrackerSettings
from ..logging_utils import get_logger
from .base import CollectionStore
from .memory import InMemoryCollectionStore
from .sql import SqlCollectionStore

LOGGER = get_logger(__name__)


class StoreRegistry:
    """Simple registry for mapping backend identifiers to store classes."""

    def __init__(self) -> None:
        self._backends: Dict[str, Type[CollectionStore]] = {}

    def register(self, backend: Type[CollectionStore]) -> None:
        """Register a new store class with the registry."""

        identifier = backend.backend_name.lower()
        LOGGER.debug("Registering store backend '%s'", identifier)
        self._backends[identifier] = backend

    def available_backends(self) -> Iterable[str]:
        """Return iterable of backend identifiers for display."""

        return sorted(self._backends.keys())

    def get(self, identifier: str) -> Type[CollectionStore]:
        """Look up a store class, raising informative errors when unknown."""

        backend = self._backends.get(identifier.lower())
        if not backend:
            raise KeyError(f"Unknown storage backend '{identifier}'")
        return backend


REGISTRY = StoreRegistry()
REGISTRY.register(InMemoryCollectionStore)
REGISTRY.register(SqlCollectionStore)


def create_store(settings: FundTrackerSettings) -> CollectionStore:
    """Instantiate the backend named by ``settings.storage_backend``."""

    backend = REGISTRY.get(settings.storage_backend)
    LOGGER.info("Creating '%s' collection store", backend.backend_name)
    return backend.from_settings(settings)
