"""Mini README: Storage backends for collections and contributors.

``base`` defines the CollectionStore interface. ``memory`` keeps data for the
life of the process, while ``sql`` persists it through SQLAlchemy using the
tables in ``records`` and the session handling in ``database``. ``registry``
picks one from configuration.
"""

from .base import CollectionStore
from .database import Database
from .memory import InMemoryCollectionStore
from .registry import REGISTRY, StoreRegistry, create_store
from .sql import SqlCollectionStore

__all__ = [
    "CollectionStore",
    "Database",
    "InMemoryCollectionStore",
    "REGISTRY",
    "SqlCollectionStore",
    "StoreRegistry",
    "create_store",
]
