"""Mini README: Process-local collection store.

Structure:
    * InMemoryCollectionStore - dictionary-backed CollectionStore.

Collections are kept in a dictionary keyed by sequential identifiers. Every
read returns a deep copy and every write runs under a re-entrant lock. Writes
are applied to a copy of the collection that replaces the live one only once
the whole mutation succeeded. Nothing survives a restart; use the ``sql``
backend for durable storage.
"""

from __future__ import annotations

import copy
import threading
from typing import Dict, List, Optional

from ..ledger import (
    Collection,
    Contributor,
    NotFound,
    PaymentStatus,
    StaleWrite,
    add_contributor,
    derive_status,
    touch,
)
from ..logging_utils import get_logger
from .base import CollectionStore, validate_collection_fields, validate_paid_amount

LOGGER = get_logger(__name__)


def _ordered_contributors(contributors: List[Contributor]) -> List[Contributor]:
    """Newest first; contributors sharing a timestamp keep reverse insertion order."""

    return sorted(reversed(contributors), key=lambda contributor: contributor.added_at, reverse=True)


class InMemoryCollectionStore(CollectionStore):
    """Keep collections in memory for the lifetime of the process."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._collections: Dict[str, Collection] = {}
        self._sequence = 0
        self._lock = threading.RLock()

    def initialise(self) -> List[str]:
        LOGGER.info("Initialised memory store; no tables to create")
        return []

    def _next_id(self) -> str:
        self._sequence += 1
        return str(self._sequence)

    def _require(self, collection_id: str) -> Collection:
        collection = self._collections.get(str(collection_id))
        if collection is None:
            raise NotFound(f"Collection {collection_id} not found")
        return collection

    def _snapshot(self, collection: Collection) -> Collection:
        detached = copy.deepcopy(collection)
        detached.contributors = _ordered_contributors(detached.contributors)
        return detached

    def create_collection(
        self,
        name: str,
        description: str = "",
        target_amount: Optional[float] = None,
    ) -> Collection:
        name, description, target_amount = validate_collection_fields(name, description, target_amount)
        with self._lock:
            collection = Collection(
                collection_id=self._next_id(),
                name=name,
                description=description,
                target_amount=target_amount,
            )
            self._collections[collection.collection_id] = collection
        LOGGER.info("Created collection %s (%s)", collection.collection_id, collection.name)
        return self._snapshot(collection)

    def get_collection(self, collection_id: str) -> Collection:
        with self._lock:
            return self._snapshot(self._require(collection_id))

    def list_collections(self) -> List[Collection]:
        with self._lock:
            # Reversing first keeps later ids ahead of earlier ones on equal timestamps.
            ordered = sorted(
                reversed(list(self._collections.values())),
                key=lambda collection: collection.created_at,
                reverse=True,
            )
            return [self._snapshot(collection) for collection in ordered]

    def add_contributor(self, collection_id: str, name: str, amount: float) -> Contributor:
        with self._lock:
            working = copy.deepcopy(self._require(collection_id))
            contributor = add_contributor(working, name, amount)
            self._collections[working.collection_id] = working
        LOGGER.info(
            "Added contributor %s to collection %s", contributor.contributor_id, working.collection_id
        )
        return copy.deepcopy(contributor)

    def update_contributor(
        self,
        collection_id: str,
        contributor_id: str,
        paid_amount: float,
        status: Optional[PaymentStatus | str] = None,
        *,
        expected_paid_amount: Optional[float] = None,
    ) -> Contributor:
        with self._lock:
            working = copy.deepcopy(self._require(collection_id))
            contributor = working.find_contributor(contributor_id)
            if contributor is None:
                raise NotFound(f"Contributor {contributor_id} not found in collection {collection_id}")

            paid_amount = validate_paid_amount(contributor, paid_amount)
            if expected_paid_amount is not None and contributor.paid_amount != expected_paid_amount:
                raise StaleWrite(
                    f"Contributor {contributor_id} changed: expected paid amount "
                    f"{expected_paid_amount}, found {contributor.paid_amount}"
                )

            derived = derive_status(contributor.amount, paid_amount)
            if status is not None and PaymentStatus.from_str(status) is not derived:
                LOGGER.warning(
                    "Ignoring status %s for contributor %s; amounts imply %s",
                    status,
                    contributor_id,
                    derived.value,
                )
            contributor.paid_amount = paid_amount
            contributor.payment_status = derived
            touch(working)
            self._collections[working.collection_id] = working
        LOGGER.info(
            "Updated contributor %s in collection %s: paid=%.2f status=%s",
            contributor_id,
            collection_id,
            contributor.paid_amount,
            contributor.payment_status.value,
        )
        return copy.deepcopy(contributor)

    def delete_collection(self, collection_id: str) -> None:
        with self._lock:
            collection = self._collections.pop(str(collection_id), None)
        if collection is None:
            raise NotFound(f"Collection {collection_id} not found")
        LOGGER.info(
            "Deleted collection %s with %s contributors",
            collection.collection_id,
            len(collection.contributors),
        )
