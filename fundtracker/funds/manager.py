"""Mini README: Orchestration of collections, pledges and payments.

Structure:
    * FundManager - sequences store reads, ledger rules and store writes.

The manager is the caller the ledger engine expects: it loads a detached
contributor from storage, asks the engine for the new paid amount and status,
then writes the outcome back. Incremental payments are written with a
compare-and-swap on the previously read paid amount and retried a bounded
number of times, which closes the lost-update window two concurrent payments
would otherwise open. The HTTP interface and CLI both talk to this class.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..configuration import FundTrackerSettings, get_settings
from ..ledger import (
    Collection,
    Contributor,
    LedgerSummary,
    NotFound,
    PaymentStatus,
    StaleWrite,
    aggregate,
    record_payment,
    set_status,
    sort_for_display,
)
from ..logging_utils import get_logger
from ..storage import CollectionStore, InMemoryCollectionStore

LOGGER = get_logger(__name__)


class FundManager:
    """Manage collections and the payment lifecycle of their contributors."""

    def __init__(
        self,
        store: Optional[CollectionStore] = None,
        settings: Optional[FundTrackerSettings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.store = store if store is not None else InMemoryCollectionStore()
        LOGGER.debug(
            "FundManager using %s store (policy=%s, compare_and_swap=%s)",
            self.store.backend_name,
            self.settings.overpayment_policy.value,
            self.settings.compare_and_swap,
        )

    def create_collection(
        self,
        name: str,
        description: str = "",
        target_amount: Optional[float] = None,
    ) -> Collection:
        return self.store.create_collection(name, description, target_amount)

    def list_collections(self) -> List[Collection]:
        collections = self.store.list_collections()
        LOGGER.debug("Listing %s collections", len(collections))
        return collections

    def get_collection(self, collection_id: str) -> Collection:
        return self.store.get_collection(collection_id)

    def delete_collection(self, collection_id: str) -> None:
        self.store.delete_collection(collection_id)

    def initialise(self) -> List[str]:
        """Prepare storage, seeding demo data when configured and empty."""

        tables = self.store.initialise()
        if self.settings.seed_demo_data and not self.store.list_collections():
            self.seed_demo_data()
        return tables

    def seed_demo_data(self) -> Collection:
        """Create a deterministic demo collection for UI previews."""

        collection = self.create_collection(
            "Office farewell gift",
            "Group fund for a farewell present",
            target_amount=3000.0,
        )
        ledger = [("Asha", 1000.0, 1000.0), ("Ben", 1200.0, 400.0), ("Chen", 800.0, 0.0)]
        for name, amount, paid in ledger:
            contributor = self.add_contributor(collection.collection_id, name, amount)
            if paid:
                self.record_payment(collection.collection_id, contributor.contributor_id, paid)
        LOGGER.info("Seeded demo collection %s", collection.collection_id)
        return self.get_collection(collection.collection_id)

    def add_contributor(self, collection_id: str, name: str, amount: float) -> Contributor:
        return self.store.add_contributor(collection_id, name, amount)

    def _load_contributor(self, collection_id: str, contributor_id: str) -> Contributor:
        collection = self.store.get_collection(collection_id)
        contributor = collection.find_contributor(contributor_id)
        if contributor is None:
            raise NotFound(f"Contributor {contributor_id} not found in collection {collection_id}")
        return contributor

    def record_payment(self, collection_id: str, contributor_id: str, increment: float) -> Contributor:
        """Add a payment to a contributor, clamping or rejecting excess per policy."""

        attempts = self.settings.max_write_attempts if self.settings.compare_and_swap else 1
        attempt = 1
        while True:
            contributor = self._load_contributor(collection_id, contributor_id)
            outcome = record_payment(contributor, increment, policy=self.settings.overpayment_policy)
            excess = contributor.paid_amount + increment - outcome.paid_amount
            expected = contributor.paid_amount if self.settings.compare_and_swap else None
            try:
                updated = self.store.update_contributor(
                    collection_id,
                    contributor_id,
                    outcome.paid_amount,
                    outcome.status,
                    expected_paid_amount=expected,
                )
            except StaleWrite:
                if attempt == attempts:
                    raise
                LOGGER.info(
                    "Retrying payment for contributor %s after concurrent update (attempt %s/%s)",
                    contributor_id,
                    attempt,
                    attempts,
                )
                attempt += 1
                continue
            if excess > 0:
                LOGGER.warning(
                    "Discarded overpayment of %.2f for contributor %s in collection %s",
                    excess,
                    contributor_id,
                    collection_id,
                )
            return updated

    def set_status(
        self,
        collection_id: str,
        contributor_id: str,
        target_status: PaymentStatus | str,
    ) -> Contributor:
        """Apply an explicit "mark as paid" or "reset" admin action."""

        contributor = self._load_contributor(collection_id, contributor_id)
        outcome = set_status(contributor, target_status)
        return self.store.update_contributor(
            collection_id, contributor_id, outcome.paid_amount, outcome.status
        )

    def update_contributor(
        self,
        collection_id: str,
        contributor_id: str,
        paid_amount: float,
        status: Optional[PaymentStatus | str] = None,
    ) -> Contributor:
        """Absolute paid-amount overwrite; status is recomputed by the store."""

        return self.store.update_contributor(collection_id, contributor_id, paid_amount, status)

    def summarise(self, collection_id: str) -> LedgerSummary:
        return aggregate(self.get_collection(collection_id).contributors)

    def admin_view(self, collection_id: str) -> Dict[str, Any]:
        """Collection payload in storage order with its summary."""

        collection = self.get_collection(collection_id)
        payload = collection.as_dict()
        payload["summary"] = aggregate(collection.contributors).as_dict()
        return payload

    def public_view(self, collection_id: str) -> Dict[str, Any]:
        """Read-only payload with contributors ordered paid, partial, pending."""

        collection = self.get_collection(collection_id)
        payload = collection.as_dict(include_contributors=False)
        payload["contributors"] = [
            contributor.as_dict() for contributor in sort_for_display(collection.contributors)
        ]
        payload["summary"] = aggregate(collection.contributors).as_dict()
        return payload
