"""Mini README: Abstract collection store used by the fund manager.

Structure:
    * CollectionStore - interface every storage backend implements.
    * validate_collection_fields - shared checks for new collections.

Stores are the durable side of the tracker. They hand out detached copies
of collections so callers can run ledger computations without touching
persisted state, and they serialise writes so guarded updates can detect a
paid amount that changed underneath them.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..configuration import FundTrackerSettings
from ..ledger import Collection, Contributor, InvalidAmount, InvalidInput, PaymentStatus


def validate_collection_fields(
    name: str, description: Optional[str], target_amount: Optional[float]
) -> Tuple[str, str, Optional[float]]:
    """Return trimmed values or raise InvalidInput."""

    cleaned = name.strip() if isinstance(name, str) else ""
    if not cleaned:
        raise InvalidInput("Collection name must not be blank")
    if target_amount is not None:
        if (
            not isinstance(target_amount, (int, float))
            or isinstance(target_amount, bool)
            or not math.isfinite(target_amount)
            or target_amount < 0
        ):
            raise InvalidInput(f"Target amount must be a non-negative number, got {target_amount!r}")
        target_amount = float(target_amount)
    return cleaned, (description or "").strip(), target_amount


def validate_paid_amount(contributor: Contributor, paid_amount: float) -> float:
    """Ensure an absolute paid amount lies within ``[0, amount]``."""

    if (
        not isinstance(paid_amount, (int, float))
        or isinstance(paid_amount, bool)
        or not math.isfinite(paid_amount)
        or not 0 <= paid_amount <= contributor.amount
    ):
        raise InvalidAmount(
            f"Paid amount must lie between 0 and {contributor.amount}, got {paid_amount!r}"
        )
    return float(paid_amount)


class CollectionStore(ABC):
    """Base interface for collection storage backends."""

    backend_name: str = "generic"

    @classmethod
    def from_settings(cls, settings: FundTrackerSettings) -> "CollectionStore":
        """Build the backend from runtime settings."""

        return cls()

    @abstractmethod
    def initialise(self) -> List[str]:
        """Prepare the backend for use and report the tables it created."""

    @abstractmethod
    def create_collection(
        self,
        name: str,
        description: str = "",
        target_amount: Optional[float] = None,
    ) -> Collection:
        """Persist a new, empty collection and return it."""

    @abstractmethod
    def get_collection(self, collection_id: str) -> Collection:
        """Return a collection with contributors newest first, or raise NotFound."""

    @abstractmethod
    def list_collections(self) -> List[Collection]:
        """Return all collections, most recently created first."""

    @abstractmethod
    def add_contributor(self, collection_id: str, name: str, amount: float) -> Contributor:
        """Create a pending contributor within a collection."""

    @abstractmethod
    def update_contributor(
        self,
        collection_id: str,
        contributor_id: str,
        paid_amount: float,
        status: Optional[PaymentStatus | str] = None,
        *,
        expected_paid_amount: Optional[float] = None,
    ) -> Contributor:
        """Overwrite a contributor's paid amount; status is re-derived."""

    @abstractmethod
    def delete_collection(self, collection_id: str) -> None:
        """Remove a collection together with its contributors."""
