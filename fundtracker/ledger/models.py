"""Mini README: Value types shared by the ledger engine and storage.

Structure:
    * PaymentStatus - the three derived payment states and their display rank.
    * OverpaymentPolicy - what happens to payments beyond the pledge ceiling.
    * Contributor / Collection - dataclasses mirroring persisted records.
    * PaymentOutcome - new paid amount plus derived status for a mutation.
    * LedgerSummary - aggregate totals for a collection.

``as_dict`` helpers emit the camelCase payloads used on the wire.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

from .errors import InvalidInput


def utcnow() -> datetime:
    """Timezone-aware current time used for every timestamp."""

    return datetime.now(timezone.utc)


class PaymentStatus(str, Enum):
    """Payment state of a contributor, always derived from its amounts."""

    PENDING = "pending"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"

    @classmethod
    def from_str(cls, value: object) -> "PaymentStatus":
        """Coerce arbitrary casing into a valid status."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as error:
            raise InvalidInput(f"Unsupported payment status: {value}") from error

    @property
    def display_rank(self) -> int:
        return _DISPLAY_RANK[self]

    @property
    def label(self) -> str:
        return _LABELS[self]


_DISPLAY_RANK = {
    PaymentStatus.PAID: 0,
    PaymentStatus.PARTIALLY_PAID: 1,
    PaymentStatus.PENDING: 2,
}

_LABELS = {
    PaymentStatus.PAID: "Paid",
    PaymentStatus.PARTIALLY_PAID: "Partially paid",
    PaymentStatus.PENDING: "Pending",
}


class OverpaymentPolicy(str, Enum):
    """Handling of an increment that would push a pledge past its amount."""

    CLAMP = "clamp"
    REJECT = "reject"


class PaymentOutcome(NamedTuple):
    """Result of a payment mutation, to be persisted by the caller."""

    paid_amount: float
    status: PaymentStatus


@dataclass(slots=True)
class Contributor:
    """A named pledge within a collection."""

    contributor_id: str
    name: str
    amount: float
    paid_amount: float = 0.0
    payment_status: PaymentStatus = PaymentStatus.PENDING
    added_at: datetime = field(default_factory=utcnow)

    @property
    def remaining(self) -> float:
        return self.amount - self.paid_amount

    def as_dict(self) -> Dict[str, object]:
        """Export the contributor with serialisable values."""

        return {
            "id": self.contributor_id,
            "name": self.name,
            "amount": self.amount,
            "paidAmount": self.paid_amount,
            "remaining": self.remaining,
            "paymentStatus": self.payment_status.value,
            "addedAt": self.added_at.isoformat(),
        }


@dataclass(slots=True)
class Collection:
    """A named fund with its contributors."""

    collection_id: str
    name: str
    description: str = ""
    target_amount: Optional[float] = None
    contributors: List[Contributor] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.updated_at is None or self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def find_contributor(self, contributor_id: str) -> Optional[Contributor]:
        for contributor in self.contributors:
            if contributor.contributor_id == contributor_id:
                return contributor
        return None

    def as_dict(self, *, include_contributors: bool = True) -> Dict[str, object]:
        """Export the collection; contributors keep their current order."""

        payload: Dict[str, object] = {
            "id": self.collection_id,
            "name": self.name,
            "description": self.description,
            "targetAmount": self.target_amount,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
        if include_contributors:
            payload["contributors"] = [contributor.as_dict() for contributor in self.contributors]
        return payload


@dataclass(slots=True)
class LedgerSummary:
    """Aggregate totals and progress for a collection."""

    total_amount: float
    total_paid: float
    total_remaining: float
    progress_percent: int
    count_by_status: Dict[PaymentStatus, int]

    def as_dict(self) -> Dict[str, object]:
        return {
            "totalAmount": self.total_amount,
            "totalPaid": self.total_paid,
            "totalRemaining": self.total_remaining,
            "progressPercent": self.progress_percent,
            "countByStatus": {status.value: count for status, count in self.count_by_status.items()},
        }
