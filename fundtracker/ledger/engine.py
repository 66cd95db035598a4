"""Mini README: Payment-status derivation and aggregation rules.

Structure:
    * derive_status - maps (amount, paid amount) onto a PaymentStatus.
    * record_payment - applies an incremental payment under a policy.
    * set_status - explicit "mark as paid" / "reset" admin transitions.
    * apply_outcome - writes a PaymentOutcome back onto a contributor.
    * aggregate - totals, remaining balance and progress for a collection.
    * add_contributor - validated creation of a pending pledge.
    * sort_for_display - stable status ordering for the public view.

All functions are pure computations over in-memory values; callers decide
what to persist. Status is never accepted as input without recomputing it
from the amounts, so stored records cannot drift from their amounts.
"""

from __future__ import annotations

import math
import uuid
from datetime import datetime
from typing import Iterable, List, Optional

from ..logging_utils import get_logger
from .errors import InvalidAmount, InvalidInput
from .models import (
    Collection,
    Contributor,
    LedgerSummary,
    OverpaymentPolicy,
    PaymentOutcome,
    PaymentStatus,
    utcnow,
)

LOGGER = get_logger(__name__)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _positive_finite(value: object) -> bool:
    return _is_number(value) and math.isfinite(value) and value > 0


def derive_status(amount: float, paid_amount: float) -> PaymentStatus:
    """Return the status implied by a pledge and its cumulative payments."""

    if paid_amount >= amount:
        return PaymentStatus.PAID
    if paid_amount > 0:
        return PaymentStatus.PARTIALLY_PAID
    return PaymentStatus.PENDING


def record_payment(
    contributor: Contributor,
    increment: float,
    *,
    policy: OverpaymentPolicy = OverpaymentPolicy.CLAMP,
) -> PaymentOutcome:
    """Add ``increment`` to the contributor's paid amount.

    Under ``OverpaymentPolicy.CLAMP`` the result is capped at the pledged
    amount and any excess is discarded. Under ``REJECT`` an increment larger
    than the remaining balance raises ``InvalidAmount``.
    """

    if not _positive_finite(increment):
        raise InvalidAmount(f"Payment amount must be a positive number, got {increment!r}")

    candidate = contributor.paid_amount + increment
    if candidate > contributor.amount and policy is OverpaymentPolicy.REJECT:
        raise InvalidAmount(
            f"Payment of {increment} exceeds the remaining balance of {contributor.remaining}"
        )
    paid_amount = min(candidate, contributor.amount)
    return PaymentOutcome(paid_amount, derive_status(contributor.amount, paid_amount))


def set_status(contributor: Contributor, target_status: PaymentStatus | str) -> PaymentOutcome:
    """Move a contributor to ``target_status`` by adjusting its paid amount.

    ``paid`` settles the full pledge and ``pending`` resets it to zero.
    ``partially_paid`` leaves the paid amount untouched; the returned status is
    recomputed, so it may differ from the requested one.
    """

    target = PaymentStatus.from_str(target_status)
    if target is PaymentStatus.PAID:
        paid_amount = contributor.amount
    elif target is PaymentStatus.PENDING:
        paid_amount = 0.0
    else:
        paid_amount = contributor.paid_amount
    return PaymentOutcome(paid_amount, derive_status(contributor.amount, paid_amount))


def apply_outcome(contributor: Contributor, outcome: PaymentOutcome) -> Contributor:
    """Write a computed outcome onto an in-memory contributor."""

    contributor.paid_amount = outcome.paid_amount
    contributor.payment_status = outcome.status
    return contributor


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def aggregate(contributors: Iterable[Contributor]) -> LedgerSummary:
    """Fold contributors into totals; order of contributors is irrelevant."""

    total_amount = 0.0
    total_paid = 0.0
    counts = {status: 0 for status in PaymentStatus}
    for contributor in contributors:
        total_amount += contributor.amount
        total_paid += contributor.paid_amount
        counts[derive_status(contributor.amount, contributor.paid_amount)] += 1

    progress = 0 if total_amount == 0 else _round_half_up(100 * total_paid / total_amount)
    return LedgerSummary(
        total_amount=total_amount,
        total_paid=total_paid,
        total_remaining=total_amount - total_paid,
        progress_percent=progress,
        count_by_status=counts,
    )


def touch(collection: Collection, now: Optional[datetime] = None) -> Collection:
    """Refresh ``updated_at`` without ever moving it before ``created_at``."""

    now = now or utcnow()
    collection.updated_at = max(now, collection.created_at)
    return collection


def add_contributor(
    collection: Collection,
    name: str,
    amount: float,
    *,
    contributor_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Contributor:
    """Create a pending contributor, append it and refresh the collection."""

    cleaned = name.strip() if isinstance(name, str) else ""
    if not cleaned:
        raise InvalidInput("Contributor name must not be blank")
    if not _positive_finite(amount):
        raise InvalidInput(f"Pledged amount must be a positive number, got {amount!r}")

    contributor_id = contributor_id or uuid.uuid4().hex
    if collection.find_contributor(contributor_id) is not None:
        raise InvalidInput(f"Contributor {contributor_id} already exists in collection {collection.collection_id}")

    now = now or utcnow()
    contributor = Contributor(
        contributor_id=contributor_id,
        name=cleaned,
        amount=float(amount),
        paid_amount=0.0,
        payment_status=PaymentStatus.PENDING,
        added_at=now,
    )
    collection.contributors.append(contributor)
    touch(collection, now)
    LOGGER.debug(
        "Added contributor %s to collection %s pledging %.2f",
        contributor_id,
        collection.collection_id,
        contributor.amount,
    )
    return contributor


def sort_for_display(contributors: Iterable[Contributor]) -> List[Contributor]:
    """Order by paid, partially paid, then pending; stable within each rank."""

    return sorted(
        contributors,
        key=lambda contributor: derive_status(contributor.amount, contributor.paid_amount).display_rank,
    )
