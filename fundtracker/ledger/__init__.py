"""Mini README: Ledger rules for pledges and payments.

This package owns the only real business logic in the tracker: deriving a
contributor's payment status from its pledged and paid amounts, applying
payments, and aggregating a collection's totals. Everything here is pure and
in-memory; persistence lives in ``fundtracker.storage``.
"""

from .engine import (
    add_contributor,
    aggregate,
    apply_outcome,
    derive_status,
    record_payment,
    set_status,
    sort_for_display,
    touch,
)
from .errors import InvalidAmount, InvalidInput, LedgerError, NotFound, StaleWrite
from .models import (
    Collection,
    Contributor,
    LedgerSummary,
    OverpaymentPolicy,
    PaymentOutcome,
    PaymentStatus,
    utcnow,
)

__all__ = [
    "Collection",
    "Contributor",
    "InvalidAmount",
    "InvalidInput",
    "LedgerError",
    "LedgerSummary",
    "NotFound",
    "OverpaymentPolicy",
    "PaymentOutcome",
    "PaymentStatus",
    "StaleWrite",
    "add_contributor",
    "aggregate",
    "apply_outcome",
    "derive_status",
    "record_payment",
    "set_status",
    "sort_for_display",
    "touch",
    "utcnow",
]
