"""Mini README: Request bodies accepted by the HTTP interface.

Field names are camelCase to stay compatible with existing browser clients.
Only shape is validated here; business rules (blank names, non-positive
amounts, pledge ceilings) are enforced by the ledger so every caller gets
the same errors.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class CollectionCreate(BaseModel):
    name: str
    description: Optional[str] = ""
    targetAmount: Optional[float] = None


class ContributorCreate(BaseModel):
    name: str
    amount: float


class ContributorUpdate(BaseModel):
    """Absolute update sent by the admin screen."""

    contributorId: str
    paidAmount: float
    paymentStatus: Optional[str] = None


class PaymentCreate(BaseModel):
    amount: float


class StatusChange(BaseModel):
    status: str
