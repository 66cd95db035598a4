"""Mini README: Error types raised by the ledger and its storage collaborators.

Each error also derives from the builtin exception a caller would naturally
catch (``ValueError`` for bad input, ``KeyError`` for missing records) so
code written against plain Python conventions keeps working.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for all fund tracker domain errors."""


class InvalidInput(LedgerError, ValueError):
    """A collection or contributor was created with unusable values."""


class InvalidAmount(LedgerError, ValueError):
    """A payment amount is non-positive, non-finite, or outside the pledge."""


class NotFound(LedgerError, KeyError):
    """A referenced collection or contributor does not exist."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep messages readable in HTTP details.
        return str(self.args[0]) if self.args else ""


class StaleWrite(LedgerError):
    """A guarded write observed a paid amount that changed since it was read."""
