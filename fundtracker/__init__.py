"""Mini README: Core package initializer for the fund collection tracker.

The package tracks group funds ("collections"), the contributors who pledged
towards them and the payments recorded against each pledge. Subpackages:

    * ledger - pure payment-status and aggregation rules.
    * storage - collection stores (in-memory and SQLAlchemy backed).
    * funds - orchestration that sequences storage reads and ledger rules.
    * interface - FastAPI transport exposing the admin and public views.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
