"""Mini README: Fund orchestration package.

The ``manager`` module contains ``FundManager``, the single entry point the
web interface and CLI use to create collections, add contributors and record
payments.
"""

from .manager import FundManager

__all__ = ["FundManager"]
