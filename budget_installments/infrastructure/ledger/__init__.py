"""SQL-backed ledger collaborators."""

from .accounts import SqlAccountResolver
from .posting import SqlLedgerPostingService

__all__ = [
    "SqlAccountResolver",
    "SqlLedgerPostingService",
]
