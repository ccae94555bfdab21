"""
Domain Interfaces (Ports)
"""

from .ledger import AccountResolver, LedgerPostingService
from .repositories import InstallmentPlanRepository
from .unit_of_work import UnitOfWork

__all__ = [
    "AccountResolver",
    "InstallmentPlanRepository",
    "LedgerPostingService",
    "UnitOfWork",
]
