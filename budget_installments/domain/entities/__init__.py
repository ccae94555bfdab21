"""Domain Entities - Core business objects."""

from .ledger import Account, AccountKind, Ledger, LedgerTransaction
from .plan import (
    MAX_AMOUNT_CENTS,
    Frequency,
    InstallmentPlan,
    PlanStatus,
    ScheduleRow,
    ScheduleStatus,
)
from .tenant import TenantContext

__all__ = [
    "MAX_AMOUNT_CENTS",
    "Account",
    "AccountKind",
    "Ledger",
    "LedgerTransaction",
    "Frequency",
    "InstallmentPlan",
    "PlanStatus",
    "ScheduleRow",
    "ScheduleStatus",
    "TenantContext",
]
