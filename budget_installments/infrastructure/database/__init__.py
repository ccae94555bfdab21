"""Database infrastructure."""

from .connection import get_db_session, DatabaseSessionManager, db_manager
from .unit_of_work import SqlAlchemyUnitOfWork
from .models import (
    AccountModel,
    Base,
    InstallmentPlanModel,
    InstallmentScheduleModel,
    LedgerModel,
    LedgerTransactionModel,
)

__all__ = [
    "get_db_session",
    "DatabaseSessionManager",
    "db_manager",
    "SqlAlchemyUnitOfWork",
    "Base",
    "AccountModel",
    "InstallmentPlanModel",
    "InstallmentScheduleModel",
    "LedgerModel",
    "LedgerTransactionModel",
]
