"""Domain Exceptions - Business rule violations and domain errors."""

from .base import (
    ConflictException,
    DomainException,
    MissingTenantException,
    NotFoundException,
    PersistenceException,
    ValidationException,
)
from .ledger import (
    AccountNotFoundException,
    InvalidAccountKindException,
    LedgerNotFoundException,
    PaymentCategoryConflictException,
    TransactionNotFoundException,
)
from .plan import (
    CategoryNotAssignedException,
    InstallmentAlreadyProcessedException,
    InvalidPlanRequestException,
    PlanHasProcessedInstallmentsException,
    PlanNotActiveException,
    PlanNotFoundException,
    ScheduleNotFoundException,
    ScheduleNotReschedulableException,
)

__all__ = [
    "DomainException",
    "ValidationException",
    "NotFoundException",
    "ConflictException",
    "PersistenceException",
    "MissingTenantException",
    "AccountNotFoundException",
    "InvalidAccountKindException",
    "LedgerNotFoundException",
    "PaymentCategoryConflictException",
    "TransactionNotFoundException",
    "CategoryNotAssignedException",
    "InstallmentAlreadyProcessedException",
    "InvalidPlanRequestException",
    "PlanHasProcessedInstallmentsException",
    "PlanNotActiveException",
    "PlanNotFoundException",
    "ScheduleNotFoundException",
    "ScheduleNotReschedulableException",
]
