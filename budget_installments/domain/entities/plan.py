"""Installment plan domain entities."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional
from uuid import UUID, uuid4

from budget_installments.domain.exceptions import (
    CategoryNotAssignedException,
    InstallmentAlreadyProcessedException,
    InvalidPlanRequestException,
    PlanHasProcessedInstallmentsException,
    PlanNotActiveException,
)


# Largest amount a BIGINT cents column holds.
MAX_AMOUNT_CENTS = 2**63 - 1


class Frequency(str, Enum):
    """How often an installment falls due."""

    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"


class PlanStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ScheduleStatus(str, Enum):
    SCHEDULED = "scheduled"
    PROCESSED = "processed"
    SKIPPED = "skipped"


@dataclass
class ScheduleRow:
    """One dated payment obligation belonging to a plan."""

    plan_id: UUID
    installment_number: int
    due_date: date
    scheduled_amount_cents: int
    id: UUID = field(default_factory=uuid4)
    status: ScheduleStatus = ScheduleStatus.SCHEDULED
    processed_date: Optional[date] = None
    actual_amount_cents: Optional[int] = None
    ledger_transaction_id: Optional[UUID] = None
    notes: Optional[str] = None

    @property
    def is_scheduled(self) -> bool:
        return self.status == ScheduleStatus.SCHEDULED

    @property
    def is_processed(self) -> bool:
        return self.status == ScheduleStatus.PROCESSED

    def ensure_scheduled(self) -> None:
        """Reject processing of a row that already left the scheduled state."""
        if not self.is_scheduled:
            raise InstallmentAlreadyProcessedException(str(self.id), self.status.value)

    def resolve_amount(self, actual_amount_cents: Optional[int] = None) -> int:
        """
        Amount to post for this row.

        Uses the caller's override when given, else the scheduled amount.

        Raises:
            InvalidPlanRequestException: If the resolved amount is out of range
        """
        amount = (
            actual_amount_cents
            if actual_amount_cents is not None
            else self.scheduled_amount_cents
        )
        if amount <= 0:
            raise InvalidPlanRequestException("Amount must be greater than zero")
        if amount > MAX_AMOUNT_CENTS:
            raise InvalidPlanRequestException("Amount is too large")
        return amount


@dataclass
class InstallmentPlan:
    """
    A purchase spread over N dated installments.

    The plan owns its schedule rows. Status moves from active to completed
    once every installment has been processed; deletion is only possible
    while no row has been processed.
    """

    ledger_id: UUID
    credit_card_account_id: UUID
    purchase_amount_cents: int
    purchase_date: date
    description: str
    number_of_installments: int
    installment_amount_cents: int
    frequency: Frequency
    start_date: date
    category_account_id: Optional[UUID] = None
    original_transaction_id: Optional[UUID] = None
    status: PlanStatus = PlanStatus.ACTIVE
    completed_installments: int = 0
    notes: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    schedule: List[ScheduleRow] = field(default_factory=list)
    credit_card_name: Optional[str] = None
    category_name: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == PlanStatus.ACTIVE

    @property
    def remaining_installments(self) -> int:
        return self.number_of_installments - self.completed_installments

    @property
    def processed_count(self) -> int:
        return sum(1 for row in self.schedule if row.is_processed)

    @property
    def scheduled_rows(self) -> List[ScheduleRow]:
        return [row for row in self.schedule if row.is_scheduled]

    @property
    def remaining_amount_cents(self) -> int:
        return sum(row.scheduled_amount_cents for row in self.scheduled_rows)

    @property
    def next_due_date(self) -> Optional[date]:
        due_dates = [row.due_date for row in self.scheduled_rows]
        return min(due_dates) if due_dates else None

    def ensure_active(self) -> None:
        if not self.is_active:
            raise PlanNotActiveException(str(self.id), self.status.value)

    def ensure_category_assigned(self) -> None:
        if self.category_account_id is None:
            raise CategoryNotAssignedException(str(self.id))

    def ensure_deletable(self) -> None:
        processed = self.processed_count
        if processed > 0:
            raise PlanHasProcessedInstallmentsException(str(self.id), processed)

    def installment_description(self, installment_number: int) -> str:
        """Ledger description for one processed installment."""
        return (
            f"Installment {installment_number}/{self.number_of_installments}: "
            f"{self.description}"
        )
