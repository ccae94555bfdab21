"""Data transfer objects for installment plan operations."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Optional
from uuid import UUID

from budget_installments.domain.entities import MAX_AMOUNT_CENTS


@dataclass(frozen=True)
class CreatePlanRequest:
    """Input data for creating an installment plan."""

    credit_card_account_id: UUID
    purchase_amount_cents: int
    purchase_date: date
    description: str
    number_of_installments: int
    start_date: date
    frequency: Optional[str] = None
    category_account_id: Optional[UUID] = None
    original_transaction_id: Optional[UUID] = None
    notes: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def validate(self) -> List[str]:
        errors = []

        if not self.description or not self.description.strip():
            errors.append("description is required")

        if self.purchase_amount_cents <= 0:
            errors.append("purchase_amount_cents must be positive")
        elif self.purchase_amount_cents > MAX_AMOUNT_CENTS:
            errors.append("purchase_amount_cents is too large")

        return errors


@dataclass(frozen=True)
class UpdatePlanRequest:
    """
    Editable plan fields.

    None leaves a field unchanged. The category is only touched when
    `category_provided` is set; a None category then clears it.
    """

    description: Optional[str] = None
    notes: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    category_account_id: Optional[UUID] = None
    category_provided: bool = False
    remaining_installments: Optional[int] = None

    def has_changes(self) -> bool:
        return self.category_provided or any(
            value is not None
            for value in (
                self.description,
                self.notes,
                self.metadata,
                self.remaining_installments,
            )
        )

    def validate(self) -> List[str]:
        errors = []

        if not self.has_changes():
            errors.append("No valid fields to update")

        if self.description is not None and not self.description.strip():
            errors.append("description cannot be empty")

        return errors


@dataclass(frozen=True)
class ScheduleRowDTO:
    """Single schedule row within a plan response."""

    schedule_id: str
    plan_id: str
    installment_number: int
    due_date: str
    scheduled_amount_cents: int
    status: str
    processed_date: Optional[str]
    actual_amount_cents: Optional[int]
    ledger_transaction_id: Optional[str]
    notes: Optional[str]

    @classmethod
    def from_entity(cls, row) -> "ScheduleRowDTO":
        return cls(
            schedule_id=str(row.id),
            plan_id=str(row.plan_id),
            installment_number=row.installment_number,
            due_date=row.due_date.isoformat(),
            scheduled_amount_cents=row.scheduled_amount_cents,
            status=row.status.value,
            processed_date=row.processed_date.isoformat() if row.processed_date else None,
            actual_amount_cents=row.actual_amount_cents,
            ledger_transaction_id=(
                str(row.ledger_transaction_id) if row.ledger_transaction_id else None
            ),
            notes=row.notes,
        )


@dataclass(frozen=True)
class PlanResponse:
    """Response data for an installment plan with its schedule."""

    plan_id: str
    ledger_id: str
    credit_card_account_id: str
    credit_card_name: Optional[str]
    category_account_id: Optional[str]
    category_name: Optional[str]
    original_transaction_id: Optional[str]
    purchase_amount_cents: int
    purchase_date: str
    description: str
    number_of_installments: int
    installment_amount_cents: int
    frequency: str
    start_date: str
    status: str
    completed_installments: int
    remaining_installments: int
    remaining_amount_cents: int
    next_due_date: Optional[str]
    notes: Optional[str]
    metadata: dict[str, Any]
    created_at: str
    updated_at: str
    schedule: List[ScheduleRowDTO]

    @classmethod
    def from_entity(cls, plan) -> "PlanResponse":
        next_due = plan.next_due_date

        return cls(
            plan_id=str(plan.id),
            ledger_id=str(plan.ledger_id),
            credit_card_account_id=str(plan.credit_card_account_id),
            credit_card_name=plan.credit_card_name,
            category_account_id=(
                str(plan.category_account_id) if plan.category_account_id else None
            ),
            category_name=plan.category_name,
            original_transaction_id=(
                str(plan.original_transaction_id) if plan.original_transaction_id else None
            ),
            purchase_amount_cents=plan.purchase_amount_cents,
            purchase_date=plan.purchase_date.isoformat(),
            description=plan.description,
            number_of_installments=plan.number_of_installments,
            installment_amount_cents=plan.installment_amount_cents,
            frequency=plan.frequency.value,
            start_date=plan.start_date.isoformat(),
            status=plan.status.value,
            completed_installments=plan.completed_installments,
            remaining_installments=plan.remaining_installments,
            remaining_amount_cents=plan.remaining_amount_cents,
            next_due_date=next_due.isoformat() if next_due else None,
            notes=plan.notes,
            metadata=dict(plan.metadata),
            created_at=plan.created_at.isoformat(),
            updated_at=plan.updated_at.isoformat(),
            schedule=[ScheduleRowDTO.from_entity(row) for row in plan.schedule],
        )


@dataclass(frozen=True)
class ScheduleQuery:
    """Filters for listing schedule rows of a ledger."""

    plan_id: Optional[UUID] = None
    status: Optional[str] = None
    due_within_days: Optional[int] = None

    def validate(self) -> List[str]:
        errors = []

        if self.due_within_days is not None and self.due_within_days < 0:
            errors.append("due_within_days cannot be negative")

        return errors
