"""Data transfer objects for purchases paid in installments."""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional
from uuid import UUID

from budget_installments.domain.entities import MAX_AMOUNT_CENTS

from .plan import PlanResponse


@dataclass(frozen=True)
class PurchaseWithPlanRequest:
    """A credit-card outflow to record and split into installments."""

    credit_card_account_id: UUID
    category_account_id: UUID
    amount_cents: int
    purchase_date: date
    description: str
    number_of_installments: int
    start_date: date
    frequency: Optional[str] = None
    notes: Optional[str] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.description or not self.description.strip():
            errors.append("description is required")

        if self.amount_cents <= 0:
            errors.append("amount_cents must be positive")
        elif self.amount_cents > MAX_AMOUNT_CENTS:
            errors.append("amount_cents is too large")

        return errors


@dataclass(frozen=True)
class PurchaseResponse:
    """The recorded transaction and the plan created for it."""

    transaction_id: str
    plan: PlanResponse
