"""Data transfer objects for installment processing."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .plan import PlanResponse, ScheduleRowDTO


@dataclass(frozen=True)
class ProcessInstallmentRequest:
    """Input data for processing one schedule row."""

    actual_amount_cents: Optional[int] = None
    processed_date: Optional[date] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class ProcessingResponse:
    """Outcome of a processed installment."""

    plan: PlanResponse
    schedule: ScheduleRowDTO
    transaction_id: str
    payment_category_id: str
    payment_category_name: str
    plan_completed: bool
