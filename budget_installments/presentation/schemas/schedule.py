"""Schedule listing and processing schemas."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from .plan import PlanResponseSchema, ScheduleRowSchema


class ScheduleListResponseSchema(BaseModel):
    """Schema for GET /v1/ledgers/{ledger_id}/installment-schedules."""

    ledger_id: str
    schedules: list[ScheduleRowSchema]


class ProcessInstallmentSchema(BaseModel):
    """Schema for POST /v1/installment-schedules/{schedule_id}/process."""

    actual_amount_cents: Optional[int] = Field(
        None,
        description="Amount actually paid; the scheduled amount when omitted",
        examples=[20000],
    )
    processed_date: Optional[date] = Field(
        None,
        description="Posting date; today when omitted",
        examples=["2025-02-15"],
    )
    notes: Optional[str] = Field(None, max_length=2000)


class ProcessingResponseSchema(BaseModel):
    """Outcome of a processed installment."""

    plan: PlanResponseSchema
    schedule: ScheduleRowSchema
    transaction_id: str = Field(
        ...,
        description="Ledger transaction moving the amount into the payment category",
    )
    payment_category_id: str
    payment_category_name: str = Field(..., examples=["CC Payment: Visa"])
    plan_completed: bool
