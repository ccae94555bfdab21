"""Installment plan Pydantic schemas."""

from datetime import date, datetime
from typing import Any, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

FrequencyLiteral = Literal["weekly", "bi-weekly", "monthly"]


class ScheduleRowSchema(BaseModel):
    """Schema for one schedule row."""

    schedule_id: str = Field(
        ...,
        description="UUID of the schedule row",
    )
    plan_id: str = Field(
        ...,
        description="UUID of the plan the row belongs to",
    )
    installment_number: int = Field(
        ...,
        ge=1,
        description="1-based position of the installment within its plan",
        examples=[1],
    )
    due_date: date = Field(
        ...,
        description="Due date in ISO 8601 format (YYYY-MM-DD)",
        examples=["2025-01-15"],
    )
    scheduled_amount_cents: int = Field(
        ...,
        description="Scheduled amount in cents",
        examples=[20000],
    )
    status: str = Field(
        ...,
        description="scheduled, processed or skipped",
        examples=["scheduled"],
    )
    processed_date: Optional[date] = None
    actual_amount_cents: Optional[int] = None
    ledger_transaction_id: Optional[str] = None
    notes: Optional[str] = None


class PlanCreateSchema(BaseModel):
    """Schema for POST /v1/ledgers/{ledger_id}/installment-plans."""

    credit_card_account_id: UUID = Field(
        ...,
        description="Liability account the purchase was charged to",
    )
    purchase_amount_cents: int = Field(
        ...,
        description="Purchase amount in cents",
        examples=[120000],
    )
    purchase_date: date = Field(
        ...,
        description="Date of the purchase (YYYY-MM-DD)",
        examples=["2025-01-10"],
    )
    description: str = Field(
        ...,
        max_length=500,
        description="What was bought",
        examples=["New laptop"],
    )
    number_of_installments: int = Field(
        ...,
        description="How many installments to split the purchase into",
        examples=[6],
    )
    start_date: date = Field(
        ...,
        description="Due date of the first installment (YYYY-MM-DD)",
        examples=["2025-01-15"],
    )
    frequency: Optional[FrequencyLiteral] = Field(
        None,
        description="Step between due dates; monthly when omitted",
        examples=["monthly"],
    )
    category_account_id: Optional[UUID] = Field(
        None,
        description="Budget category the purchase was charged to",
    )
    original_transaction_id: Optional[UUID] = Field(
        None,
        description="Ledger transaction that recorded the purchase",
    )
    notes: Optional[str] = Field(None, max_length=2000)
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "credit_card_account_id": "9b2f6a8e-0c57-4f53-9d0e-2a4c1d6f7b10",
                    "purchase_amount_cents": 120000,
                    "purchase_date": "2025-01-10",
                    "description": "New laptop",
                    "number_of_installments": 6,
                    "start_date": "2025-01-15",
                    "frequency": "monthly",
                    "category_account_id": "3e1c7d42-8a9b-4c6d-b1e2-5f7a9c0d2e34",
                }
            ]
        }
    }


class PlanUpdateSchema(BaseModel):
    """
    Schema for PATCH /v1/installment-plans/{plan_id}.

    Omitted fields stay as they are. Sending `category_account_id` as
    null or "" removes the category.
    """

    description: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=2000)
    metadata: Optional[dict[str, Any]] = None
    category_account_id: Optional[Union[UUID, Literal[""]]] = Field(
        None,
        description="New budget category, or null/\"\" to clear it",
    )
    remaining_installments: Optional[int] = Field(
        None,
        description="Re-split the unpaid balance over this many installments",
        examples=[3],
    )


class PlanResponseSchema(BaseModel):
    """Schema for a plan with its full schedule."""

    plan_id: str = Field(..., description="UUID of the plan")
    ledger_id: str
    credit_card_account_id: str
    credit_card_name: Optional[str] = None
    category_account_id: Optional[str] = None
    category_name: Optional[str] = None
    original_transaction_id: Optional[str] = None
    purchase_amount_cents: int = Field(..., examples=[120000])
    purchase_date: date
    description: str
    number_of_installments: int = Field(..., examples=[6])
    installment_amount_cents: int = Field(
        ...,
        description="Base installment amount; the last one may differ",
        examples=[20000],
    )
    frequency: str = Field(..., examples=["monthly"])
    start_date: date
    status: str = Field(..., examples=["active"])
    completed_installments: int
    remaining_installments: int
    remaining_amount_cents: int
    next_due_date: Optional[date] = None
    notes: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime
    schedule: list[ScheduleRowSchema] = Field(
        ...,
        description="Schedule rows ordered by installment number",
    )


class PlanListResponseSchema(BaseModel):
    """Schema for the plans of one ledger."""

    ledger_id: str
    plans: list[PlanResponseSchema]
