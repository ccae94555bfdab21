"""Schemas for purchases paid in installments."""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .plan import FrequencyLiteral, PlanResponseSchema


class InstallmentTermsSchema(BaseModel):
    """How to split the purchase."""

    number_of_installments: int = Field(..., examples=[6])
    start_date: date = Field(..., examples=["2025-01-15"])
    frequency: Optional[FrequencyLiteral] = Field(None, examples=["monthly"])
    notes: Optional[str] = Field(None, max_length=2000)


class PurchaseCreateSchema(BaseModel):
    """Schema for POST /v1/ledgers/{ledger_id}/purchases."""

    credit_card_account_id: UUID = Field(
        ...,
        description="Liability account the purchase is charged to",
    )
    category_account_id: UUID = Field(
        ...,
        description="Budget category the purchase is charged to",
    )
    amount_cents: int = Field(..., examples=[120000])
    purchase_date: date = Field(..., examples=["2025-01-10"])
    description: str = Field(..., max_length=500, examples=["New laptop"])
    installment: InstallmentTermsSchema


class PurchaseResponseSchema(BaseModel):
    transaction_id: str
    plan: PlanResponseSchema
