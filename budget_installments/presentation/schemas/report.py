"""Installment report and projection schemas."""

from typing import Optional

from pydantic import BaseModel, Field


class ReportSummarySchema(BaseModel):
    active_plan_count: int
    total_plan_count: int
    total_remaining_debt_cents: int
    monthly_obligations_cents: int = Field(
        ...,
        description="Base amounts of active plans expressed per month",
    )
    average_plan_size_cents: int
    total_processed: int
    total_scheduled: int
    on_time_rate: float = Field(
        ...,
        description="Percent of processed installments paid by their due date",
        examples=[92.5],
    )


class MonthlyAmountSchema(BaseModel):
    month: str = Field(..., examples=["2025-03"])
    amount_cents: int


class CategoryBreakdownSchema(BaseModel):
    category_account_id: str
    category_name: Optional[str] = None
    plan_count: int
    total_amount_cents: int
    remaining_debt_cents: int
    average_plan_size_cents: int


class ActivePlanSummarySchema(BaseModel):
    plan_id: str
    description: str
    purchase_amount_cents: int
    installment_amount_cents: int
    number_of_installments: int
    completed_installments: int
    frequency: str
    credit_card_name: Optional[str] = None
    category_name: Optional[str] = None
    next_due_date: Optional[str] = None


class ReportResponseSchema(BaseModel):
    """Schema for GET /v1/ledgers/{ledger_id}/installment-reports."""

    ledger_id: str
    summary: ReportSummarySchema
    debt_over_time: list[MonthlyAmountSchema]
    category_breakdown: list[CategoryBreakdownSchema]
    monthly_obligations: list[MonthlyAmountSchema]
    active_plans: list[ActivePlanSummarySchema]


class ProjectionMonthSchema(BaseModel):
    month: str = Field(..., examples=["2025-03"])
    label: str = Field(..., examples=["Mar 2025"])
    start_date: str
    end_date: str
    total_amount_cents: int


class ProjectionResponseSchema(BaseModel):
    """Schema for GET /v1/ledgers/{ledger_id}/installment-projection."""

    ledger_id: str
    months: list[ProjectionMonthSchema]
