"""Data transfer objects for installment reporting."""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class ReportSummary:
    active_plan_count: int
    total_plan_count: int
    total_remaining_debt_cents: int
    monthly_obligations_cents: int
    average_plan_size_cents: int
    total_processed: int
    total_scheduled: int
    on_time_rate: float


@dataclass(frozen=True)
class MonthlyAmount:
    """Amount attributed to one calendar month (YYYY-MM)."""

    month: str
    amount_cents: int


@dataclass(frozen=True)
class CategoryBreakdown:
    category_account_id: str
    category_name: Optional[str]
    plan_count: int
    total_amount_cents: int
    remaining_debt_cents: int
    average_plan_size_cents: int


@dataclass(frozen=True)
class ActivePlanSummary:
    plan_id: str
    description: str
    purchase_amount_cents: int
    installment_amount_cents: int
    number_of_installments: int
    completed_installments: int
    frequency: str
    credit_card_name: Optional[str]
    category_name: Optional[str]
    next_due_date: Optional[str]


@dataclass(frozen=True)
class ReportResponse:
    """Aggregated view over every plan of a ledger."""

    ledger_id: str
    summary: ReportSummary
    debt_over_time: List[MonthlyAmount]
    category_breakdown: List[CategoryBreakdown]
    monthly_obligations: List[MonthlyAmount]
    active_plans: List[ActivePlanSummary]


@dataclass(frozen=True)
class ProjectionMonth:
    month: str
    label: str
    start_date: str
    end_date: str
    total_amount_cents: int


@dataclass(frozen=True)
class ProjectionResponse:
    ledger_id: str
    months: List[ProjectionMonth]
