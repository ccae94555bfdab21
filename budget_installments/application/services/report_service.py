"""Report service - read-only aggregates over a ledger's plans."""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from dateutil.relativedelta import relativedelta

from budget_installments.application.dto import (
    ActivePlanSummary,
    CategoryBreakdown,
    MonthlyAmount,
    ProjectionMonth,
    ProjectionResponse,
    ReportResponse,
    ReportSummary,
)
from budget_installments.domain.entities import (
    Frequency,
    InstallmentPlan,
    ScheduleRow,
    ScheduleStatus,
    TenantContext,
)
from budget_installments.domain.interfaces import (
    AccountResolver,
    InstallmentPlanRepository,
)
from budget_installments.service.amortization import (
    InstallmentPolicySettings,
    policy_settings,
)

logger = structlog.get_logger(__name__)

# Installments per month, used to express obligations monthly
PAYMENTS_PER_MONTH = {
    Frequency.MONTHLY: 1,
    Frequency.BI_WEEKLY: 2,
    Frequency.WEEKLY: 4,
}


def _month_start(day: date) -> date:
    return day.replace(day=1)


def _month_key(day: date) -> str:
    return day.strftime("%Y-%m")


def _sum_by_month(rows: Iterable[ScheduleRow]) -> Dict[str, int]:
    totals: Dict[str, int] = defaultdict(int)
    for row in rows:
        totals[_month_key(row.due_date)] += row.scheduled_amount_cents
    return totals


def _monthly_series(first_month: date, months: int, totals: Dict[str, int]) -> List[MonthlyAmount]:
    series = []
    for i in range(months):
        key = _month_key(first_month + relativedelta(months=i))
        series.append(MonthlyAmount(month=key, amount_cents=totals.get(key, 0)))
    return series


def _percentage(part: int, whole: int) -> float:
    """Share of `whole`, in percent with one decimal, rounded half-up."""
    if whole == 0:
        return 0.0
    ratio = Decimal(part) * 100 / Decimal(whole)
    return float(ratio.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class ReportService:
    """
    Application service for installment reporting.

    Aggregates are computed from the ledger's plans as loaded, so every
    figure reflects one consistent read.
    """

    def __init__(
        self,
        plan_repository: InstallmentPlanRepository,
        account_resolver: AccountResolver,
        settings: InstallmentPolicySettings = policy_settings,
    ):
        self._plan_repo = plan_repository
        self._accounts = account_resolver
        self._settings = settings

    async def get_report(
        self,
        tenant: TenantContext,
        ledger_id: UUID,
        today: Optional[date] = None,
    ) -> ReportResponse:
        """
        Build the installment report of a ledger.

        Covers summary figures, remaining debt of the past months,
        a per-category breakdown, obligations of the coming months and
        the active plans falling due soonest.
        """
        today = today or date.today()
        ledger = await self._accounts.resolve_ledger(tenant, ledger_id)
        plans = await self._plan_repo.list_by_ledger(ledger.id)

        active = [plan for plan in plans if plan.is_active]
        rows = [row for plan in plans for row in plan.schedule]
        scheduled = [row for row in rows if row.status == ScheduleStatus.SCHEDULED]
        processed = [row for row in rows if row.status == ScheduleStatus.PROCESSED]
        on_time = [
            row for row in processed
            if row.processed_date is not None and row.processed_date <= row.due_date
        ]

        summary = ReportSummary(
            active_plan_count=len(active),
            total_plan_count=len(plans),
            total_remaining_debt_cents=sum(p.remaining_amount_cents for p in active),
            monthly_obligations_cents=sum(
                p.installment_amount_cents * PAYMENTS_PER_MONTH[p.frequency]
                for p in active
            ),
            average_plan_size_cents=(
                sum(p.purchase_amount_cents for p in active) // len(active)
                if active else 0
            ),
            total_processed=len(processed),
            total_scheduled=len(scheduled),
            on_time_rate=_percentage(len(on_time), len(processed)),
        )

        months = self._settings.report_obligation_months
        this_month = _month_start(today)
        totals = _sum_by_month(scheduled)

        report = ReportResponse(
            ledger_id=str(ledger.id),
            summary=summary,
            debt_over_time=_monthly_series(
                this_month - relativedelta(months=months - 1), months, totals
            ),
            category_breakdown=self._category_breakdown(plans),
            monthly_obligations=_monthly_series(this_month, months, totals),
            active_plans=self._soonest_active(active),
        )

        logger.info(
            "installment_report_built",
            user_id=tenant.user_id,
            ledger_id=str(ledger.id),
            plan_count=len(plans),
        )

        return report

    async def get_projection(
        self,
        tenant: TenantContext,
        ledger_id: UUID,
        months: Optional[int] = None,
        today: Optional[date] = None,
    ) -> ProjectionResponse:
        """
        Project scheduled installment payments month by month.

        Starts with the current month. `months` is clamped to
        1..projection_max_months.
        """
        today = today or date.today()
        if months is None:
            months = self._settings.projection_default_months
        months = min(self._settings.projection_max_months, max(1, months))

        ledger = await self._accounts.resolve_ledger(tenant, ledger_id)

        first = _month_start(today)
        last = first + relativedelta(months=months) - timedelta(days=1)
        rows = await self._plan_repo.list_schedules(
            ledger.id,
            status=ScheduleStatus.SCHEDULED,
            due_from=first,
            due_until=last,
        )
        totals = _sum_by_month(rows)

        projection = []
        for i in range(months):
            start = first + relativedelta(months=i)
            end = start + relativedelta(months=1) - timedelta(days=1)
            projection.append(
                ProjectionMonth(
                    month=_month_key(start),
                    label=start.strftime("%b %Y"),
                    start_date=start.isoformat(),
                    end_date=end.isoformat(),
                    total_amount_cents=totals.get(_month_key(start), 0),
                )
            )

        return ProjectionResponse(ledger_id=str(ledger.id), months=projection)

    def _category_breakdown(self, plans: List[InstallmentPlan]) -> List[CategoryBreakdown]:
        grouped: Dict[UUID, List[InstallmentPlan]] = defaultdict(list)
        for plan in plans:
            if plan.category_account_id is not None:
                grouped[plan.category_account_id].append(plan)

        breakdown = [
            CategoryBreakdown(
                category_account_id=str(category_id),
                category_name=members[0].category_name,
                plan_count=len(members),
                total_amount_cents=sum(p.purchase_amount_cents for p in members),
                remaining_debt_cents=sum(
                    p.remaining_amount_cents for p in members if p.is_active
                ),
                average_plan_size_cents=(
                    sum(p.purchase_amount_cents for p in members) // len(members)
                ),
            )
            for category_id, members in grouped.items()
        ]

        return sorted(breakdown, key=lambda c: c.total_amount_cents, reverse=True)

    def _soonest_active(self, active: List[InstallmentPlan]) -> List[ActivePlanSummary]:
        # Plans without a scheduled row sort last
        ordered = sorted(
            active,
            key=lambda p: (p.next_due_date is None, p.next_due_date or date.max),
        )

        return [
            ActivePlanSummary(
                plan_id=str(plan.id),
                description=plan.description,
                purchase_amount_cents=plan.purchase_amount_cents,
                installment_amount_cents=plan.installment_amount_cents,
                number_of_installments=plan.number_of_installments,
                completed_installments=plan.completed_installments,
                frequency=plan.frequency.value,
                credit_card_name=plan.credit_card_name,
                category_name=plan.category_name,
                next_due_date=(
                    plan.next_due_date.isoformat() if plan.next_due_date else None
                ),
            )
            for plan in ordered[: self._settings.report_active_plan_limit]
        ]
