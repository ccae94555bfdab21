"""
Schedule Generator.

Turns a validated plan request into an InstallmentPlan with all of its
schedule rows materialized. Nothing here touches storage; the caller
writes the result in one transaction.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Optional, Tuple, Union
from uuid import UUID

from budget_installments.domain.entities import (
    Account,
    Frequency,
    InstallmentPlan,
    ScheduleRow,
)
from budget_installments.domain.exceptions import (
    AccountNotFoundException,
    InvalidAccountKindException,
    InvalidPlanRequestException,
    ScheduleNotReschedulableException,
)

from .calculator import compute_schedule, due_date_for, split_amount
from .settings import InstallmentPolicySettings, policy_settings


@dataclass(frozen=True)
class PlanInput:
    """Everything needed to build a plan, with references already parsed."""

    ledger_id: UUID
    credit_card_account_id: UUID
    purchase_amount_cents: int
    purchase_date: date
    description: str
    number_of_installments: int
    start_date: date
    frequency: Optional[Union[Frequency, str]] = None
    category_account_id: Optional[UUID] = None
    original_transaction_id: Optional[UUID] = None
    notes: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)


def parse_frequency(
    value: Optional[Union[Frequency, str]],
    settings: InstallmentPolicySettings = policy_settings,
) -> Frequency:
    """Parse a frequency, falling back to the policy default."""
    if value is None:
        return Frequency(settings.default_frequency)
    try:
        return Frequency(value)
    except ValueError:
        raise InvalidPlanRequestException(
            f"Unsupported frequency: {value}. "
            f"Must be one of: {', '.join(f.value for f in Frequency)}"
        )


def _require_date(value: Any, name: str) -> None:
    if not isinstance(value, date) or isinstance(value, datetime):
        raise InvalidPlanRequestException(f"{name} must be a calendar date")


def generate_plan(
    plan_input: PlanInput,
    credit_card: Account,
    category: Optional[Account] = None,
    settings: InstallmentPolicySettings = policy_settings,
) -> Tuple[InstallmentPlan, List[ScheduleRow]]:
    """
    Build a new active plan and its full schedule.

    Args:
        plan_input: The plan request
        credit_card: Resolved credit-card account
        category: Resolved category account, if the request named one
        settings: Policy settings (uses defaults if not provided)

    Returns:
        Tuple of (plan, schedule rows numbered 1..N)

    Raises:
        InvalidPlanRequestException: If any input is out of policy
        InvalidAccountKindException: If an account has the wrong kind
        AccountNotFoundException: If a named category was not resolved
    """
    if plan_input.purchase_amount_cents <= 0:
        raise InvalidPlanRequestException("Purchase amount must be greater than zero")

    description = (plan_input.description or "").strip()
    if not description:
        raise InvalidPlanRequestException("Description is required")

    _require_date(plan_input.purchase_date, "purchase_date")
    _require_date(plan_input.start_date, "start_date")

    frequency = parse_frequency(plan_input.frequency, settings)

    if credit_card.id != plan_input.credit_card_account_id:
        raise AccountNotFoundException(str(plan_input.credit_card_account_id))
    if not credit_card.is_liability:
        raise InvalidAccountKindException(str(credit_card.id), "liability")

    if plan_input.category_account_id is not None:
        if category is None or category.id != plan_input.category_account_id:
            raise AccountNotFoundException(str(plan_input.category_account_id))
        if not category.is_category:
            raise InvalidAccountKindException(str(category.id), "budget category")

    payments = compute_schedule(
        purchase_amount_cents=plan_input.purchase_amount_cents,
        count=plan_input.number_of_installments,
        frequency=frequency,
        start_date=plan_input.start_date,
        settings=settings,
    )

    plan = InstallmentPlan(
        ledger_id=plan_input.ledger_id,
        credit_card_account_id=credit_card.id,
        purchase_amount_cents=plan_input.purchase_amount_cents,
        purchase_date=plan_input.purchase_date,
        description=description,
        number_of_installments=plan_input.number_of_installments,
        installment_amount_cents=payments[0].amount_cents,
        frequency=frequency,
        start_date=plan_input.start_date,
        category_account_id=category.id if category else None,
        original_transaction_id=plan_input.original_transaction_id,
        notes=plan_input.notes,
        metadata=dict(plan_input.metadata),
        credit_card_name=credit_card.name,
        category_name=category.name if category else None,
    )

    plan.schedule = [
        ScheduleRow(
            plan_id=plan.id,
            installment_number=payment.index,
            due_date=payment.due_date,
            scheduled_amount_cents=payment.amount_cents,
        )
        for payment in payments
    ]

    return plan, plan.schedule


def reschedule_remaining(plan: InstallmentPlan, new_count: int) -> List[ScheduleRow]:
    """
    Re-split the still-scheduled part of an active plan over `new_count` rows.

    The new rows keep numbering after the settled ones and stay on the
    plan's date grid, so the first new row falls one step after the last
    settled row. The plan's installment count and base amount are
    updated in place.

    Returns:
        The replacement schedule rows

    Raises:
        PlanNotActiveException: If the plan is not active
        InvalidPlanRequestException: If new_count is out of range
        ScheduleNotReschedulableException: If settled rows are not a prefix
    """
    plan.ensure_active()

    remaining = plan.remaining_installments
    if new_count < 1 or new_count > remaining:
        raise InvalidPlanRequestException(
            f"Remaining installments must be between 1 and {remaining}"
        )

    settled = sorted(row.installment_number for row in plan.schedule if not row.is_scheduled)
    if settled != list(range(1, len(settled) + 1)):
        raise ScheduleNotReschedulableException(str(plan.id))

    amounts = split_amount(plan.remaining_amount_cents, new_count)
    offset = len(settled)

    rows = [
        ScheduleRow(
            plan_id=plan.id,
            installment_number=offset + i + 1,
            due_date=due_date_for(plan.start_date, plan.frequency, offset + i),
            scheduled_amount_cents=amount,
        )
        for i, amount in enumerate(amounts)
    ]

    plan.schedule = [row for row in plan.schedule if not row.is_scheduled] + rows
    plan.number_of_installments = offset + new_count
    plan.installment_amount_cents = amounts[0]
    plan.updated_at = datetime.utcnow()

    return rows
