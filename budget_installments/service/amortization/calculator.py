"""
Amortization Calculator.

Splits a purchase into dated installments. Amounts are integer cents;
every installment but the last gets the half-up rounded base amount and
the last one absorbs whatever remains, so the schedule always sums to
the purchase amount exactly.

Monthly due dates are offsets from the original start date
(start + i months), so a plan starting on Jan 31 runs
Jan 31, Feb 28, Mar 31, Apr 30 rather than drifting to the 28th.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from dateutil.relativedelta import relativedelta

from budget_installments.domain.entities import MAX_AMOUNT_CENTS, Frequency
from budget_installments.domain.exceptions import InvalidPlanRequestException

from .settings import InstallmentPolicySettings, policy_settings


@dataclass(frozen=True)
class ScheduledPayment:
    """
    One computed installment.

    Attributes:
        index: 1-based installment number
        due_date: Date the installment falls due
        amount_cents: Installment amount in cents
    """
    index: int
    due_date: date
    amount_cents: int


def base_amount_cents(total_cents: int, count: int) -> int:
    """
    Per-installment base amount, rounded half-up to the cent.

    Equivalent to round(amount / count, 2) on the major unit.
    """
    quotient = Decimal(total_cents) / Decimal(count)
    return int(quotient.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def split_amount(total_cents: int, count: int) -> List[int]:
    """
    Split an amount into `count` parts, last part absorbing the remainder.

    Args:
        total_cents: Amount to split, in cents
        count: Number of parts (at least 1)

    Returns:
        List of part amounts summing to total_cents

    Raises:
        InvalidPlanRequestException: If count < 1 or any part would not be positive
    """
    if count < 1:
        raise InvalidPlanRequestException("Installment count must be at least 1")

    base = base_amount_cents(total_cents, count)
    last = total_cents - base * (count - 1)

    if base <= 0 or last <= 0:
        raise InvalidPlanRequestException(
            f"Amount of {total_cents} cents is too small to split into "
            f"{count} installments"
        )

    return [base] * (count - 1) + [last]


def due_date_for(start_date: date, frequency: Frequency, offset: int) -> date:
    """
    Due date `offset` steps after the start date.

    Weekly and bi-weekly steps are 7 and 14 days; monthly steps are
    calendar months, clamped to the last day of shorter months.
    """
    if frequency == Frequency.WEEKLY:
        return start_date + timedelta(weeks=offset)
    if frequency == Frequency.BI_WEEKLY:
        return start_date + timedelta(weeks=2 * offset)
    return start_date + relativedelta(months=offset)


def validate_installment_count(
    count: int,
    settings: InstallmentPolicySettings = policy_settings,
) -> None:
    """Raise if the count falls outside the policy bounds."""
    if count < settings.min_installments or count > settings.max_installments:
        raise InvalidPlanRequestException(
            f"Number of installments must be between {settings.min_installments} "
            f"and {settings.max_installments}"
        )


def compute_schedule(
    purchase_amount_cents: int,
    count: int,
    frequency: Frequency,
    start_date: date,
    settings: InstallmentPolicySettings = policy_settings,
) -> List[ScheduledPayment]:
    """
    Compute the dated installments of a purchase.

    Args:
        purchase_amount_cents: Purchase amount in cents (must be positive)
        count: Number of installments, within the policy bounds
        frequency: Step between due dates
        start_date: Due date of the first installment
        settings: Policy settings (uses defaults if not provided)

    Returns:
        `count` payments numbered from 1, summing to purchase_amount_cents

    Raises:
        InvalidPlanRequestException: If the amount or count is invalid
    """
    if purchase_amount_cents <= 0:
        raise InvalidPlanRequestException("Purchase amount must be greater than zero")
    if purchase_amount_cents > MAX_AMOUNT_CENTS:
        raise InvalidPlanRequestException("Purchase amount is too large")

    validate_installment_count(count, settings)

    amounts = split_amount(purchase_amount_cents, count)

    return [
        ScheduledPayment(
            index=i + 1,
            due_date=due_date_for(start_date, frequency, i),
            amount_cents=amount,
        )
        for i, amount in enumerate(amounts)
    ]
