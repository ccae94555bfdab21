"""
Unit Tests for the installment plan lifecycle.

These tests verify:
1. Derived plan figures (remaining amount, next due date)
2. State guards (active, category, deletable, still scheduled)
3. Amount resolution for processing
4. Request DTO validation
"""

from datetime import date
from uuid import uuid4

import pytest

from budget_installments.application.dto import (
    CreatePlanRequest,
    PlanResponse,
    ScheduleQuery,
    UpdatePlanRequest,
)
from budget_installments.domain.entities import (
    MAX_AMOUNT_CENTS,
    Frequency,
    InstallmentPlan,
    PlanStatus,
    ScheduleRow,
    ScheduleStatus,
)
from budget_installments.domain.exceptions import (
    CategoryNotAssignedException,
    InstallmentAlreadyProcessedException,
    InvalidPlanRequestException,
    PlanHasProcessedInstallmentsException,
    PlanNotActiveException,
)


# =============================================================================
# Test Fixtures
# =============================================================================

def make_plan(count: int = 3, amount: int = 30000, category: bool = True) -> InstallmentPlan:
    plan = InstallmentPlan(
        ledger_id=uuid4(),
        credit_card_account_id=uuid4(),
        purchase_amount_cents=amount,
        purchase_date=date(2025, 1, 10),
        description="Headphones",
        number_of_installments=count,
        installment_amount_cents=amount // count,
        frequency=Frequency.MONTHLY,
        start_date=date(2025, 1, 15),
        category_account_id=uuid4() if category else None,
    )
    plan.schedule = [
        ScheduleRow(
            plan_id=plan.id,
            installment_number=i + 1,
            due_date=date(2025, 1 + i, 15),
            scheduled_amount_cents=amount // count,
        )
        for i in range(count)
    ]
    return plan


def settle(row: ScheduleRow) -> None:
    row.status = ScheduleStatus.PROCESSED
    row.processed_date = row.due_date
    row.actual_amount_cents = row.scheduled_amount_cents


# =============================================================================
# Derived Figures Tests
# =============================================================================

class TestDerivedFigures:
    """Tests for the plan's computed properties."""

    def test_new_plan_figures(self):
        plan = make_plan()

        assert plan.is_active
        assert plan.remaining_installments == 3
        assert plan.remaining_amount_cents == 30000
        assert plan.processed_count == 0
        assert plan.next_due_date == date(2025, 1, 15)

    def test_figures_after_processing(self):
        plan = make_plan()
        settle(plan.schedule[0])
        plan.completed_installments = 1

        assert plan.remaining_installments == 2
        assert plan.remaining_amount_cents == 20000
        assert plan.processed_count == 1
        assert plan.next_due_date == date(2025, 2, 15)

    def test_next_due_date_none_when_nothing_scheduled(self):
        plan = make_plan(count=2, amount=20000)
        for row in plan.schedule:
            settle(row)

        assert plan.next_due_date is None
        assert plan.remaining_amount_cents == 0

    def test_installment_description(self):
        plan = make_plan(count=6, amount=60000)

        assert plan.installment_description(2) == "Installment 2/6: Headphones"


# =============================================================================
# State Guard Tests
# =============================================================================

class TestStateGuards:
    """Tests for the plan and row guards."""

    def test_ensure_active_rejects_completed_plan(self):
        plan = make_plan()
        plan.status = PlanStatus.COMPLETED

        with pytest.raises(PlanNotActiveException):
            plan.ensure_active()

    def test_ensure_category_assigned(self):
        make_plan().ensure_category_assigned()

        with pytest.raises(CategoryNotAssignedException):
            make_plan(category=False).ensure_category_assigned()

    def test_ensure_deletable(self):
        plan = make_plan()
        plan.ensure_deletable()

        settle(plan.schedule[1])
        with pytest.raises(PlanHasProcessedInstallmentsException):
            plan.ensure_deletable()

    @pytest.mark.parametrize("status", [ScheduleStatus.PROCESSED, ScheduleStatus.SKIPPED])
    def test_ensure_scheduled_rejects_settled_rows(self, status):
        row = make_plan().schedule[0]
        row.status = status

        with pytest.raises(InstallmentAlreadyProcessedException):
            row.ensure_scheduled()


# =============================================================================
# Amount Resolution Tests
# =============================================================================

class TestResolveAmount:
    """Tests for ScheduleRow.resolve_amount."""

    def test_defaults_to_scheduled_amount(self):
        row = make_plan().schedule[0]

        assert row.resolve_amount() == 10000

    def test_override_wins(self):
        row = make_plan().schedule[0]

        assert row.resolve_amount(12345) == 12345

    def test_oversized_override_rejected(self):
        row = make_plan().schedule[0]

        with pytest.raises(InvalidPlanRequestException):
            row.resolve_amount(MAX_AMOUNT_CENTS + 1)

    @pytest.mark.parametrize("amount", [0, -1])
    def test_non_positive_override_rejected(self, amount):
        row = make_plan().schedule[0]

        with pytest.raises(InvalidPlanRequestException):
            row.resolve_amount(amount)


# =============================================================================
# Request DTO Tests
# =============================================================================

class TestRequestValidation:
    """Tests for request DTO validation."""

    def test_create_request_errors(self):
        request = CreatePlanRequest(
            credit_card_account_id=uuid4(),
            purchase_amount_cents=0,
            purchase_date=date(2025, 1, 10),
            description=" ",
            number_of_installments=3,
            start_date=date(2025, 1, 15),
        )

        assert len(request.validate()) == 2

    def test_update_request_rejects_empty_description(self):
        assert UpdatePlanRequest(description="").validate()
        assert UpdatePlanRequest(notes="").validate() == []

    def test_update_request_needs_a_change(self):
        assert UpdatePlanRequest().validate() == ["No valid fields to update"]
        assert UpdatePlanRequest(category_provided=True).validate() == []

    def test_create_request_rejects_oversized_amount(self):
        request = CreatePlanRequest(
            credit_card_account_id=uuid4(),
            purchase_amount_cents=MAX_AMOUNT_CENTS + 1,
            purchase_date=date(2025, 1, 10),
            description="Yacht",
            number_of_installments=3,
            start_date=date(2025, 1, 15),
        )

        assert request.validate() == ["purchase_amount_cents is too large"]

    def test_schedule_query_rejects_negative_window(self):
        assert ScheduleQuery(due_within_days=-1).validate()

    def test_plan_response_serializes_dates(self):
        plan = make_plan()

        response = PlanResponse.from_entity(plan)

        assert response.start_date == "2025-01-15"
        assert response.next_due_date == "2025-01-15"
        assert response.schedule[2].due_date == "2025-03-15"
        assert response.remaining_amount_cents == 30000
