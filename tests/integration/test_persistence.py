"""
Integration tests for data persistence.

These tests exercise the SQL adapters directly:
1. Plan repository round trips and tenant scoping
2. Compare-and-set processing of schedule rows
3. Payment category upsert
4. Unit of work commit and rollback
"""

from datetime import date
from uuid import UUID, uuid4

import pytest
from sqlalchemy import BigInteger, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from budget_installments.domain.entities import (
    Account,
    AccountKind,
    Frequency,
    PlanStatus,
    ScheduleStatus,
    TenantContext,
)
from budget_installments.domain.exceptions import (
    PaymentCategoryConflictException,
    PersistenceException,
    ValidationException,
)
from budget_installments.infrastructure.database import (
    AccountModel,
    InstallmentPlanModel,
    InstallmentScheduleModel,
    LedgerTransactionModel,
    SqlAlchemyUnitOfWork,
)
from budget_installments.infrastructure.ledger import (
    SqlAccountResolver,
    SqlLedgerPostingService,
)
from budget_installments.infrastructure.repositories import (
    PostgresInstallmentPlanRepository,
)
from budget_installments.service.amortization import PlanInput, generate_plan


OWNER = TenantContext(user_id="user_1")
STRANGER = TenantContext(user_id="user_2")


def build_plan(seeded, count: int = 3, amount: int = 30000):
    card = Account(
        id=UUID(seeded.card_id),
        ledger_id=UUID(seeded.ledger_id),
        name="Visa",
        kind=AccountKind.LIABILITY,
    )
    category = Account(
        id=UUID(seeded.category_id),
        ledger_id=UUID(seeded.ledger_id),
        name="Electronics",
        kind=AccountKind.EQUITY,
    )
    plan, _ = generate_plan(
        PlanInput(
            ledger_id=UUID(seeded.ledger_id),
            credit_card_account_id=card.id,
            purchase_amount_cents=amount,
            purchase_date=date(2025, 1, 10),
            description="Headphones",
            number_of_installments=count,
            start_date=date(2025, 1, 15),
            frequency=Frequency.MONTHLY,
            category_account_id=category.id,
        ),
        credit_card=card,
        category=category,
    )
    return plan


# =============================================================================
# Plan Repository Tests
# =============================================================================

class TestPlanRepository:
    """Tests for PostgresInstallmentPlanRepository."""

    @pytest.mark.asyncio
    async def test_add_and_get_round_trip(self, test_session: AsyncSession, seeded):
        repo = PostgresInstallmentPlanRepository(test_session)
        plan = build_plan(seeded)

        await repo.add(plan)
        await test_session.commit()

        loaded = await repo.get_by_id(OWNER, plan.id)

        assert loaded is not None
        assert loaded.id == plan.id
        assert loaded.frequency == Frequency.MONTHLY
        assert loaded.credit_card_name == "Visa"
        assert loaded.category_name == "Electronics"
        assert [r.installment_number for r in loaded.schedule] == [1, 2, 3]
        assert [r.due_date for r in loaded.schedule] == [
            date(2025, 1, 15),
            date(2025, 2, 15),
            date(2025, 3, 15),
        ]

    @pytest.mark.asyncio
    async def test_get_is_scoped_to_tenant(self, test_session: AsyncSession, seeded):
        repo = PostgresInstallmentPlanRepository(test_session)
        plan = build_plan(seeded)
        await repo.add(plan)
        await test_session.commit()

        assert await repo.get_by_id(STRANGER, plan.id) is None
        assert await repo.get_schedule_row(STRANGER, plan.schedule[0].id) is None
        assert await repo.get_schedule_row(OWNER, plan.schedule[0].id) is not None

    @pytest.mark.asyncio
    async def test_mark_processed_is_compare_and_set(self, test_session: AsyncSession, seeded):
        """A row only leaves the scheduled state once."""
        repo = PostgresInstallmentPlanRepository(test_session)
        posting = SqlLedgerPostingService(test_session)
        plan = build_plan(seeded)
        await repo.add(plan)

        txn = await posting.post_transaction(
            ledger_id=plan.ledger_id,
            posted_on=date(2025, 1, 15),
            description="Installment 1/3: Headphones",
            debit_account_id=UUID(seeded.checking_id),
            credit_account_id=plan.category_account_id,
            amount_cents=10000,
        )
        row_id = plan.schedule[0].id

        first = await repo.mark_processed(row_id, date(2025, 1, 15), 10000, txn.id)
        second = await repo.mark_processed(row_id, date(2025, 1, 16), 10000, txn.id)
        await test_session.commit()

        assert first is True
        assert second is False

        row = await repo.get_schedule_row(OWNER, row_id)
        assert row.status == ScheduleStatus.PROCESSED
        assert row.processed_date == date(2025, 1, 15)
        assert row.ledger_transaction_id == txn.id

    @pytest.mark.asyncio
    async def test_increment_completed_finishes_plan(self, test_session: AsyncSession, seeded):
        repo = PostgresInstallmentPlanRepository(test_session)
        plan = build_plan(seeded, count=2, amount=20000)
        await repo.add(plan)

        after_first = await repo.increment_completed(plan.id)
        after_second = await repo.increment_completed(plan.id)
        await test_session.commit()

        assert after_first.completed_installments == 1
        assert after_first.status == PlanStatus.ACTIVE
        assert after_second.completed_installments == 2
        assert after_second.status == PlanStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_delete_removes_schedule_rows(self, test_session: AsyncSession, seeded):
        repo = PostgresInstallmentPlanRepository(test_session)
        plan = build_plan(seeded)
        await repo.add(plan)
        await test_session.commit()

        await repo.delete(plan.id)
        await test_session.commit()

        assert await repo.get_by_id(OWNER, plan.id) is None
        remaining = await test_session.execute(
            select(InstallmentScheduleModel).where(
                InstallmentScheduleModel.plan_id == str(plan.id)
            )
        )
        assert remaining.scalars().all() == []

    @pytest.mark.asyncio
    async def test_duplicate_installment_number_rejected(
        self,
        test_session: AsyncSession,
        seeded,
    ):
        repo = PostgresInstallmentPlanRepository(test_session)
        plan = build_plan(seeded)
        await repo.add(plan)
        await test_session.commit()

        test_session.add(
            InstallmentScheduleModel(
                id=str(uuid4()),
                plan_id=str(plan.id),
                installment_number=1,
                due_date=date(2025, 1, 15),
                scheduled_amount_cents=100,
            )
        )
        with pytest.raises(IntegrityError):
            await test_session.flush()
        await test_session.rollback()

    @pytest.mark.asyncio
    async def test_list_schedules_filters_by_window(self, test_session: AsyncSession, seeded):
        repo = PostgresInstallmentPlanRepository(test_session)
        plan = build_plan(seeded, count=6, amount=60000)
        await repo.add(plan)
        await test_session.commit()

        rows = await repo.list_schedules(
            UUID(seeded.ledger_id),
            status=ScheduleStatus.SCHEDULED,
            due_from=date(2025, 2, 1),
            due_until=date(2025, 4, 15),
        )

        assert [r.due_date for r in rows] == [
            date(2025, 2, 15),
            date(2025, 3, 15),
            date(2025, 4, 15),
        ]


# =============================================================================
# Ledger Adapter Tests
# =============================================================================

class TestLedgerAdapters:
    """Tests for the SQL ledger posting service and account resolver."""

    @pytest.mark.asyncio
    async def test_ensure_payment_category_is_idempotent(
        self,
        test_session: AsyncSession,
        seeded,
    ):
        resolver = SqlAccountResolver(test_session)
        ledger_id = UUID(seeded.ledger_id)

        first = await resolver.ensure_payment_category(ledger_id, "CC Payment: Visa")
        second = await resolver.ensure_payment_category(ledger_id, "CC Payment: Visa")

        assert first.id == second.id
        assert first.kind == AccountKind.EQUITY

    @pytest.mark.asyncio
    async def test_payment_category_name_taken_by_other_kind(
        self,
        test_session: AsyncSession,
        seeded,
    ):
        test_session.add(
            AccountModel(
                id=str(uuid4()),
                ledger_id=seeded.ledger_id,
                name="CC Payment: Visa",
                kind=AccountKind.ASSET.value,
            )
        )
        await test_session.commit()

        resolver = SqlAccountResolver(test_session)
        with pytest.raises(PaymentCategoryConflictException):
            await resolver.ensure_payment_category(UUID(seeded.ledger_id), "CC Payment: Visa")

    @pytest.mark.asyncio
    async def test_posting_rejects_same_account(self, test_session: AsyncSession, seeded):
        posting = SqlLedgerPostingService(test_session)

        with pytest.raises(ValidationException):
            await posting.post_transaction(
                ledger_id=UUID(seeded.ledger_id),
                posted_on=date(2025, 1, 15),
                description="noop",
                debit_account_id=UUID(seeded.category_id),
                credit_account_id=UUID(seeded.category_id),
                amount_cents=100,
            )


# =============================================================================
# Unit of Work Tests
# =============================================================================

class TestUnitOfWork:
    """Tests for SqlAlchemyUnitOfWork."""

    @pytest.mark.asyncio
    async def test_commit_on_success(self, test_session: AsyncSession, seeded):
        uow = SqlAlchemyUnitOfWork(test_session)
        repo = PostgresInstallmentPlanRepository(test_session)
        plan = build_plan(seeded)

        async with uow.transaction():
            await repo.add(plan)

        assert await repo.get_by_id(OWNER, plan.id) is not None

    @pytest.mark.asyncio
    async def test_domain_error_rolls_back(self, test_session: AsyncSession, seeded):
        uow = SqlAlchemyUnitOfWork(test_session)
        repo = PostgresInstallmentPlanRepository(test_session)
        plan = build_plan(seeded)

        with pytest.raises(ValidationException):
            async with uow.transaction():
                await repo.add(plan)
                raise ValidationException("stop")

        assert await repo.get_by_id(OWNER, plan.id) is None

    @pytest.mark.parametrize(
        "column",
        [
            LedgerTransactionModel.__table__.c.amount_cents,
            InstallmentPlanModel.__table__.c.purchase_amount_cents,
            InstallmentPlanModel.__table__.c.installment_amount_cents,
            InstallmentScheduleModel.__table__.c.scheduled_amount_cents,
            InstallmentScheduleModel.__table__.c.actual_amount_cents,
        ],
        ids=lambda column: column.name,
    )
    def test_cent_columns_are_64_bit(self, column):
        assert isinstance(column.type, BigInteger)

    @pytest.mark.asyncio
    async def test_storage_error_becomes_persistence_exception(
        self,
        test_session: AsyncSession,
        seeded,
    ):
        uow = SqlAlchemyUnitOfWork(test_session)
        repo = PostgresInstallmentPlanRepository(test_session)
        plan = build_plan(seeded)

        with pytest.raises(PersistenceException) as exc_info:
            async with uow.transaction():
                await repo.add(plan)
                test_session.add(
                    InstallmentScheduleModel(
                        id=str(uuid4()),
                        plan_id=str(plan.id),
                        installment_number=1,
                        due_date=date(2025, 1, 15),
                        scheduled_amount_cents=100,
                    )
                )
                await test_session.flush()

        assert isinstance(exc_info.value.__cause__, IntegrityError)
        assert await repo.get_by_id(OWNER, plan.id) is None
