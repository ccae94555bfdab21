"""PostgreSQL repository implementation for installment plans."""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import case, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from budget_installments.domain.entities import (
    Frequency,
    InstallmentPlan,
    PlanStatus,
    ScheduleRow,
    ScheduleStatus,
    TenantContext,
)
from budget_installments.domain.interfaces import InstallmentPlanRepository
from budget_installments.infrastructure.database.models import (
    InstallmentPlanModel,
    InstallmentScheduleModel,
    LedgerModel,
)


def _uuid(value: Optional[str]) -> Optional[UUID]:
    return UUID(value) if value is not None else None


def _str(value: Optional[UUID]) -> Optional[str]:
    return str(value) if value is not None else None


class PostgresInstallmentPlanRepository(InstallmentPlanRepository):
    """PostgreSQL-backed installment plan repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, plan: InstallmentPlan) -> InstallmentPlan:
        model = InstallmentPlanModel(
            id=str(plan.id),
            ledger_id=str(plan.ledger_id),
            original_transaction_id=_str(plan.original_transaction_id),
            purchase_amount_cents=plan.purchase_amount_cents,
            purchase_date=plan.purchase_date,
            description=plan.description,
            credit_card_account_id=str(plan.credit_card_account_id),
            number_of_installments=plan.number_of_installments,
            installment_amount_cents=plan.installment_amount_cents,
            frequency=plan.frequency.value,
            start_date=plan.start_date,
            category_account_id=_str(plan.category_account_id),
            status=plan.status.value,
            completed_installments=plan.completed_installments,
            notes=plan.notes,
            plan_metadata=dict(plan.metadata),
            created_at=plan.created_at,
            updated_at=plan.updated_at,
        )

        for row in plan.schedule:
            model.schedules.append(self._to_schedule_model(row))

        self._session.add(model)
        await self._session.flush()

        return plan

    async def get_by_id(
        self,
        tenant: TenantContext,
        plan_id: UUID,
        for_update: bool = False,
    ) -> Optional[InstallmentPlan]:
        stmt = (
            self._plan_query()
            .join(LedgerModel, LedgerModel.id == InstallmentPlanModel.ledger_id)
            .where(
                InstallmentPlanModel.id == str(plan_id),
                LedgerModel.user_id == tenant.user_id,
            )
        )
        if for_update:
            stmt = stmt.with_for_update(of=InstallmentPlanModel)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def list_by_ledger(self, ledger_id: UUID) -> List[InstallmentPlan]:
        stmt = (
            self._plan_query()
            .where(InstallmentPlanModel.ledger_id == str(ledger_id))
            .order_by(InstallmentPlanModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._to_entity(model) for model in models]

    async def update(self, plan: InstallmentPlan) -> InstallmentPlan:
        model = await self._session.get(InstallmentPlanModel, str(plan.id))

        model.description = plan.description
        model.notes = plan.notes
        model.plan_metadata = dict(plan.metadata)
        model.category_account_id = _str(plan.category_account_id)
        model.number_of_installments = plan.number_of_installments
        model.installment_amount_cents = plan.installment_amount_cents
        model.updated_at = plan.updated_at

        await self._session.flush()

        return plan

    async def delete(self, plan_id: UUID) -> None:
        await self._session.execute(
            delete(InstallmentScheduleModel)
            .where(InstallmentScheduleModel.plan_id == str(plan_id))
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(
            delete(InstallmentPlanModel)
            .where(InstallmentPlanModel.id == str(plan_id))
            .execution_options(synchronize_session=False)
        )

    async def replace_scheduled_rows(
        self,
        plan_id: UUID,
        rows: List[ScheduleRow],
    ) -> None:
        await self._session.execute(
            delete(InstallmentScheduleModel)
            .where(
                InstallmentScheduleModel.plan_id == str(plan_id),
                InstallmentScheduleModel.status == ScheduleStatus.SCHEDULED.value,
            )
            .execution_options(synchronize_session=False)
        )

        self._session.add_all([self._to_schedule_model(row) for row in rows])
        await self._session.flush()

    async def get_schedule_row(
        self,
        tenant: TenantContext,
        schedule_id: UUID,
        for_update: bool = False,
    ) -> Optional[ScheduleRow]:
        stmt = (
            select(InstallmentScheduleModel)
            .join(
                InstallmentPlanModel,
                InstallmentPlanModel.id == InstallmentScheduleModel.plan_id,
            )
            .join(LedgerModel, LedgerModel.id == InstallmentPlanModel.ledger_id)
            .where(
                InstallmentScheduleModel.id == str(schedule_id),
                LedgerModel.user_id == tenant.user_id,
            )
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update(of=InstallmentScheduleModel)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_schedule_entity(model)

    async def mark_processed(
        self,
        schedule_id: UUID,
        processed_date: date,
        actual_amount_cents: int,
        ledger_transaction_id: UUID,
        notes: Optional[str] = None,
    ) -> bool:
        values = {
            "status": ScheduleStatus.PROCESSED.value,
            "processed_date": processed_date,
            "actual_amount_cents": actual_amount_cents,
            "ledger_transaction_id": str(ledger_transaction_id),
        }
        if notes is not None:
            values["notes"] = notes

        stmt = (
            update(InstallmentScheduleModel)
            .where(
                InstallmentScheduleModel.id == str(schedule_id),
                InstallmentScheduleModel.status == ScheduleStatus.SCHEDULED.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)

        return result.rowcount == 1

    async def increment_completed(self, plan_id: UUID) -> InstallmentPlan:
        completed = InstallmentPlanModel.completed_installments + 1

        stmt = (
            update(InstallmentPlanModel)
            .where(InstallmentPlanModel.id == str(plan_id))
            .values(
                completed_installments=completed,
                status=case(
                    (
                        completed >= InstallmentPlanModel.number_of_installments,
                        PlanStatus.COMPLETED.value,
                    ),
                    else_=InstallmentPlanModel.status,
                ),
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

        result = await self._session.execute(
            self._plan_query().where(InstallmentPlanModel.id == str(plan_id))
        )
        return self._to_entity(result.scalar_one())

    async def list_schedules(
        self,
        ledger_id: UUID,
        plan_id: Optional[UUID] = None,
        status: Optional[ScheduleStatus] = None,
        due_from: Optional[date] = None,
        due_until: Optional[date] = None,
    ) -> List[ScheduleRow]:
        stmt = (
            select(InstallmentScheduleModel)
            .join(
                InstallmentPlanModel,
                InstallmentPlanModel.id == InstallmentScheduleModel.plan_id,
            )
            .where(InstallmentPlanModel.ledger_id == str(ledger_id))
            .execution_options(populate_existing=True)
        )

        if plan_id is not None:
            stmt = stmt.where(InstallmentScheduleModel.plan_id == str(plan_id))
        if status is not None:
            stmt = stmt.where(InstallmentScheduleModel.status == status.value)
        if due_from is not None:
            stmt = stmt.where(InstallmentScheduleModel.due_date >= due_from)
        if due_until is not None:
            stmt = stmt.where(InstallmentScheduleModel.due_date <= due_until)

        stmt = stmt.order_by(
            InstallmentScheduleModel.due_date,
            InstallmentScheduleModel.installment_number,
        )

        result = await self._session.execute(stmt)
        return [self._to_schedule_entity(model) for model in result.scalars().all()]

    def _plan_query(self):
        return (
            select(InstallmentPlanModel)
            .options(
                selectinload(InstallmentPlanModel.schedules),
                selectinload(InstallmentPlanModel.credit_card),
                selectinload(InstallmentPlanModel.category),
            )
            .execution_options(populate_existing=True)
        )

    def _to_schedule_model(self, row: ScheduleRow) -> InstallmentScheduleModel:
        return InstallmentScheduleModel(
            id=str(row.id),
            plan_id=str(row.plan_id),
            installment_number=row.installment_number,
            due_date=row.due_date,
            scheduled_amount_cents=row.scheduled_amount_cents,
            status=row.status.value,
            processed_date=row.processed_date,
            actual_amount_cents=row.actual_amount_cents,
            ledger_transaction_id=_str(row.ledger_transaction_id),
            notes=row.notes,
        )

    def _to_schedule_entity(self, model: InstallmentScheduleModel) -> ScheduleRow:
        return ScheduleRow(
            id=UUID(model.id),
            plan_id=UUID(model.plan_id),
            installment_number=model.installment_number,
            due_date=model.due_date,
            scheduled_amount_cents=model.scheduled_amount_cents,
            status=ScheduleStatus(model.status),
            processed_date=model.processed_date,
            actual_amount_cents=model.actual_amount_cents,
            ledger_transaction_id=_uuid(model.ledger_transaction_id),
            notes=model.notes,
        )

    def _to_entity(self, model: InstallmentPlanModel) -> InstallmentPlan:
        return InstallmentPlan(
            id=UUID(model.id),
            ledger_id=UUID(model.ledger_id),
            original_transaction_id=_uuid(model.original_transaction_id),
            purchase_amount_cents=model.purchase_amount_cents,
            purchase_date=model.purchase_date,
            description=model.description,
            credit_card_account_id=UUID(model.credit_card_account_id),
            number_of_installments=model.number_of_installments,
            installment_amount_cents=model.installment_amount_cents,
            frequency=Frequency(model.frequency),
            start_date=model.start_date,
            category_account_id=_uuid(model.category_account_id),
            status=PlanStatus(model.status),
            completed_installments=model.completed_installments,
            notes=model.notes,
            metadata=dict(model.plan_metadata or {}),
            schedule=[self._to_schedule_entity(s) for s in model.schedules],
            credit_card_name=model.credit_card.name if model.credit_card else None,
            category_name=model.category.name if model.category else None,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
