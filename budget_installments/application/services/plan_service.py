"""Plan service - handles installment plan use cases."""

from datetime import date, datetime, timedelta
from typing import List, Optional
from uuid import UUID

import structlog

from budget_installments.application.dto import (
    CreatePlanRequest,
    PlanResponse,
    PurchaseResponse,
    PurchaseWithPlanRequest,
    ScheduleQuery,
    ScheduleRowDTO,
    UpdatePlanRequest,
)
from budget_installments.core.metrics import record_plan_created, record_plan_deleted
from budget_installments.domain.entities import (
    InstallmentPlan,
    ScheduleStatus,
    TenantContext,
)
from budget_installments.domain.exceptions import (
    InvalidAccountKindException,
    InvalidPlanRequestException,
    PlanNotFoundException,
)
from budget_installments.domain.interfaces import (
    AccountResolver,
    InstallmentPlanRepository,
    LedgerPostingService,
    UnitOfWork,
)
from budget_installments.service.amortization import (
    InstallmentPolicySettings,
    PlanInput,
    generate_plan,
    policy_settings,
    reschedule_remaining,
)

logger = structlog.get_logger(__name__)


class PlanService:
    """
    Application service for installment plan use cases.

    Every write runs inside one unit of work, so a plan is stored with
    its whole schedule or not at all.
    """

    def __init__(
        self,
        plan_repository: InstallmentPlanRepository,
        account_resolver: AccountResolver,
        ledger_posting: LedgerPostingService,
        unit_of_work: UnitOfWork,
        settings: InstallmentPolicySettings = policy_settings,
    ):
        self._plan_repo = plan_repository
        self._accounts = account_resolver
        self._ledger = ledger_posting
        self._uow = unit_of_work
        self._settings = settings

    async def create_plan(
        self,
        tenant: TenantContext,
        ledger_id: UUID,
        request: CreatePlanRequest,
    ) -> PlanResponse:
        """
        Create a plan and materialize its full schedule.

        Args:
            tenant: The caller
            ledger_id: Ledger the purchase belongs to
            request: The plan definition

        Returns:
            PlanResponse with the plan and all schedule rows

        Raises:
            InvalidPlanRequestException: If the request is out of policy
            LedgerNotFoundException: If the ledger is not the caller's
            AccountNotFoundException: If an account does not resolve
            TransactionNotFoundException: If the original transaction does not resolve
        """
        errors = request.validate()
        if errors:
            raise InvalidPlanRequestException("; ".join(errors))

        log = logger.bind(user_id=tenant.user_id, ledger_id=str(ledger_id))

        async with self._uow.transaction():
            ledger = await self._accounts.resolve_ledger(tenant, ledger_id)

            credit_card = await self._accounts.resolve_account(
                ledger.id, request.credit_card_account_id
            )
            category = None
            if request.category_account_id is not None:
                category = await self._accounts.resolve_account(
                    ledger.id, request.category_account_id
                )
            if request.original_transaction_id is not None:
                await self._ledger.get_transaction(ledger.id, request.original_transaction_id)

            plan, _ = generate_plan(
                PlanInput(
                    ledger_id=ledger.id,
                    credit_card_account_id=request.credit_card_account_id,
                    purchase_amount_cents=request.purchase_amount_cents,
                    purchase_date=request.purchase_date,
                    description=request.description,
                    number_of_installments=request.number_of_installments,
                    start_date=request.start_date,
                    frequency=request.frequency,
                    category_account_id=request.category_account_id,
                    original_transaction_id=request.original_transaction_id,
                    notes=request.notes,
                    metadata=request.metadata,
                ),
                credit_card=credit_card,
                category=category,
                settings=self._settings,
            )

            await self._plan_repo.add(plan)

        record_plan_created(plan.frequency.value)
        log.info(
            "installment_plan_created",
            plan_id=str(plan.id),
            purchase_amount_cents=plan.purchase_amount_cents,
            num_installments=plan.number_of_installments,
            frequency=plan.frequency.value,
        )

        return PlanResponse.from_entity(plan)

    async def get_plan(self, tenant: TenantContext, plan_id: UUID) -> PlanResponse:
        """
        Retrieve a plan with its schedule.

        Raises:
            PlanNotFoundException: If plan not found for the caller
        """
        plan = await self._load_plan(tenant, plan_id)

        logger.info(
            "installment_plan_retrieved",
            plan_id=str(plan_id),
            user_id=tenant.user_id,
            num_installments=len(plan.schedule),
        )

        return PlanResponse.from_entity(plan)

    async def list_plans(
        self,
        tenant: TenantContext,
        ledger_id: UUID,
    ) -> List[PlanResponse]:
        """Retrieve all plans of one of the caller's ledgers, newest first."""
        ledger = await self._accounts.resolve_ledger(tenant, ledger_id)
        plans = await self._plan_repo.list_by_ledger(ledger.id)

        logger.info(
            "installment_plans_listed",
            user_id=tenant.user_id,
            ledger_id=str(ledger_id),
            count=len(plans),
        )

        return [PlanResponse.from_entity(plan) for plan in plans]

    async def update_plan(
        self,
        tenant: TenantContext,
        plan_id: UUID,
        request: UpdatePlanRequest,
    ) -> PlanResponse:
        """
        Edit plan fields and optionally reschedule the remaining installments.

        Descriptive fields and the category can change in any status.
        Rescheduling needs an active plan.

        Raises:
            PlanNotFoundException: If plan not found for the caller
            InvalidPlanRequestException: If a field or the new count is invalid
            AccountNotFoundException: If the new category does not resolve
            PlanNotActiveException: If rescheduling a plan that is not active
        """
        errors = request.validate()
        if errors:
            raise InvalidPlanRequestException("; ".join(errors))

        log = logger.bind(user_id=tenant.user_id, plan_id=str(plan_id))

        async with self._uow.transaction():
            plan = await self._load_plan(tenant, plan_id, for_update=True)

            if request.description is not None:
                plan.description = request.description.strip()
            if request.notes is not None:
                plan.notes = request.notes
            if request.metadata is not None:
                plan.metadata = dict(request.metadata)

            if request.category_provided:
                await self._assign_category(plan, request.category_account_id)

            if request.remaining_installments is not None:
                plan.ensure_active()
                if request.remaining_installments != plan.remaining_installments:
                    rows = reschedule_remaining(plan, request.remaining_installments)
                    await self._plan_repo.replace_scheduled_rows(plan.id, rows)
                    log.info(
                        "installment_plan_rescheduled",
                        remaining_installments=request.remaining_installments,
                        number_of_installments=plan.number_of_installments,
                    )

            plan.updated_at = datetime.utcnow()
            await self._plan_repo.update(plan)

            plan = await self._load_plan(tenant, plan_id)

        log.info("installment_plan_updated")

        return PlanResponse.from_entity(plan)

    async def delete_plan(self, tenant: TenantContext, plan_id: UUID) -> None:
        """
        Delete a plan that has no processed installments.

        Raises:
            PlanNotFoundException: If plan not found for the caller
            PlanHasProcessedInstallmentsException: If any row was processed
        """
        async with self._uow.transaction():
            plan = await self._load_plan(tenant, plan_id, for_update=True)
            plan.ensure_deletable()
            await self._plan_repo.delete(plan.id)

        record_plan_deleted()
        logger.info(
            "installment_plan_deleted",
            plan_id=str(plan_id),
            user_id=tenant.user_id,
        )

    async def list_schedules(
        self,
        tenant: TenantContext,
        ledger_id: UUID,
        query: ScheduleQuery,
        today: Optional[date] = None,
    ) -> List[ScheduleRowDTO]:
        """
        List schedule rows of a ledger, earliest due date first.

        `due_within_days` limits the result to scheduled rows falling due
        between today and today + N days.
        """
        errors = query.validate()
        if errors:
            raise InvalidPlanRequestException("; ".join(errors))

        status = None
        if query.status:
            try:
                status = ScheduleStatus(query.status)
            except ValueError:
                raise InvalidPlanRequestException(
                    f"Unsupported status: {query.status}. "
                    f"Must be one of: {', '.join(s.value for s in ScheduleStatus)}"
                )

        due_from = due_until = None
        if query.due_within_days is not None:
            due_from = today or date.today()
            due_until = due_from + timedelta(days=query.due_within_days)
            status = status or ScheduleStatus.SCHEDULED

        ledger = await self._accounts.resolve_ledger(tenant, ledger_id)
        rows = await self._plan_repo.list_schedules(
            ledger.id,
            plan_id=query.plan_id,
            status=status,
            due_from=due_from,
            due_until=due_until,
        )

        return [ScheduleRowDTO.from_entity(row) for row in rows]

    async def create_purchase_with_plan(
        self,
        tenant: TenantContext,
        ledger_id: UUID,
        request: PurchaseWithPlanRequest,
    ) -> PurchaseResponse:
        """
        Record a credit-card purchase and split it into installments.

        The outflow transaction and the plan linked to it are written
        together or not at all.

        Raises:
            InvalidPlanRequestException: If the request is out of policy
            InvalidAccountKindException: If the card is not a liability or
                the category is not a budget category
            LedgerNotFoundException: If the ledger is not the caller's
            AccountNotFoundException: If an account does not resolve
        """
        errors = request.validate()
        if errors:
            raise InvalidPlanRequestException("; ".join(errors))

        log = logger.bind(user_id=tenant.user_id, ledger_id=str(ledger_id))

        async with self._uow.transaction():
            ledger = await self._accounts.resolve_ledger(tenant, ledger_id)
            credit_card = await self._accounts.resolve_account(
                ledger.id, request.credit_card_account_id
            )
            category = await self._accounts.resolve_account(
                ledger.id, request.category_account_id
            )

            plan, _ = generate_plan(
                PlanInput(
                    ledger_id=ledger.id,
                    credit_card_account_id=request.credit_card_account_id,
                    purchase_amount_cents=request.amount_cents,
                    purchase_date=request.purchase_date,
                    description=request.description,
                    number_of_installments=request.number_of_installments,
                    start_date=request.start_date,
                    frequency=request.frequency,
                    category_account_id=request.category_account_id,
                    notes=request.notes,
                ),
                credit_card=credit_card,
                category=category,
                settings=self._settings,
            )

            transaction = await self._ledger.post_transaction(
                ledger_id=ledger.id,
                posted_on=request.purchase_date,
                description=plan.description,
                debit_account_id=category.id,
                credit_account_id=credit_card.id,
                amount_cents=request.amount_cents,
            )
            plan.original_transaction_id = transaction.id

            await self._plan_repo.add(plan)

        record_plan_created(plan.frequency.value)
        log.info(
            "purchase_with_installments_created",
            plan_id=str(plan.id),
            transaction_id=str(transaction.id),
            amount_cents=request.amount_cents,
            num_installments=plan.number_of_installments,
        )

        return PurchaseResponse(
            transaction_id=str(transaction.id),
            plan=PlanResponse.from_entity(plan),
        )

    async def _load_plan(
        self,
        tenant: TenantContext,
        plan_id: UUID,
        for_update: bool = False,
    ) -> InstallmentPlan:
        plan = await self._plan_repo.get_by_id(tenant, plan_id, for_update=for_update)

        if plan is None:
            logger.warning("installment_plan_not_found", plan_id=str(plan_id))
            raise PlanNotFoundException(str(plan_id))

        return plan

    async def _assign_category(
        self,
        plan: InstallmentPlan,
        category_account_id: Optional[UUID],
    ) -> None:
        if category_account_id is None:
            plan.category_account_id = None
            plan.category_name = None
            return

        category = await self._accounts.resolve_account(plan.ledger_id, category_account_id)
        if not category.is_category:
            raise InvalidAccountKindException(str(category.id), "budget category")

        plan.category_account_id = category.id
        plan.category_name = category.name
