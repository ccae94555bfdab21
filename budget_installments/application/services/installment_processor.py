"""Installment processor - posts one installment into the ledger."""

from datetime import date
from typing import Optional
from uuid import UUID

import structlog

from budget_installments.application.dto import (
    PlanResponse,
    ProcessInstallmentRequest,
    ProcessingResponse,
    ScheduleRowDTO,
)
from budget_installments.core.metrics import (
    record_installment_processed,
    record_processing_failure,
    track_processing_latency,
)
from budget_installments.domain.entities import PlanStatus, TenantContext
from budget_installments.domain.exceptions import (
    DomainException,
    InstallmentAlreadyProcessedException,
    PlanNotFoundException,
    ScheduleNotFoundException,
)
from budget_installments.domain.interfaces import (
    AccountResolver,
    InstallmentPlanRepository,
    LedgerPostingService,
    UnitOfWork,
)
from budget_installments.service.amortization import (
    InstallmentPolicySettings,
    policy_settings,
)

logger = structlog.get_logger(__name__)


class InstallmentProcessor:
    """
    Application service that processes schedule rows.

    Processing moves the installment amount from the plan's category into
    the card's payment category. The posting, the row update and the plan
    counter are one atomic write.
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

    async def process_installment(
        self,
        tenant: TenantContext,
        schedule_id: UUID,
        request: ProcessInstallmentRequest,
        today: Optional[date] = None,
    ) -> ProcessingResponse:
        """
        Process one scheduled installment.

        Preconditions are checked in order: the row exists, the row is
        still scheduled, the plan is active, the plan has a category and
        the resolved amount is positive.

        Args:
            tenant: The caller
            schedule_id: The schedule row to process
            request: Optional amount override, date and notes
            today: Date used when the request names none

        Returns:
            ProcessingResponse with the updated plan and row

        Raises:
            ScheduleNotFoundException: If the row is not the caller's
            InstallmentAlreadyProcessedException: If the row left the scheduled state
            PlanNotActiveException: If the plan is not active
            CategoryNotAssignedException: If the plan has no category
            InvalidPlanRequestException: If the amount is not positive
        """
        log = logger.bind(user_id=tenant.user_id, schedule_id=str(schedule_id))

        try:
            with track_processing_latency():
                async with self._uow.transaction():
                    row = await self._plan_repo.get_schedule_row(
                        tenant, schedule_id, for_update=True
                    )
                    if row is None:
                        raise ScheduleNotFoundException(str(schedule_id))
                    row.ensure_scheduled()

                    plan = await self._plan_repo.get_by_id(tenant, row.plan_id)
                    if plan is None:
                        raise PlanNotFoundException(str(row.plan_id))
                    plan.ensure_active()
                    plan.ensure_category_assigned()

                    amount_cents = row.resolve_amount(request.actual_amount_cents)
                    processed_on = request.processed_date or today or date.today()

                    credit_card_name = plan.credit_card_name
                    if credit_card_name is None:
                        credit_card = await self._accounts.resolve_account(
                            plan.ledger_id, plan.credit_card_account_id
                        )
                        credit_card_name = credit_card.name

                    payment_category = await self._accounts.ensure_payment_category(
                        plan.ledger_id,
                        self._settings.payment_category_name(credit_card_name),
                    )

                    transaction = await self._ledger.post_transaction(
                        ledger_id=plan.ledger_id,
                        posted_on=processed_on,
                        description=plan.installment_description(row.installment_number),
                        debit_account_id=payment_category.id,
                        credit_account_id=plan.category_account_id,
                        amount_cents=amount_cents,
                    )

                    updated = await self._plan_repo.mark_processed(
                        row.id,
                        processed_date=processed_on,
                        actual_amount_cents=amount_cents,
                        ledger_transaction_id=transaction.id,
                        notes=request.notes,
                    )
                    if not updated:
                        raise InstallmentAlreadyProcessedException(str(row.id))

                    plan = await self._plan_repo.increment_completed(plan.id)
        except DomainException as e:
            record_processing_failure(e.code)
            log.warning(
                "installment_processing_failed",
                error_code=e.code,
                error=e.message,
            )
            raise

        plan_completed = plan.status == PlanStatus.COMPLETED
        processed_row = next(r for r in plan.schedule if r.id == row.id)

        record_installment_processed(amount_cents, plan_completed)
        log.info(
            "installment_processed",
            plan_id=str(plan.id),
            installment_number=row.installment_number,
            amount_cents=amount_cents,
            transaction_id=str(transaction.id),
            completed_installments=plan.completed_installments,
            plan_completed=plan_completed,
        )

        return ProcessingResponse(
            plan=PlanResponse.from_entity(plan),
            schedule=ScheduleRowDTO.from_entity(processed_row),
            transaction_id=str(transaction.id),
            payment_category_id=str(payment_category.id),
            payment_category_name=payment_category.name,
            plan_completed=plan_completed,
        )
