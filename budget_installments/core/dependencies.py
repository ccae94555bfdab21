"""Dependency injection for FastAPI."""

from typing import Annotated

import structlog
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from budget_installments.application.services import (
    InstallmentProcessor,
    PlanService,
    ReportService,
)
from budget_installments.core.config import settings
from budget_installments.domain.entities import TenantContext
from budget_installments.domain.exceptions import MissingTenantException
from budget_installments.infrastructure.database import (
    SqlAlchemyUnitOfWork,
    get_db_session,
)
from budget_installments.infrastructure.ledger import (
    SqlAccountResolver,
    SqlLedgerPostingService,
)
from budget_installments.infrastructure.repositories import (
    PostgresInstallmentPlanRepository,
)


# Caller identity
async def get_tenant_context(request: Request) -> TenantContext:
    """Build the caller's TenantContext from the tenant header."""
    user_id = (request.headers.get(settings.tenant_header) or "").strip()
    if not user_id:
        raise MissingTenantException(settings.tenant_header)

    structlog.contextvars.bind_contextvars(user_id=user_id)
    return TenantContext(user_id=user_id)


# Repository dependencies
async def get_plan_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresInstallmentPlanRepository:
    """Get an InstallmentPlanRepository instance."""
    return PostgresInstallmentPlanRepository(session)


async def get_unit_of_work(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> SqlAlchemyUnitOfWork:
    """Get a UnitOfWork bound to the request session."""
    return SqlAlchemyUnitOfWork(session)


# Ledger collaborator dependencies
async def get_account_resolver(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> SqlAccountResolver:
    """Get an AccountResolver instance."""
    return SqlAccountResolver(session)


async def get_ledger_posting_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> SqlLedgerPostingService:
    """Get a LedgerPostingService instance."""
    return SqlLedgerPostingService(session)


# Service dependencies
async def get_plan_service(
    plan_repo: Annotated[PostgresInstallmentPlanRepository, Depends(get_plan_repository)],
    account_resolver: Annotated[SqlAccountResolver, Depends(get_account_resolver)],
    ledger_posting: Annotated[SqlLedgerPostingService, Depends(get_ledger_posting_service)],
    unit_of_work: Annotated[SqlAlchemyUnitOfWork, Depends(get_unit_of_work)],
) -> PlanService:
    """Get a PlanService instance with all dependencies."""
    return PlanService(
        plan_repository=plan_repo,
        account_resolver=account_resolver,
        ledger_posting=ledger_posting,
        unit_of_work=unit_of_work,
    )


async def get_installment_processor(
    plan_repo: Annotated[PostgresInstallmentPlanRepository, Depends(get_plan_repository)],
    account_resolver: Annotated[SqlAccountResolver, Depends(get_account_resolver)],
    ledger_posting: Annotated[SqlLedgerPostingService, Depends(get_ledger_posting_service)],
    unit_of_work: Annotated[SqlAlchemyUnitOfWork, Depends(get_unit_of_work)],
) -> InstallmentProcessor:
    """Get an InstallmentProcessor instance with all dependencies."""
    return InstallmentProcessor(
        plan_repository=plan_repo,
        account_resolver=account_resolver,
        ledger_posting=ledger_posting,
        unit_of_work=unit_of_work,
    )


async def get_report_service(
    plan_repo: Annotated[PostgresInstallmentPlanRepository, Depends(get_plan_repository)],
    account_resolver: Annotated[SqlAccountResolver, Depends(get_account_resolver)],
) -> ReportService:
    """Get a ReportService instance."""
    return ReportService(
        plan_repository=plan_repo,
        account_resolver=account_resolver,
    )
