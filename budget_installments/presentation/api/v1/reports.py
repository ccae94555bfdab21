"""API endpoints for installment reporting."""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query

from budget_installments.application.services import ReportService
from budget_installments.core.dependencies import get_report_service, get_tenant_context
from budget_installments.domain.entities import TenantContext
from budget_installments.presentation.schemas import (
    ErrorResponseSchema,
    ProjectionResponseSchema,
    ReportResponseSchema,
)

reports_router = APIRouter(
    responses={
        401: {"model": ErrorResponseSchema, "description": "Missing caller identity"},
        404: {"model": ErrorResponseSchema, "description": "Ledger not found"},
    },
)


@reports_router.get(
    "/ledgers/{ledger_id}/installment-reports",
    response_model=ReportResponseSchema,
    summary="Installment Report",
    description="Summary, category breakdown and monthly figures over a ledger's plans.",
)
async def get_report(
    ledger_id: Annotated[UUID, Path(description="UUID of the ledger")],
    tenant: Annotated[TenantContext, Depends(get_tenant_context)],
    report_service: Annotated[ReportService, Depends(get_report_service)],
) -> ReportResponseSchema:
    report = await report_service.get_report(tenant, ledger_id)

    return ReportResponseSchema.model_validate(report, from_attributes=True)


@reports_router.get(
    "/ledgers/{ledger_id}/installment-projection",
    response_model=ProjectionResponseSchema,
    summary="Installment Projection",
    description="""
    Scheduled installment payments per month, starting with the current
    month. Months outside 1..12 are clamped.
    """,
)
async def get_projection(
    ledger_id: Annotated[UUID, Path(description="UUID of the ledger")],
    tenant: Annotated[TenantContext, Depends(get_tenant_context)],
    report_service: Annotated[ReportService, Depends(get_report_service)],
    months: Annotated[
        Optional[int],
        Query(description="Number of months to project (clamped to 1..12)"),
    ] = None,
) -> ProjectionResponseSchema:
    projection = await report_service.get_projection(tenant, ledger_id, months=months)

    return ProjectionResponseSchema.model_validate(projection, from_attributes=True)
