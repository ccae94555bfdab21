"""API endpoints for schedule rows."""

from typing import Annotated, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query

from budget_installments.application.dto import ProcessInstallmentRequest, ScheduleQuery
from budget_installments.application.services import InstallmentProcessor, PlanService
from budget_installments.core.dependencies import (
    get_installment_processor,
    get_plan_service,
    get_tenant_context,
)
from budget_installments.domain.entities import TenantContext
from budget_installments.presentation.schemas import (
    ErrorResponseSchema,
    ProcessInstallmentSchema,
    ProcessingResponseSchema,
    ScheduleListResponseSchema,
    ScheduleRowSchema,
)

schedules_router = APIRouter(
    responses={
        401: {"model": ErrorResponseSchema, "description": "Missing caller identity"},
        404: {"model": ErrorResponseSchema, "description": "Ledger or schedule row not found"},
    },
)


@schedules_router.get(
    "/ledgers/{ledger_id}/installment-schedules",
    response_model=ScheduleListResponseSchema,
    summary="List Schedule Rows",
    description="""
    List schedule rows of a ledger ordered by due date.

    `due_within_days` keeps scheduled rows falling due between today and
    today + N days.
    """,
)
async def list_schedules(
    ledger_id: Annotated[UUID, Path(description="UUID of the ledger")],
    tenant: Annotated[TenantContext, Depends(get_tenant_context)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
    plan_id: Annotated[Optional[UUID], Query(description="Only rows of this plan")] = None,
    status: Annotated[
        Optional[Literal["scheduled", "processed", "skipped"]],
        Query(description="Only rows in this status"),
    ] = None,
    due_within_days: Annotated[
        Optional[int],
        Query(ge=0, le=3650, description="Only rows due in the next N days"),
    ] = None,
) -> ScheduleListResponseSchema:
    rows = await plan_service.list_schedules(
        tenant,
        ledger_id,
        ScheduleQuery(
            plan_id=plan_id,
            status=status,
            due_within_days=due_within_days,
        ),
    )

    return ScheduleListResponseSchema(
        ledger_id=str(ledger_id),
        schedules=[
            ScheduleRowSchema.model_validate(row, from_attributes=True)
            for row in rows
        ],
    )


@schedules_router.post(
    "/installment-schedules/{schedule_id}/process",
    response_model=ProcessingResponseSchema,
    summary="Process Installment",
    description="""
    Process one scheduled installment.

    Moves the amount from the plan's category into the card's payment
    category, marks the row processed and advances the plan. The plan
    completes when its last installment is processed.
    """,
    responses={
        400: {"model": ErrorResponseSchema, "description": "No category or invalid amount"},
        409: {"model": ErrorResponseSchema, "description": "Already processed or plan not active"},
    },
)
async def process_installment(
    schedule_id: Annotated[UUID, Path(description="UUID of the schedule row")],
    tenant: Annotated[TenantContext, Depends(get_tenant_context)],
    processor: Annotated[InstallmentProcessor, Depends(get_installment_processor)],
    request: Annotated[Optional[ProcessInstallmentSchema], Body()] = None,
) -> ProcessingResponseSchema:
    request = request or ProcessInstallmentSchema()

    response = await processor.process_installment(
        tenant,
        schedule_id,
        ProcessInstallmentRequest(
            actual_amount_cents=request.actual_amount_cents,
            processed_date=request.processed_date,
            notes=request.notes,
        ),
    )

    return ProcessingResponseSchema.model_validate(response, from_attributes=True)
