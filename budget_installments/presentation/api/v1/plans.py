"""API endpoints for installment plans."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Response

from budget_installments.application.dto import (
    CreatePlanRequest,
    PlanResponse,
    UpdatePlanRequest,
)
from budget_installments.application.services import PlanService
from budget_installments.core.dependencies import get_plan_service, get_tenant_context
from budget_installments.domain.entities import TenantContext
from budget_installments.presentation.schemas import (
    ErrorResponseSchema,
    PlanCreateSchema,
    PlanListResponseSchema,
    PlanResponseSchema,
    PlanUpdateSchema,
)

plans_router = APIRouter(
    responses={
        401: {"model": ErrorResponseSchema, "description": "Missing caller identity"},
        404: {"model": ErrorResponseSchema, "description": "Plan or ledger not found"},
    },
)


def to_plan_schema(plan: PlanResponse) -> PlanResponseSchema:
    return PlanResponseSchema.model_validate(plan, from_attributes=True)


@plans_router.post(
    "/ledgers/{ledger_id}/installment-plans",
    response_model=PlanResponseSchema,
    status_code=201,
    summary="Create Installment Plan",
    description="""
    Split a credit-card purchase into dated installments.

    The whole schedule is created up front. Every installment but the last
    gets the rounded base amount; the last one absorbs the remainder.
    """,
    responses={
        201: {"description": "Plan created"},
        400: {"model": ErrorResponseSchema, "description": "Invalid plan request"},
    },
)
async def create_plan(
    ledger_id: Annotated[UUID, Path(description="UUID of the ledger")],
    request: PlanCreateSchema,
    tenant: Annotated[TenantContext, Depends(get_tenant_context)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanResponseSchema:
    dto = CreatePlanRequest(
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
    )

    response = await plan_service.create_plan(tenant, ledger_id, dto)

    return to_plan_schema(response)


@plans_router.get(
    "/ledgers/{ledger_id}/installment-plans",
    response_model=PlanListResponseSchema,
    summary="List Installment Plans",
    description="Retrieve every installment plan of a ledger, newest first.",
)
async def list_plans(
    ledger_id: Annotated[UUID, Path(description="UUID of the ledger")],
    tenant: Annotated[TenantContext, Depends(get_tenant_context)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanListResponseSchema:
    plans = await plan_service.list_plans(tenant, ledger_id)

    return PlanListResponseSchema(
        ledger_id=str(ledger_id),
        plans=[to_plan_schema(plan) for plan in plans],
    )


@plans_router.get(
    "/installment-plans/{plan_id}",
    response_model=PlanResponseSchema,
    summary="Get Installment Plan",
    description="""
    Retrieve an installment plan by its ID.

    Returns the plan details including every schedule row with its due
    date, amount and current status.
    """,
)
async def get_plan(
    plan_id: Annotated[UUID, Path(description="UUID of the plan to retrieve")],
    tenant: Annotated[TenantContext, Depends(get_tenant_context)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanResponseSchema:
    response = await plan_service.get_plan(tenant, plan_id)

    return to_plan_schema(response)


@plans_router.patch(
    "/installment-plans/{plan_id}",
    response_model=PlanResponseSchema,
    summary="Update Installment Plan",
    description="""
    Edit the description, notes, metadata or category of a plan, and
    optionally re-split the unpaid balance over a new number of
    remaining installments (active plans only).
    """,
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid update"},
        409: {"model": ErrorResponseSchema, "description": "Plan is not active"},
    },
)
async def update_plan(
    plan_id: Annotated[UUID, Path(description="UUID of the plan to update")],
    request: PlanUpdateSchema,
    tenant: Annotated[TenantContext, Depends(get_tenant_context)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanResponseSchema:
    category_provided = "category_account_id" in request.model_fields_set

    dto = UpdatePlanRequest(
        description=request.description,
        notes=request.notes,
        metadata=request.metadata,
        category_account_id=request.category_account_id or None,
        category_provided=category_provided,
        remaining_installments=request.remaining_installments,
    )

    response = await plan_service.update_plan(tenant, plan_id, dto)

    return to_plan_schema(response)


@plans_router.delete(
    "/installment-plans/{plan_id}",
    status_code=204,
    summary="Delete Installment Plan",
    description="Delete a plan and its schedule. Refused once any installment was processed.",
    responses={
        204: {"description": "Plan deleted"},
        409: {"model": ErrorResponseSchema, "description": "Plan has processed installments"},
    },
)
async def delete_plan(
    plan_id: Annotated[UUID, Path(description="UUID of the plan to delete")],
    tenant: Annotated[TenantContext, Depends(get_tenant_context)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> Response:
    await plan_service.delete_plan(tenant, plan_id)

    return Response(status_code=204)
