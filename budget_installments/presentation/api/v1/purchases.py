"""API endpoint for purchases paid in installments."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path

from budget_installments.application.dto import PurchaseWithPlanRequest
from budget_installments.application.services import PlanService
from budget_installments.core.dependencies import get_plan_service, get_tenant_context
from budget_installments.domain.entities import TenantContext
from budget_installments.presentation.schemas import (
    ErrorResponseSchema,
    PurchaseCreateSchema,
    PurchaseResponseSchema,
)

purchases_router = APIRouter(
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid purchase"},
        401: {"model": ErrorResponseSchema, "description": "Missing caller identity"},
        404: {"model": ErrorResponseSchema, "description": "Ledger or account not found"},
    },
)


@purchases_router.post(
    "/ledgers/{ledger_id}/purchases",
    response_model=PurchaseResponseSchema,
    status_code=201,
    summary="Record Purchase In Installments",
    description="""
    Record a credit-card purchase and create its installment plan in one
    step. The outflow transaction becomes the plan's original transaction.
    """,
)
async def create_purchase(
    ledger_id: Annotated[UUID, Path(description="UUID of the ledger")],
    request: PurchaseCreateSchema,
    tenant: Annotated[TenantContext, Depends(get_tenant_context)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PurchaseResponseSchema:
    dto = PurchaseWithPlanRequest(
        credit_card_account_id=request.credit_card_account_id,
        category_account_id=request.category_account_id,
        amount_cents=request.amount_cents,
        purchase_date=request.purchase_date,
        description=request.description,
        number_of_installments=request.installment.number_of_installments,
        start_date=request.installment.start_date,
        frequency=request.installment.frequency,
        notes=request.installment.notes,
    )

    response = await plan_service.create_purchase_with_plan(tenant, ledger_id, dto)

    return PurchaseResponseSchema.model_validate(response, from_attributes=True)
