"""
Integration tests for purchases paid in installments.

These tests verify:
1. POST /v1/ledgers/{ledger_id}/purchases records the outflow and its plan together
2. A rejected or failed purchase leaves neither a transaction nor a plan
"""

from typing import Callable

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_installments.infrastructure.database import (
    InstallmentPlanModel,
    LedgerTransactionModel,
)


@pytest.fixture
def purchase_request(seeded) -> Callable[..., dict]:
    """Build a purchase body, overriding any top-level field."""
    def build(**overrides) -> dict:
        body = {
            "credit_card_account_id": seeded.card_id,
            "category_account_id": seeded.category_id,
            "amount_cents": 90000,
            "purchase_date": "2025-02-01",
            "description": "Sofa",
            "installment": {
                "number_of_installments": 3,
                "start_date": "2025-03-01",
                "frequency": "monthly",
            },
        }
        body.update(overrides)
        return body

    return build


async def count_rows(session: AsyncSession, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


# =============================================================================
# Purchase Creation Tests
# =============================================================================

class TestCreatePurchase:
    """Tests for POST /v1/ledgers/{ledger_id}/purchases."""

    @pytest.mark.asyncio
    async def test_purchase_creates_transaction_and_plan(
        self,
        client: AsyncClient,
        seeded,
        purchase_request,
        auth_headers: dict,
        test_session: AsyncSession,
    ):
        response = await client.post(
            f"/v1/ledgers/{seeded.ledger_id}/purchases",
            json=purchase_request(),
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()
        plan = data["plan"]

        assert plan["original_transaction_id"] == data["transaction_id"]
        assert plan["purchase_amount_cents"] == 90000
        assert plan["purchase_date"] == "2025-02-01"
        assert plan["category_account_id"] == seeded.category_id
        assert [r["due_date"] for r in plan["schedule"]] == [
            "2025-03-01",
            "2025-04-01",
            "2025-05-01",
        ]

        txn = (
            await test_session.execute(
                select(LedgerTransactionModel).where(
                    LedgerTransactionModel.id == data["transaction_id"]
                )
            )
        ).scalar_one()
        assert txn.amount_cents == 90000
        assert txn.debit_account_id == seeded.category_id
        assert txn.credit_account_id == seeded.card_id
        assert txn.posted_on.isoformat() == "2025-02-01"

    @pytest.mark.asyncio
    async def test_purchase_plan_can_be_processed(
        self,
        client: AsyncClient,
        seeded,
        purchase_request,
        process_row,
        auth_headers: dict,
    ):
        response = await client.post(
            f"/v1/ledgers/{seeded.ledger_id}/purchases",
            json=purchase_request(),
            headers=auth_headers,
        )
        schedule_id = response.json()["plan"]["schedule"][0]["schedule_id"]

        processed = await process_row(schedule_id, processed_date="2025-03-01")

        assert processed.status_code == 200
        assert processed.json()["schedule"]["actual_amount_cents"] == 30000

    @pytest.mark.asyncio
    async def test_non_liability_card_rejected_without_side_effects(
        self,
        client: AsyncClient,
        seeded,
        purchase_request,
        auth_headers: dict,
        test_session: AsyncSession,
    ):
        response = await client.post(
            f"/v1/ledgers/{seeded.ledger_id}/purchases",
            json=purchase_request(credit_card_account_id=seeded.checking_id),
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert await count_rows(test_session, LedgerTransactionModel) == 0
        assert await count_rows(test_session, InstallmentPlanModel) == 0

    @pytest.mark.asyncio
    async def test_out_of_bounds_count_rejected(
        self,
        client: AsyncClient,
        seeded,
        purchase_request,
        auth_headers: dict,
        test_session: AsyncSession,
    ):
        response = await client.post(
            f"/v1/ledgers/{seeded.ledger_id}/purchases",
            json=purchase_request(
                installment={"number_of_installments": 40, "start_date": "2025-03-01"},
            ),
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert await count_rows(test_session, LedgerTransactionModel) == 0

    @pytest.mark.asyncio
    async def test_oversized_amount_rejected(
        self,
        client: AsyncClient,
        seeded,
        purchase_request,
        auth_headers: dict,
        test_session: AsyncSession,
    ):
        response = await client.post(
            f"/v1/ledgers/{seeded.ledger_id}/purchases",
            json=purchase_request(amount_cents=2**63),
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert await count_rows(test_session, LedgerTransactionModel) == 0

    @pytest.mark.asyncio
    async def test_missing_installment_terms_is_422(
        self,
        client: AsyncClient,
        seeded,
        purchase_request,
        auth_headers: dict,
    ):
        body = purchase_request()
        del body["installment"]

        response = await client.post(
            f"/v1/ledgers/{seeded.ledger_id}/purchases",
            json=body,
            headers=auth_headers,
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_foreign_ledger_is_404(
        self,
        client: AsyncClient,
        seeded,
        purchase_request,
        other_headers: dict,
    ):
        response = await client.post(
            f"/v1/ledgers/{seeded.ledger_id}/purchases",
            json=purchase_request(),
            headers=other_headers,
        )

        assert response.status_code == 404


# =============================================================================
# Rollback Tests
# =============================================================================

class TestPurchaseRollback:
    """A failed posting stores no plan."""

    @pytest.mark.asyncio
    async def test_failed_posting_stores_no_plan(
        self,
        client: AsyncClient,
        seeded,
        purchase_request,
        failing_ledger,
        auth_headers: dict,
        test_session: AsyncSession,
    ):
        response = await client.post(
            f"/v1/ledgers/{seeded.ledger_id}/purchases",
            json=purchase_request(),
            headers=auth_headers,
        )

        assert response.status_code == 500
        assert response.json()["error"] == "PERSISTENCE_ERROR"
        assert await count_rows(test_session, InstallmentPlanModel) == 0
