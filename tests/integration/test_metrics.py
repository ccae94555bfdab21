"""
Integration tests for metrics tracking.

These tests verify:
1. Prometheus metrics are incremented correctly
2. Metrics endpoint returns valid Prometheus format
3. Business metrics (plans, processed installments) are tracked
4. Technical metrics (failures, HTTP requests) are recorded
"""

import pytest
from httpx import AsyncClient

from budget_installments import __version__
from budget_installments.core.metrics import REGISTRY


def sample(name: str, labels: dict = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


# =============================================================================
# Service Endpoint Tests
# =============================================================================

class TestServiceEndpoints:
    """Tests for GET /metrics and GET /health."""

    @pytest.mark.asyncio
    async def test_health_endpoint(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": __version__}

    @pytest.mark.asyncio
    async def test_metrics_endpoint_returns_prometheus_format(
        self,
        client: AsyncClient,
    ):
        """The /metrics endpoint should return Prometheus text format."""
        response = await client.get("/metrics")

        assert response.status_code == 200

        content_type = response.headers.get("content-type", "")
        assert "text/plain" in content_type or "text/openmetrics" in content_type

        content = response.text
        assert "# HELP" in content
        assert "budget_installment_plans_created_total" in content
        assert "budget_installment_processing_latency_seconds" in content

    @pytest.mark.asyncio
    async def test_responses_carry_request_id(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers.get("X-Request-ID") == "req-123"


# =============================================================================
# Business Metrics Tests
# =============================================================================

class TestBusinessMetrics:
    """Plan and processing counters move with the API."""

    @pytest.mark.asyncio
    async def test_plan_creation_increments_counter(self, create_plan):
        before = sample("budget_installment_plans_created_total", {"frequency": "weekly"})

        await create_plan(frequency="weekly", number_of_installments=2)

        after = sample("budget_installment_plans_created_total", {"frequency": "weekly"})
        assert after == before + 1

    @pytest.mark.asyncio
    async def test_processing_increments_counters(self, create_plan, process_row):
        plan = await create_plan(number_of_installments=2, purchase_amount_cents=20000)
        processed_before = sample("budget_installments_processed_total")
        completed_before = sample("budget_installment_plans_completed_total")
        amount_before = sample("budget_installment_amount_processed_cents_total")

        for row in plan["schedule"]:
            await process_row(row["schedule_id"], processed_date=row["due_date"])

        assert sample("budget_installments_processed_total") == processed_before + 2
        assert sample("budget_installment_plans_completed_total") == completed_before + 1
        assert sample("budget_installment_amount_processed_cents_total") == amount_before + 20000

    @pytest.mark.asyncio
    async def test_rejected_processing_records_failure(self, create_plan, process_row):
        plan = await create_plan(category_account_id=None)
        before = sample(
            "budget_installment_processing_failures_total",
            {"error_code": "CATEGORY_NOT_ASSIGNED"},
        )

        await process_row(plan["schedule"][0]["schedule_id"])

        after = sample(
            "budget_installment_processing_failures_total",
            {"error_code": "CATEGORY_NOT_ASSIGNED"},
        )
        assert after == before + 1

    @pytest.mark.asyncio
    async def test_plan_deletion_increments_counter(
        self,
        client: AsyncClient,
        create_plan,
        auth_headers: dict,
    ):
        plan = await create_plan()
        before = sample("budget_installment_plans_deleted_total")

        await client.delete(f"/v1/installment-plans/{plan['plan_id']}", headers=auth_headers)

        assert sample("budget_installment_plans_deleted_total") == before + 1


# =============================================================================
# HTTP Metrics Tests
# =============================================================================

class TestHttpMetrics:
    """HTTP requests are counted by route template."""

    @pytest.mark.asyncio
    async def test_requests_counted_by_route_template(
        self,
        client: AsyncClient,
        create_plan,
        auth_headers: dict,
    ):
        plan = await create_plan()
        labels = {
            "method": "GET",
            "endpoint": "/v1/installment-plans/{plan_id}",
            "status": "200",
        }
        before = sample("budget_http_requests_total", labels)

        await client.get(f"/v1/installment-plans/{plan['plan_id']}", headers=auth_headers)

        assert sample("budget_http_requests_total", labels) == before + 1

    @pytest.mark.asyncio
    async def test_nested_route_label_keeps_version_prefix(
        self,
        client: AsyncClient,
        seeded,
        auth_headers: dict,
    ):
        labels = {
            "method": "GET",
            "endpoint": "/v1/ledgers/{ledger_id}/installment-plans",
            "status": "200",
        }
        before = sample("budget_http_requests_total", labels)

        await client.get(f"/v1/ledgers/{seeded.ledger_id}/installment-plans", headers=auth_headers)

        assert sample("budget_http_requests_total", labels) == before + 1

    @pytest.mark.asyncio
    async def test_root_route_label_has_no_prefix(self, client: AsyncClient):
        labels = {"method": "GET", "endpoint": "/health", "status": "200"}
        before = sample("budget_http_requests_total", labels)

        await client.get("/health")

        assert sample("budget_http_requests_total", labels) == before + 1
