"""Prometheus metrics for the installments service.

Business Metrics:
- budget_installment_plans_created_total: Plans created by frequency
- budget_installment_plans_deleted_total: Plans deleted before processing
- budget_installments_processed_total: Installments processed
- budget_installment_plans_completed_total: Plans that reached completion

Technical Metrics:
- budget_installment_processing_latency_seconds: Processing latency
- budget_installment_processing_failures_total: Failed processing attempts
- budget_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics
# =============================================================================

plans_created_total = Counter(
    "budget_installment_plans_created_total",
    "Total number of installment plans created",
    ["frequency"],  # weekly, bi-weekly, monthly
)

plans_deleted_total = Counter(
    "budget_installment_plans_deleted_total",
    "Total number of installment plans deleted",
)

installments_processed_total = Counter(
    "budget_installments_processed_total",
    "Total number of installments processed into the ledger",
)

plans_completed_total = Counter(
    "budget_installment_plans_completed_total",
    "Total number of installment plans that reached completion",
)

installment_amount_processed_cents = Counter(
    "budget_installment_amount_processed_cents_total",
    "Sum of processed installment amounts in cents",
)


# =============================================================================
# Technical Metrics
# =============================================================================

processing_latency = Histogram(
    "budget_installment_processing_latency_seconds",
    "Installment processing latency in seconds",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

processing_failures = Counter(
    "budget_installment_processing_failures_total",
    "Total number of failed installment processing attempts",
    ["error_code"],
)

http_requests_total = Counter(
    "budget_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "budget_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_plan_created(frequency: str) -> None:
    """Record a newly created plan."""
    plans_created_total.labels(frequency=frequency).inc()


def record_plan_deleted() -> None:
    """Record a deleted plan."""
    plans_deleted_total.inc()


def record_installment_processed(amount_cents: int, plan_completed: bool) -> None:
    """Record a processed installment and, when it was the last one, the plan."""
    installments_processed_total.inc()
    installment_amount_processed_cents.inc(amount_cents)
    if plan_completed:
        plans_completed_total.inc()


def record_processing_failure(error_code: str) -> None:
    """Record a rejected or failed processing attempt."""
    processing_failures.labels(error_code=error_code).inc()


@contextmanager
def track_processing_latency() -> Generator[None, None, None]:
    """Context manager to track installment processing latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        processing_latency.observe(duration)


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
