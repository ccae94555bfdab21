"""Data Transfer Objects for application layer."""

from .plan import (
    CreatePlanRequest,
    PlanResponse,
    ScheduleQuery,
    ScheduleRowDTO,
    UpdatePlanRequest,
)
from .processing import ProcessInstallmentRequest, ProcessingResponse
from .purchase import PurchaseResponse, PurchaseWithPlanRequest
from .report import (
    ActivePlanSummary,
    CategoryBreakdown,
    MonthlyAmount,
    ProjectionMonth,
    ProjectionResponse,
    ReportResponse,
    ReportSummary,
)

__all__ = [
    "CreatePlanRequest",
    "PlanResponse",
    "ScheduleQuery",
    "ScheduleRowDTO",
    "UpdatePlanRequest",
    "ProcessInstallmentRequest",
    "ProcessingResponse",
    "PurchaseResponse",
    "PurchaseWithPlanRequest",
    "ActivePlanSummary",
    "CategoryBreakdown",
    "MonthlyAmount",
    "ProjectionMonth",
    "ProjectionResponse",
    "ReportResponse",
    "ReportSummary",
]
