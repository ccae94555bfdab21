"""Pydantic schemas for API request/response validation."""

from .error import ErrorResponseSchema
from .plan import (
    PlanCreateSchema,
    PlanListResponseSchema,
    PlanResponseSchema,
    PlanUpdateSchema,
    ScheduleRowSchema,
)
from .purchase import (
    InstallmentTermsSchema,
    PurchaseCreateSchema,
    PurchaseResponseSchema,
)
from .report import ProjectionResponseSchema, ReportResponseSchema
from .schedule import (
    ProcessInstallmentSchema,
    ProcessingResponseSchema,
    ScheduleListResponseSchema,
)

__all__ = [
    "ErrorResponseSchema",
    "PlanCreateSchema",
    "PlanListResponseSchema",
    "PlanResponseSchema",
    "PlanUpdateSchema",
    "ScheduleRowSchema",
    "InstallmentTermsSchema",
    "PurchaseCreateSchema",
    "PurchaseResponseSchema",
    "ProjectionResponseSchema",
    "ReportResponseSchema",
    "ProcessInstallmentSchema",
    "ProcessingResponseSchema",
    "ScheduleListResponseSchema",
]
