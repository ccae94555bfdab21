"""Application services (use cases)."""

from .installment_processor import InstallmentProcessor
from .plan_service import PlanService
from .report_service import ReportService

__all__ = [
    "InstallmentProcessor",
    "PlanService",
    "ReportService",
]
