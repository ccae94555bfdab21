"""Repository implementations."""

from .plan_repository import PostgresInstallmentPlanRepository

__all__ = [
    "PostgresInstallmentPlanRepository",
]
