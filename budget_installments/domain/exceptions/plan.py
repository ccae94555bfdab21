"""Plan-related domain exceptions."""

from .base import ConflictException, NotFoundException, ValidationException


class PlanNotFoundException(NotFoundException):
    """Raised when a plan cannot be found."""

    def __init__(self, plan_id: str):
        super().__init__(
            message=f"Installment plan not found: {plan_id}",
            code="PLAN_NOT_FOUND",
        )
        self.plan_id = plan_id


class ScheduleNotFoundException(NotFoundException):
    """Raised when a schedule row cannot be found."""

    def __init__(self, schedule_id: str):
        super().__init__(
            message=f"Installment schedule not found: {schedule_id}",
            code="SCHEDULE_NOT_FOUND",
        )
        self.schedule_id = schedule_id


class InvalidPlanRequestException(ValidationException):
    """Raised when a plan request is invalid."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_PLAN_REQUEST",
        )


class CategoryNotAssignedException(ValidationException):
    """Raised when processing a plan that has no category."""

    def __init__(self, plan_id: str):
        super().__init__(
            message="Installment plan must have a category assigned before processing",
            code="CATEGORY_NOT_ASSIGNED",
        )
        self.plan_id = plan_id


class InstallmentAlreadyProcessedException(ConflictException):
    """Raised when a schedule row is no longer scheduled."""

    def __init__(self, schedule_id: str, status: str = "processed"):
        super().__init__(
            message=f"Installment {schedule_id} is already {status}",
            code="INSTALLMENT_ALREADY_PROCESSED",
        )
        self.schedule_id = schedule_id
        self.status = status


class PlanNotActiveException(ConflictException):
    """Raised when an operation requires an active plan."""

    def __init__(self, plan_id: str, status: str):
        super().__init__(
            message=f"Installment plan {plan_id} is {status}, not active",
            code="PLAN_NOT_ACTIVE",
        )
        self.plan_id = plan_id
        self.status = status


class PlanHasProcessedInstallmentsException(ConflictException):
    """Raised when deleting a plan with processed installments."""

    def __init__(self, plan_id: str, processed_count: int):
        super().__init__(
            message=(
                f"Cannot delete installment plan {plan_id}: "
                f"{processed_count} installment(s) already processed"
            ),
            code="PLAN_HAS_PROCESSED_INSTALLMENTS",
        )
        self.plan_id = plan_id
        self.processed_count = processed_count


class ScheduleNotReschedulableException(ConflictException):
    """Raised when the processed rows do not form a contiguous prefix."""

    def __init__(self, plan_id: str):
        super().__init__(
            message=f"Installment plan {plan_id} has out-of-order processed installments",
            code="SCHEDULE_NOT_RESCHEDULABLE",
        )
        self.plan_id = plan_id
