"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional
from uuid import UUID

from budget_installments.domain.entities import (
    InstallmentPlan,
    ScheduleRow,
    ScheduleStatus,
    TenantContext,
)


class InstallmentPlanRepository(ABC):
    """
    Abstract repository for InstallmentPlan persistence.

    Every lookup that starts from an id is scoped to the caller's tenant:
    rows that belong to another user's ledger resolve as missing.
    """

    @abstractmethod
    async def add(self, plan: InstallmentPlan) -> InstallmentPlan:
        """
        Persist a new plan together with its schedule rows.

        Args:
            plan: The plan to save, schedule included

        Returns:
            The saved plan
        """
        ...

    @abstractmethod
    async def get_by_id(
        self,
        tenant: TenantContext,
        plan_id: UUID,
        for_update: bool = False,
    ) -> Optional[InstallmentPlan]:
        """
        Retrieve a plan and its schedule by ID.

        Args:
            tenant: The caller
            plan_id: The plan's unique identifier
            for_update: Lock the plan row until the transaction ends

        Returns:
            The plan if found in the caller's ledgers, None otherwise
        """
        ...

    @abstractmethod
    async def list_by_ledger(self, ledger_id: UUID) -> List[InstallmentPlan]:
        """
        Retrieve all plans of a ledger, newest first.

        The ledger must already be resolved for the caller.
        """
        ...

    @abstractmethod
    async def update(self, plan: InstallmentPlan) -> InstallmentPlan:
        """
        Write the editable plan fields back to storage.

        Covers description, notes, metadata, category, installment count
        and base amount. Schedule rows are not touched.
        """
        ...

    @abstractmethod
    async def delete(self, plan_id: UUID) -> None:
        """Delete a plan; its schedule rows go with it."""
        ...

    @abstractmethod
    async def replace_scheduled_rows(
        self,
        plan_id: UUID,
        rows: List[ScheduleRow],
    ) -> None:
        """
        Drop every still-scheduled row of a plan and insert `rows` instead.

        Processed and skipped rows are kept as they are.
        """
        ...

    @abstractmethod
    async def get_schedule_row(
        self,
        tenant: TenantContext,
        schedule_id: UUID,
        for_update: bool = False,
    ) -> Optional[ScheduleRow]:
        """
        Retrieve one schedule row by ID.

        Args:
            tenant: The caller
            schedule_id: The row's unique identifier
            for_update: Lock the row until the transaction ends

        Returns:
            The row if it belongs to one of the caller's plans, None otherwise
        """
        ...

    @abstractmethod
    async def mark_processed(
        self,
        schedule_id: UUID,
        processed_date: date,
        actual_amount_cents: int,
        ledger_transaction_id: UUID,
        notes: Optional[str] = None,
    ) -> bool:
        """
        Move a row from scheduled to processed.

        The write only applies while the row is still scheduled.

        Returns:
            True if the row was updated, False if it had already left
            the scheduled state
        """
        ...

    @abstractmethod
    async def increment_completed(self, plan_id: UUID) -> InstallmentPlan:
        """
        Add one to the plan's completed counter in storage.

        The plan switches to completed in the same statement once the
        counter reaches the installment count.

        Returns:
            The plan as stored after the increment
        """
        ...

    @abstractmethod
    async def list_schedules(
        self,
        ledger_id: UUID,
        plan_id: Optional[UUID] = None,
        status: Optional[ScheduleStatus] = None,
        due_from: Optional[date] = None,
        due_until: Optional[date] = None,
    ) -> List[ScheduleRow]:
        """
        Retrieve schedule rows of a ledger ordered by due date.

        Args:
            ledger_id: Ledger already resolved for the caller
            plan_id: Only rows of this plan
            status: Only rows in this status
            due_from: Only rows due on or after this date
            due_until: Only rows due on or before this date

        Returns:
            Matching schedule rows
        """
        ...
