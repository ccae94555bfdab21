"""Ledger collaborator interfaces."""

from abc import ABC, abstractmethod
from datetime import date
from uuid import UUID

from budget_installments.domain.entities import (
    Account,
    Ledger,
    LedgerTransaction,
    TenantContext,
)


class LedgerPostingService(ABC):
    """
    Double-entry posting engine.

    Postings join the caller's open unit of work; nothing is committed
    until the surrounding transaction is.
    """

    @abstractmethod
    async def post_transaction(
        self,
        ledger_id: UUID,
        posted_on: date,
        description: str,
        debit_account_id: UUID,
        credit_account_id: UUID,
        amount_cents: int,
    ) -> LedgerTransaction:
        """
        Post one movement between two accounts.

        Args:
            ledger_id: Ledger to post into
            posted_on: Posting date
            description: Human-readable description
            debit_account_id: Account to debit
            credit_account_id: Account to credit
            amount_cents: Positive amount in cents

        Returns:
            The posted transaction
        """
        ...

    @abstractmethod
    async def get_transaction(
        self,
        ledger_id: UUID,
        transaction_id: UUID,
    ) -> LedgerTransaction:
        """
        Fetch a posted transaction.

        Raises:
            TransactionNotFoundException: If it is not part of the ledger
        """
        ...


class AccountResolver(ABC):
    """Resolves ledgers and accounts within the caller's tenant scope."""

    @abstractmethod
    async def resolve_ledger(self, tenant: TenantContext, ledger_id: UUID) -> Ledger:
        """
        Fetch a ledger owned by the caller.

        Raises:
            LedgerNotFoundException: If the ledger is missing or owned by
                someone else
        """
        ...

    @abstractmethod
    async def resolve_account(self, ledger_id: UUID, account_id: UUID) -> Account:
        """
        Fetch an account of a ledger.

        Raises:
            AccountNotFoundException: If the account is not in the ledger
        """
        ...

    @abstractmethod
    async def ensure_payment_category(self, ledger_id: UUID, name: str) -> Account:
        """
        Return the budget category called `name`, creating it if absent.

        Safe under concurrent callers: at most one account per
        (ledger, name) ever exists.

        Raises:
            PaymentCategoryConflictException: If the name belongs to an
                account that is not a budget category
        """
        ...
