"""SQL implementation of LedgerPostingService."""

from datetime import date, datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_installments.domain.entities import LedgerTransaction
from budget_installments.domain.exceptions import (
    TransactionNotFoundException,
    ValidationException,
)
from budget_installments.domain.interfaces import LedgerPostingService
from budget_installments.infrastructure.database.models import LedgerTransactionModel

logger = structlog.get_logger(__name__)


class SqlLedgerPostingService(LedgerPostingService):
    """
    Posts ledger transactions through the request's database session.

    Postings are flushed, never committed, so they live or die with the
    surrounding unit of work.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def post_transaction(
        self,
        ledger_id: UUID,
        posted_on: date,
        description: str,
        debit_account_id: UUID,
        credit_account_id: UUID,
        amount_cents: int,
    ) -> LedgerTransaction:
        if amount_cents <= 0:
            raise ValidationException("Posting amount must be greater than zero")
        if debit_account_id == credit_account_id:
            raise ValidationException("Debit and credit accounts must differ")

        transaction = LedgerTransaction(
            id=uuid4(),
            ledger_id=ledger_id,
            date=posted_on,
            description=description,
            debit_account_id=debit_account_id,
            credit_account_id=credit_account_id,
            amount_cents=amount_cents,
            created_at=datetime.utcnow(),
        )

        self._session.add(
            LedgerTransactionModel(
                id=str(transaction.id),
                ledger_id=str(ledger_id),
                posted_on=posted_on,
                description=description,
                debit_account_id=str(debit_account_id),
                credit_account_id=str(credit_account_id),
                amount_cents=amount_cents,
                created_at=transaction.created_at,
            )
        )
        await self._session.flush()

        logger.debug(
            "ledger_transaction_posted",
            transaction_id=str(transaction.id),
            ledger_id=str(ledger_id),
            amount_cents=amount_cents,
        )

        return transaction

    async def get_transaction(
        self,
        ledger_id: UUID,
        transaction_id: UUID,
    ) -> LedgerTransaction:
        stmt = select(LedgerTransactionModel).where(
            LedgerTransactionModel.id == str(transaction_id),
            LedgerTransactionModel.ledger_id == str(ledger_id),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            raise TransactionNotFoundException(str(transaction_id))

        return LedgerTransaction(
            id=UUID(model.id),
            ledger_id=UUID(model.ledger_id),
            date=model.posted_on,
            description=model.description,
            debit_account_id=UUID(model.debit_account_id),
            credit_account_id=UUID(model.credit_account_id),
            amount_cents=model.amount_cents,
            created_at=model.created_at,
        )
