"""SQL implementation of AccountResolver."""

from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from budget_installments.domain.entities import (
    Account,
    AccountKind,
    Ledger,
    TenantContext,
)
from budget_installments.domain.exceptions import (
    AccountNotFoundException,
    LedgerNotFoundException,
    PaymentCategoryConflictException,
)
from budget_installments.domain.interfaces import AccountResolver
from budget_installments.infrastructure.database.models import (
    AccountModel,
    LedgerModel,
)

logger = structlog.get_logger(__name__)

# Dialects with INSERT ... ON CONFLICT DO NOTHING
_UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class SqlAccountResolver(AccountResolver):
    """Resolves ledgers and accounts through the request's database session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def resolve_ledger(self, tenant: TenantContext, ledger_id: UUID) -> Ledger:
        stmt = select(LedgerModel).where(
            LedgerModel.id == str(ledger_id),
            LedgerModel.user_id == tenant.user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            raise LedgerNotFoundException(str(ledger_id))

        return Ledger(id=UUID(model.id), user_id=model.user_id, name=model.name)

    async def resolve_account(self, ledger_id: UUID, account_id: UUID) -> Account:
        stmt = select(AccountModel).where(
            AccountModel.id == str(account_id),
            AccountModel.ledger_id == str(ledger_id),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            raise AccountNotFoundException(str(account_id))

        return self._to_entity(model)

    async def ensure_payment_category(self, ledger_id: UUID, name: str) -> Account:
        dialect = self._session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Unsupported database dialect for upsert: {dialect}")

        stmt = (
            insert(AccountModel.__table__)
            .values(
                id=str(uuid4()),
                ledger_id=str(ledger_id),
                name=name,
                kind=AccountKind.EQUITY.value,
                created_at=datetime.utcnow(),
            )
            .on_conflict_do_nothing(index_elements=["ledger_id", "name"])
        )
        result = await self._session.execute(stmt)
        if result.rowcount:
            logger.info(
                "payment_category_created",
                ledger_id=str(ledger_id),
                name=name,
            )

        lookup = (
            select(AccountModel)
            .where(
                AccountModel.ledger_id == str(ledger_id),
                AccountModel.name == name,
            )
            .execution_options(populate_existing=True)
        )
        model = (await self._session.execute(lookup)).scalar_one()

        if model.kind != AccountKind.EQUITY.value:
            raise PaymentCategoryConflictException(name)

        return self._to_entity(model)

    def _to_entity(self, model: AccountModel) -> Account:
        return Account(
            id=UUID(model.id),
            ledger_id=UUID(model.ledger_id),
            name=model.name,
            kind=AccountKind(model.kind),
        )
