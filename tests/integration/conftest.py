"""
Fixtures for integration tests.

Provides:
- Test client for FastAPI app
- In-memory database for testing
- A seeded ledger with a credit card, a budget category and a checking account
- A ledger posting service that fails, for rollback tests
"""

from dataclasses import dataclass
from datetime import date
from typing import AsyncGenerator, Callable
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from budget_installments.main import app
from budget_installments.core.dependencies import get_ledger_posting_service
from budget_installments.domain.entities import AccountKind, LedgerTransaction
from budget_installments.domain.interfaces import LedgerPostingService
from budget_installments.infrastructure.database import (
    AccountModel,
    Base,
    LedgerModel,
    get_db_session,
)


# =============================================================================
# Test Data
# =============================================================================

USER_ID = "user_1"
OTHER_USER_ID = "user_2"


@dataclass(frozen=True)
class SeededLedger:
    """IDs of the accounts created for a test ledger."""

    ledger_id: str
    card_id: str
    category_id: str
    checking_id: str
    other_ledger_id: str
    other_card_id: str
    other_category_id: str


def _account(ledger_id: str, name: str, kind: AccountKind) -> AccountModel:
    return AccountModel(id=str(uuid4()), ledger_id=ledger_id, name=name, kind=kind.value)


# =============================================================================
# Mock Collaborators
# =============================================================================

class FailingLedgerPostingService(LedgerPostingService):
    """Ledger posting service whose storage is unavailable."""

    def __init__(self):
        self.call_count = 0

    async def post_transaction(
        self,
        ledger_id: UUID,
        posted_on: date,
        description: str,
        debit_account_id: UUID,
        credit_account_id: UUID,
        amount_cents: int,
    ) -> LedgerTransaction:
        self.call_count += 1
        raise OperationalError("INSERT INTO ledger_transactions", {}, Exception("disk I/O error"))

    async def get_transaction(self, ledger_id: UUID, transaction_id: UUID) -> LedgerTransaction:
        raise OperationalError("SELECT FROM ledger_transactions", {}, Exception("disk I/O error"))


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(test_session: AsyncSession) -> SeededLedger:
    """
    Seed two ledgers.

    user_1 owns a ledger with a "Visa" credit card, a "Electronics"
    budget category and a checking account. user_2 owns a second ledger
    with its own card and category.
    """
    ledger = LedgerModel(id=str(uuid4()), user_id=USER_ID, name="Household")
    other_ledger = LedgerModel(id=str(uuid4()), user_id=OTHER_USER_ID, name="Other")
    test_session.add_all([ledger, other_ledger])
    await test_session.flush()

    card = _account(ledger.id, "Visa", AccountKind.LIABILITY)
    category = _account(ledger.id, "Electronics", AccountKind.EQUITY)
    checking = _account(ledger.id, "Checking", AccountKind.ASSET)
    other_card = _account(other_ledger.id, "Amex", AccountKind.LIABILITY)
    other_category = _account(other_ledger.id, "Travel", AccountKind.EQUITY)
    test_session.add_all([card, category, checking, other_card, other_category])
    await test_session.commit()

    return SeededLedger(
        ledger_id=ledger.id,
        card_id=card.id,
        category_id=category.id,
        checking_id=checking.id,
        other_ledger_id=other_ledger.id,
        other_card_id=other_card.id,
        other_category_id=other_category.id,
    )


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def client(test_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client bound to the in-memory database.

    Every request shares the test session, so committed state is visible
    to the test body through `test_session`.
    """
    async def override_get_db_session():
        yield test_session

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def failing_ledger(client: AsyncClient) -> FailingLedgerPostingService:
    """Make ledger postings fail for the rest of the test."""
    posting = FailingLedgerPostingService()
    app.dependency_overrides[get_ledger_posting_service] = lambda: posting
    return posting


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def auth_headers() -> dict:
    """Tenant header of the seeded ledger's owner."""
    return {"X-User-ID": USER_ID}


@pytest.fixture
def other_headers() -> dict:
    """Tenant header of a different user."""
    return {"X-User-ID": OTHER_USER_ID}


@pytest.fixture
def plan_request(seeded: SeededLedger) -> Callable[..., dict]:
    """Build a plan creation body, overriding any field."""
    def build(**overrides) -> dict:
        body = {
            "credit_card_account_id": seeded.card_id,
            "category_account_id": seeded.category_id,
            "purchase_amount_cents": 120000,
            "purchase_date": "2025-01-10",
            "description": "New laptop",
            "number_of_installments": 6,
            "start_date": "2025-01-15",
            "frequency": "monthly",
        }
        body.update(overrides)
        return {k: v for k, v in body.items() if v is not None}

    return build


@pytest.fixture
def create_plan(
    client: AsyncClient,
    seeded: SeededLedger,
    plan_request: Callable[..., dict],
    auth_headers: dict,
):
    """Create a plan through the API and return its JSON body."""
    async def create(**overrides) -> dict:
        response = await client.post(
            f"/v1/ledgers/{seeded.ledger_id}/installment-plans",
            json=plan_request(**overrides),
            headers=auth_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return create


@pytest.fixture
def process_row(client: AsyncClient, auth_headers: dict):
    """Process a schedule row through the API and return the response."""
    async def process(schedule_id: str, **body):
        return await client.post(
            f"/v1/installment-schedules/{schedule_id}/process",
            json=body,
            headers=auth_headers,
        )

    return process
