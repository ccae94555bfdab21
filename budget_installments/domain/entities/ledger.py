"""Ledger-side entities owned by the posting subsystem."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import UUID, uuid4


class AccountKind(str, Enum):
    """Double-entry account kind."""

    ASSET = "asset"
    LIABILITY = "liability"  # Credit cards, loans
    EQUITY = "equity"  # Budget categories


@dataclass(frozen=True)
class Ledger:
    """A budget owned by one user."""

    id: UUID
    user_id: str
    name: str


@dataclass(frozen=True)
class Account:
    """An account or budget category inside a ledger."""

    id: UUID
    ledger_id: UUID
    name: str
    kind: AccountKind

    @property
    def is_liability(self) -> bool:
        return self.kind == AccountKind.LIABILITY

    @property
    def is_category(self) -> bool:
        return self.kind == AccountKind.EQUITY


@dataclass(frozen=True)
class LedgerTransaction:
    """
    Immutable record of one posted double-entry movement.

    Attributes:
        ledger_id: Ledger the movement belongs to
        date: Posting date
        description: Human-readable description
        debit_account_id: Account whose balance the debit increases
        credit_account_id: Account whose balance the credit decreases
        amount_cents: Positive amount in cents
    """

    ledger_id: UUID
    date: date
    description: str
    debit_account_id: UUID
    credit_account_id: UUID
    amount_cents: int
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
