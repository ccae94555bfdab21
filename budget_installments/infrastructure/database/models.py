"""SQLAlchemy ORM models for budget ledgers and installment plans."""

from datetime import datetime, date
from uuid import uuid4

from sqlalchemy import (
    BigInteger,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class LedgerModel(Base):
    """A user's budget ledger."""

    __tablename__ = "ledgers"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )


class AccountModel(Base):
    """Account or budget category inside a ledger."""

    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("ledger_id", "name", name="uq_accounts_ledger_name"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    ledger_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("ledgers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    kind: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )


class LedgerTransactionModel(Base):
    """Posted double-entry movement."""

    __tablename__ = "ledger_transactions"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    ledger_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("ledgers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    posted_on: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    debit_account_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("accounts.id"),
        nullable=False,
    )
    credit_account_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("accounts.id"),
        nullable=False,
    )
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )


class InstallmentPlanModel(Base):
    """Persisted installment plan record."""

    __tablename__ = "installment_plans"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    ledger_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("ledgers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    original_transaction_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("ledger_transactions.id", ondelete="SET NULL"),
        nullable=True,
    )
    purchase_amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    credit_card_account_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("accounts.id"),
        nullable=False,
    )
    number_of_installments: Mapped[int] = mapped_column(Integer, nullable=False)
    installment_amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    frequency: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    category_account_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
    )
    completed_installments: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    plan_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )

    credit_card: Mapped["AccountModel"] = relationship(
        "AccountModel",
        foreign_keys=[credit_card_account_id],
    )
    category: Mapped["AccountModel | None"] = relationship(
        "AccountModel",
        foreign_keys=[category_account_id],
    )
    schedules: Mapped[list["InstallmentScheduleModel"]] = relationship(
        "InstallmentScheduleModel",
        back_populates="plan",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="InstallmentScheduleModel.installment_number",
    )


class InstallmentScheduleModel(Base):
    """Persisted schedule row within a plan."""

    __tablename__ = "installment_schedules"
    __table_args__ = (
        UniqueConstraint(
            "plan_id",
            "installment_number",
            name="uq_installment_schedules_plan_number",
        ),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    plan_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("installment_plans.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    installment_number: Mapped[int] = mapped_column(Integer, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    scheduled_amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="scheduled",
    )
    processed_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    actual_amount_cents: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    ledger_transaction_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("ledger_transactions.id", ondelete="SET NULL"),
        nullable=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )

    plan: Mapped["InstallmentPlanModel"] = relationship(
        "InstallmentPlanModel",
        back_populates="schedules",
    )
