"""SQLAlchemy models for bankbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class BankAccount(Base):
    """Bank account model."""

    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    institution = Column(String, nullable=True)
    account_type = Column(String, default="checking", nullable=False)
    current_balance = Column(Numeric(12, 2), default=0, nullable=False)
    last_reconciled_balance = Column(Numeric(12, 2), nullable=True)
    last_reconciled_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship("BankTransaction", back_populates="bank_account")
    reconciliations = relationship(
        "Reconciliation", back_populates="bank_account", cascade="all, delete-orphan"
    )


class Reconciliation(Base):
    """Statement reconciliation session model."""

    __tablename__ = "reconciliations"

    id = Column(Integer, primary_key=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)
    statement_date = Column(Date, nullable=False)
    statement_balance = Column(Numeric(12, 2), nullable=False)
    opening_balance = Column(Numeric(12, 2), default=0, nullable=False)
    cleared_balance = Column(Numeric(12, 2), default=0, nullable=False)
    difference = Column(Numeric(12, 2), default=0, nullable=False)
    status = Column(String, default="in_progress", nullable=False)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    bank_account = relationship("BankAccount", back_populates="reconciliations")
    transactions = relationship("BankTransaction", back_populates="reconciliation")


class BankTransaction(Base):
    """Bank transaction model.

    ``date`` holds the ISO date produced by the importer as text.
    """

    __tablename__ = "bank_transactions"

    id = Column(Integer, primary_key=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)
    date = Column(String, nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(String, nullable=False)
    payee = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    check_number = Column(String, nullable=True)
    memo = Column(String, nullable=True)
    status = Column(String, default="unreviewed", nullable=False)
    import_id = Column(String, nullable=True, index=True)
    reconciliation_id = Column(Integer, ForeignKey("reconciliations.id"), nullable=True)
    is_reconciled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    bank_account = relationship("BankAccount", back_populates="transactions")
    reconciliation = relationship("Reconciliation", back_populates="transactions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
