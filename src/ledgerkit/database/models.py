"""SQLAlchemy models for the ledgerkit database."""

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
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(15, 2)


class Account(Base):
    """Chart-of-accounts model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False, index=True)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    nature = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_bank = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("company_id", "code", name="uq_account_company_code"),)


class FiscalPeriod(Base):
    """Fiscal period model."""

    __tablename__ = "fiscal_periods"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False, index=True)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_closed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    transactions = relationship("BankTransaction", back_populates="fiscal_period")


class MappingRule(Base):
    """Transaction mapping rule model."""

    __tablename__ = "mapping_rules"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False, index=True)
    name = Column(String, nullable=False)
    match_type = Column(String, nullable=False)
    pattern = Column(String, nullable=False)
    account_code = Column(String, nullable=False)
    priority = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class BankTransaction(Base):
    """Bank statement transaction model."""

    __tablename__ = "bank_transactions"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False, index=True)
    fiscal_period_id = Column(Integer, ForeignKey("fiscal_periods.id"), nullable=False)
    transaction_date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    debit_amount = Column(MONEY, default=0, nullable=False)
    credit_amount = Column(MONEY, default=0, nullable=False)
    balance = Column(MONEY, nullable=True)
    account_code = Column(String, nullable=True)
    debit_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    credit_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    fiscal_period = relationship("FiscalPeriod", back_populates="transactions")


class JournalEntry(Base):
    """Journal entry header model."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False, index=True)
    fiscal_period_id = Column(Integer, ForeignKey("fiscal_periods.id"), nullable=False)
    entry_date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    reference = Column(String, nullable=False, index=True)
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    source_transaction_id = Column(Integer, ForeignKey("bank_transactions.id"), nullable=True)

    # Relationships
    lines = relationship(
        "JournalEntryLine",
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryLine.id",
    )


class JournalEntryLine(Base):
    """Journal entry line model."""

    __tablename__ = "journal_entry_lines"

    id = Column(Integer, primary_key=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    debit_amount = Column(MONEY, default=0, nullable=False)
    credit_amount = Column(MONEY, default=0, nullable=False)
    description = Column(String, nullable=True)
    source_transaction_id = Column(Integer, ForeignKey("bank_transactions.id"), nullable=True)

    # Relationships
    journal_entry = relationship("JournalEntry", back_populates="lines")
    account = relationship("Account")


def _enable_sqlite_savepoints(engine) -> None:
    """Let pysqlite run SAVEPOINTs by emitting BEGIN ourselves."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_savepoints(engine)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
