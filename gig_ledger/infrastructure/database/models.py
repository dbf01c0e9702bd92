"""SQLAlchemy ORM models for obligations, transactions, days off, cycle settings and cards"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Date, DateTime, Integer, Numeric, Text, JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    # Listing order relies on microsecond resolution
    return datetime.now(timezone.utc)


class ObligationRecord(Base):
    """Recurring or one-off income/expense definition"""

    __tablename__ = "obligation"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    kind = Column(String(16), nullable=False)
    recurrence = Column(String(16), nullable=False)
    anchor_date = Column(Date, nullable=False)
    total_installments = Column(Integer, nullable=True)
    category = Column(Text, nullable=True)
    linked_account_id = Column(Text, nullable=True)
    # Sorted lists of YYYY-MM-DD strings
    excluded_dates = Column(JSON, nullable=False, default=list)
    settled_dates = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())


class TransactionRecord(Base):
    """Manually recorded earning or spending"""

    __tablename__ = "ledger_transaction"

    id = Column(String(36), primary_key=True, default=_new_id)
    amount = Column(Numeric(12, 2), nullable=False)
    kind = Column(String(16), nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class DayOffRecord(Base):
    """Calendar day marked as not worked"""

    __tablename__ = "day_off"

    date = Column(Date, primary_key=True)


class CycleSettingsRecord(Base):
    """Single-row billing cycle configuration"""

    __tablename__ = "cycle_settings"

    id = Column(Integer, primary_key=True, default=1)
    start_day = Column(Integer, nullable=False, default=1)
    end_day = Column(Integer, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())


class CreditCardRecord(Base):
    """Credit card that expense obligations are billed to"""

    __tablename__ = "credit_card"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    color = Column(String(16), nullable=False, default="")
    credit_limit = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
