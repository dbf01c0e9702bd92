"""Data access layer for ledger entities"""

from datetime import date
from decimal import Decimal
from typing import Callable, List, Optional, Set

from sqlalchemy.orm import Session

from gig_ledger.config import settings
from gig_ledger.domain.exceptions import (
    CreditCardNotFoundError,
    ObligationNotFoundError,
    TransactionNotFoundError,
)
from gig_ledger.domain.models import CreditCard, CycleConfig, RecurringObligation, Transaction
from gig_ledger.infrastructure.database.models import (
    CreditCardRecord,
    CycleSettingsRecord,
    DayOffRecord,
    ObligationRecord,
    TransactionRecord,
)
from gig_ledger.utils.date_utils import parse_local_date, to_iso_date

SETTINGS_ROW_ID = 1


class ObligationRepository:
    """Repository for recurring obligations"""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[RecurringObligation]:
        records = self.db.query(ObligationRecord).order_by(ObligationRecord.created_at, ObligationRecord.id).all()
        return [_to_obligation(r) for r in records]

    def get(self, obligation_id: str, for_update: bool = False) -> RecurringObligation:
        return _to_obligation(self._get_record(obligation_id, for_update=for_update))

    def create(self, obligation: RecurringObligation) -> RecurringObligation:
        record = ObligationRecord(id=obligation.id)
        _apply(record, obligation)
        self.db.add(record)
        self.db.flush()
        return obligation

    def update(
        self,
        obligation_id: str,
        change: Callable[[RecurringObligation], RecurringObligation],
    ) -> RecurringObligation:
        """
        Read-modify-write a single obligation.

        The row is locked for the rest of the transaction where the backend
        supports it, so concurrent toggles cannot drop each other's dates.
        """
        updated = change(self.get(obligation_id, for_update=True))
        return self.save(updated)

    def save(self, obligation: RecurringObligation) -> RecurringObligation:
        """Overwrite an existing row with the given definition"""
        record = self._get_record(obligation.id)
        _apply(record, obligation)
        self.db.flush()
        return obligation

    def delete(self, obligation_id: str) -> None:
        record = self._get_record(obligation_id)
        self.db.delete(record)
        self.db.flush()

    def _get_record(self, obligation_id: str, for_update: bool = False) -> ObligationRecord:
        query = self.db.query(ObligationRecord).filter(ObligationRecord.id == obligation_id)
        if for_update:
            query = query.with_for_update()
        record = query.first()
        if record is None:
            raise ObligationNotFoundError(f"Obligation {obligation_id} not found")
        return record


class TransactionRepository:
    """Repository for manual transactions"""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Transaction]:
        records = self.db.query(TransactionRecord).order_by(TransactionRecord.date.desc()).all()
        return [_to_transaction(r) for r in records]

    def list_between(self, start: date, end: date) -> List[Transaction]:
        records = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.date >= start, TransactionRecord.date <= end)
            .order_by(TransactionRecord.date.desc())
            .all()
        )
        return [_to_transaction(r) for r in records]

    def create(self, transaction: Transaction) -> Transaction:
        self.db.add(
            TransactionRecord(
                id=transaction.id,
                amount=transaction.amount,
                kind=transaction.kind,
                date=transaction.date,
                description=transaction.description,
            )
        )
        self.db.flush()
        return transaction

    def delete(self, transaction_id: str) -> None:
        record = self.db.query(TransactionRecord).filter(TransactionRecord.id == transaction_id).first()
        if record is None:
            raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
        self.db.delete(record)
        self.db.flush()


class DayOffRepository:
    """Repository for day-off markers"""

    def __init__(self, db: Session):
        self.db = db

    def list_dates(self) -> Set[date]:
        return {r.date for r in self.db.query(DayOffRecord).all()}

    def toggle(self, day: date) -> bool:
        """Flip a day's marker; returns True when the day is now off"""
        record = self.db.get(DayOffRecord, day)
        if record is not None:
            self.db.delete(record)
            self.db.flush()
            return False
        self.db.add(DayOffRecord(date=day))
        self.db.flush()
        return True


class CreditCardRepository:
    """Repository for credit cards"""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[CreditCard]:
        records = self.db.query(CreditCardRecord).order_by(CreditCardRecord.created_at, CreditCardRecord.id).all()
        return [_to_card(r) for r in records]

    def get(self, card_id: str) -> CreditCard:
        return _to_card(self._get_record(card_id))

    def exists(self, card_id: str) -> bool:
        return self.db.get(CreditCardRecord, card_id) is not None

    def create(self, card: CreditCard) -> CreditCard:
        record = CreditCardRecord(id=card.id)
        _apply_card(record, card)
        self.db.add(record)
        self.db.flush()
        return card

    def save(self, card: CreditCard) -> CreditCard:
        _apply_card(self._get_record(card.id), card)
        self.db.flush()
        return card

    def delete(self, card_id: str) -> int:
        """
        Delete a card and unlink the obligations billed to it.

        Returns:
            Number of obligations that were unlinked
        """
        record = self._get_record(card_id)
        unlinked = (
            self.db.query(ObligationRecord)
            .filter(ObligationRecord.linked_account_id == card_id)
            .update({ObligationRecord.linked_account_id: None}, synchronize_session="fetch")
        )
        self.db.delete(record)
        self.db.flush()
        return unlinked

    def _get_record(self, card_id: str) -> CreditCardRecord:
        record = self.db.get(CreditCardRecord, card_id)
        if record is None:
            raise CreditCardNotFoundError(f"Credit card {card_id} not found")
        return record


class SettingsRepository:
    """Repository for the billing cycle configuration"""

    def __init__(self, db: Session):
        self.db = db

    def get_cycle_config(self) -> CycleConfig:
        record = self.db.get(CycleSettingsRecord, SETTINGS_ROW_ID)
        if record is None:
            return CycleConfig(
                start_day=settings.default_cycle_start_day,
                end_day=settings.default_cycle_end_day,
            )
        return CycleConfig(start_day=record.start_day, end_day=record.end_day)

    def save_cycle_config(self, config: CycleConfig) -> CycleConfig:
        record = self.db.get(CycleSettingsRecord, SETTINGS_ROW_ID)
        if record is None:
            record = CycleSettingsRecord(id=SETTINGS_ROW_ID)
            self.db.add(record)
        record.start_day = config.start_day
        record.end_day = config.end_day
        self.db.flush()
        return config


def _apply(record: ObligationRecord, obligation: RecurringObligation) -> None:
    record.title = obligation.title
    record.amount = obligation.amount
    record.kind = obligation.kind
    record.recurrence = obligation.recurrence
    record.anchor_date = obligation.anchor_date
    record.total_installments = obligation.total_installments
    record.category = obligation.category
    record.linked_account_id = obligation.linked_account_id
    record.excluded_dates = sorted(to_iso_date(d) for d in obligation.excluded_occurrences)
    record.settled_dates = sorted(to_iso_date(d) for d in obligation.settled_occurrences)


def _to_obligation(record: ObligationRecord) -> RecurringObligation:
    return RecurringObligation(
        id=record.id,
        title=record.title,
        amount=_to_decimal(record.amount),
        kind=record.kind,
        recurrence=record.recurrence,
        anchor_date=record.anchor_date,
        total_installments=record.total_installments,
        excluded_occurrences=frozenset(parse_local_date(d) for d in record.excluded_dates or []),
        settled_occurrences=frozenset(parse_local_date(d) for d in record.settled_dates or []),
        category=record.category,
        linked_account_id=record.linked_account_id,
    )


def _apply_card(record: CreditCardRecord, card: CreditCard) -> None:
    record.name = card.name
    record.color = card.color
    record.credit_limit = card.limit


def _to_card(record: CreditCardRecord) -> CreditCard:
    return CreditCard(
        id=record.id,
        name=record.name,
        color=record.color or "",
        limit=_to_decimal(record.credit_limit),
    )


def _to_transaction(record: TransactionRecord) -> Transaction:
    return Transaction(
        id=record.id,
        amount=_to_decimal(record.amount),
        kind=record.kind,
        date=record.date,
        description=record.description or "",
    )


def _to_decimal(value: Optional[Decimal]) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
