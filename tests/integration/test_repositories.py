"""Integration tests for the SQLAlchemy repositories"""

import pytest
from datetime import date
from decimal import Decimal
from dataclasses import replace
from gig_ledger.domain.exceptions import CreditCardNotFoundError, ObligationNotFoundError, TransactionNotFoundError
from gig_ledger.domain.models import CreditCard, CycleConfig, Transaction
from gig_ledger.domain.recurrence import exclude_occurrence, toggle_settled
from gig_ledger.infrastructure.database.repositories import (
    CreditCardRepository,
    DayOffRepository,
    ObligationRepository,
    SettingsRepository,
    TransactionRepository,
)

pytestmark = pytest.mark.integration


def test_obligation_round_trip_keeps_date_sets(db, motorcycle_loan):
    repo = ObligationRepository(db)
    repo.create(motorcycle_loan)
    repo.update("moto", lambda o: toggle_settled(o, date(2024, 2, 15)))
    repo.update("moto", lambda o: exclude_occurrence(o, date(2024, 3, 15)))
    db.commit()

    stored = repo.get("moto")
    assert stored.amount == Decimal("350.00")
    assert stored.total_installments == 12
    assert stored.settled_occurrences == frozenset({date(2024, 2, 15)})
    assert stored.excluded_occurrences == frozenset({date(2024, 3, 15)})


def test_missing_obligation_raises(db):
    repo = ObligationRepository(db)
    with pytest.raises(ObligationNotFoundError):
        repo.get("nope")
    with pytest.raises(ObligationNotFoundError):
        repo.delete("nope")


def test_transactions_filtered_by_period(db):
    repo = TransactionRepository(db)
    repo.create(Transaction(id="t1", amount=Decimal("40.00"), kind="income", date=date(2024, 2, 29)))
    repo.create(Transaction(id="t2", amount=Decimal("55.10"), kind="income", date=date(2024, 3, 1)))
    db.commit()

    assert [t.id for t in repo.list_between(date(2024, 3, 1), date(2024, 3, 31))] == ["t2"]
    assert [t.id for t in repo.list_all()] == ["t2", "t1"]

    repo.delete("t1")
    with pytest.raises(TransactionNotFoundError):
        repo.delete("t1")


def test_day_off_toggle(db):
    repo = DayOffRepository(db)
    assert repo.toggle(date(2024, 3, 16)) is True
    assert repo.list_dates() == {date(2024, 3, 16)}
    assert repo.toggle(date(2024, 3, 16)) is False
    assert repo.list_dates() == set()


def test_cycle_settings_default_then_saved(db):
    repo = SettingsRepository(db)
    assert repo.get_cycle_config() == CycleConfig(start_day=1, end_day=None)

    repo.save_cycle_config(CycleConfig(start_day=20, end_day=None))
    repo.save_cycle_config(CycleConfig(start_day=15, end_day=10))
    db.commit()

    assert repo.get_cycle_config() == CycleConfig(start_day=15, end_day=10)


def test_obligations_listed_in_insertion_order(db, rent):
    repo = ObligationRepository(db)
    ids = ["z", "m", "a", "q", "b"]
    for obligation_id in ids:
        repo.create(replace(rent, id=obligation_id))
    db.commit()

    assert [o.id for o in repo.list_all()] == ids


def test_credit_card_round_trip(db):
    repo = CreditCardRepository(db)
    repo.create(CreditCard(id="nubank", name="Nubank", color="#820ad1", limit=Decimal("1500.00")))
    repo.save(CreditCard(id="nubank", name="Nubank Ultravioleta", color="#820ad1", limit=Decimal("2000.00")))
    db.commit()

    card = repo.get("nubank")
    assert card.name == "Nubank Ultravioleta"
    assert card.limit == Decimal("2000.00")
    assert repo.exists("nubank")
    assert not repo.exists("inter")
    with pytest.raises(CreditCardNotFoundError):
        repo.get("inter")


def test_deleting_card_unlinks_obligations(db, rent):
    cards = CreditCardRepository(db)
    obligations = ObligationRepository(db)
    cards.create(CreditCard(id="nubank", name="Nubank"))
    obligations.create(replace(rent, linked_account_id="nubank"))
    obligations.create(replace(rent, id="phone", linked_account_id=None))
    db.commit()

    assert cards.delete("nubank") == 1
    db.commit()

    assert obligations.get("rent").linked_account_id is None
    assert cards.list_all() == []
    with pytest.raises(CreditCardNotFoundError):
        cards.delete("nubank")
