"""Projection of recurring obligations into dated occurrences, plus per-occurrence bookkeeping"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from gig_ledger.domain.exceptions import InvalidObligationError, OccurrenceNotFoundError
from gig_ledger.domain.models import (
    EXPENSE,
    INSTALLMENTS,
    SINGLE,
    CardInvoice,
    CreditCard,
    Occurrence,
    RecurringObligation,
)
from gig_ledger.utils.date_utils import clamp_day, month_index

ZERO = Decimal("0")

EDITABLE_FIELDS = {"title", "amount", "kind", "category", "linked_account_id"}


def project_occurrences(
    obligations: Iterable[RecurringObligation],
    window_start: date,
    window_end: date,
) -> List[Occurrence]:
    """
    Expand obligations into the occurrences falling inside ``[window_start, window_end]``.

    Each obligation yields at most one occurrence per window, so the window is
    expected to span a single billing cycle. Output follows input order.
    """
    occurrences: List[Occurrence] = []
    for obligation in obligations:
        occurrence = _project_one(obligation, window_start, window_end)
        if occurrence is not None:
            occurrences.append(occurrence)
    return occurrences


def _project_one(
    obligation: RecurringObligation,
    window_start: date,
    window_end: date,
) -> Optional[Occurrence]:
    anchor = obligation.anchor_date
    if anchor > window_end:
        return None

    if obligation.recurrence == SINGLE:
        occurrence_date = anchor if window_start <= anchor <= window_end else None
    else:
        occurrence_date = _monthly_candidate(anchor, window_start, window_end)

    if occurrence_date is None or occurrence_date in obligation.excluded_occurrences:
        return None

    installment_index = None
    if obligation.recurrence == INSTALLMENTS:
        month_diff = month_index(occurrence_date) - month_index(anchor)
        if not 0 <= month_diff < (obligation.total_installments or 0):
            return None
        installment_index = month_diff + 1

    return Occurrence(
        obligation_id=obligation.id,
        occurrence_date=occurrence_date,
        amount=_coerce_amount(obligation.amount),
        kind=obligation.kind,
        title=obligation.title,
        is_settled=occurrence_date in obligation.settled_occurrences,
        installment_index=installment_index,
        total_installments=obligation.total_installments if installment_index else None,
        category=obligation.category,
        linked_account_id=obligation.linked_account_id,
    )


def _monthly_candidate(anchor: date, window_start: date, window_end: date) -> Optional[date]:
    # Anchor day in the window's first month, falling back to its last month
    candidate = clamp_day(window_start.year, window_start.month, anchor.day)
    if candidate < window_start:
        candidate = clamp_day(window_end.year, window_end.month, anchor.day)

    if window_start <= candidate <= window_end and candidate >= anchor:
        return candidate
    return None


def occurs_on(obligation: RecurringObligation, day: date) -> bool:
    """Whether the obligation has a live (not excluded) occurrence on ``day``"""
    return _project_one(obligation, day, day) is not None


def _require_occurrence(obligation: RecurringObligation, day: date) -> None:
    if not occurs_on(obligation, day):
        raise OccurrenceNotFoundError(f"Obligation {obligation.id} has no occurrence on {day.isoformat()}")


def toggle_settled(obligation: RecurringObligation, occurrence_date: date) -> RecurringObligation:
    """Flip the paid/received state of one occurrence"""
    _require_occurrence(obligation, occurrence_date)
    settled = set(obligation.settled_occurrences)
    if occurrence_date in settled:
        settled.discard(occurrence_date)
    else:
        settled.add(occurrence_date)
    return replace(obligation, settled_occurrences=frozenset(settled))


def exclude_occurrence(obligation: RecurringObligation, occurrence_date: date) -> RecurringObligation:
    """Remove a single occurrence without deleting the series"""
    _require_occurrence(obligation, occurrence_date)
    return replace(
        obligation,
        excluded_occurrences=obligation.excluded_occurrences | {occurrence_date},
    )


def edit_occurrence(
    obligation: RecurringObligation,
    occurrence_date: date,
    new_id: str,
    **changes,
) -> Tuple[RecurringObligation, Optional[RecurringObligation]]:
    """
    Apply an edit to one occurrence.

    A ``single`` obligation is updated in place and no clone is returned.
    A recurring one is split: the original excludes ``occurrence_date`` and a
    new single obligation anchored there carries the edited fields, keeping
    the settled state of that occurrence.

    Returns:
        (updated original, new single obligation or None)

    Raises:
        InvalidObligationError: On unknown fields or an invalid result
        OccurrenceNotFoundError: If the series has no live occurrence on that date
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise InvalidObligationError(f"Fields cannot be edited per occurrence: {sorted(unknown)}")
    _require_occurrence(obligation, occurrence_date)

    if obligation.recurrence == SINGLE:
        return replace(obligation, **changes).validate(), None

    was_settled = occurrence_date in obligation.settled_occurrences
    local_version = replace(
        obligation,
        id=new_id,
        recurrence=SINGLE,
        anchor_date=occurrence_date,
        total_installments=None,
        excluded_occurrences=frozenset(),
        settled_occurrences=frozenset({occurrence_date}) if was_settled else frozenset(),
        **changes,
    ).validate()

    return exclude_occurrence(obligation, occurrence_date), local_version


def invoice_totals(occurrences: Iterable[Occurrence]) -> Dict[str, Decimal]:
    """Expense total per linked account (credit card invoice view)"""
    totals: Dict[str, Decimal] = {}
    for occurrence in occurrences:
        if occurrence.kind != EXPENSE or not occurrence.linked_account_id:
            continue
        totals[occurrence.linked_account_id] = (
            totals.get(occurrence.linked_account_id, ZERO) + occurrence.amount
        )
    return totals


def card_invoices(occurrences: Iterable[Occurrence], cards: Iterable[CreditCard]) -> List[CardInvoice]:
    """
    Invoice of every card for the occurrences of one period.

    Cards without linked expenses get a zero total. ``available`` is left
    unset for cards with no limit.
    """
    totals = invoice_totals(occurrences)
    invoices: List[CardInvoice] = []
    for card in cards:
        total = totals.get(card.id, ZERO)
        has_limit = card.limit > 0
        invoices.append(
            CardInvoice(
                card_id=card.id,
                name=card.name,
                total=total,
                limit=card.limit,
                available=card.limit - total if has_limit else None,
                over_limit=has_limit and total > card.limit,
            )
        )
    return invoices


def _coerce_amount(amount: Decimal) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))
