"""/v1/obligations - Recurring obligation definitions and per-occurrence bookkeeping"""

import uuid
from dataclasses import replace
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from gig_ledger.api.dependencies import get_occurrence_date, get_request_id
from gig_ledger.api.v1.schemas import (
    ObligationRequest,
    ObligationSchema,
    OccurrenceEditRequest,
    OccurrenceEditResponse,
)
from gig_ledger.domain.exceptions import (
    CreditCardNotFoundError,
    InvalidObligationError,
    ObligationNotFoundError,
    OccurrenceNotFoundError,
)
from gig_ledger.domain.models import INCOME, RecurringObligation
from gig_ledger.domain.recurrence import edit_occurrence, exclude_occurrence, toggle_settled
from gig_ledger.infrastructure.database.repositories import CreditCardRepository, ObligationRepository
from gig_ledger.infrastructure.database.session import get_db
from gig_ledger.infrastructure.observability.logging import log_obligation_change
from gig_ledger.infrastructure.observability.metrics import record_obligation_mutation

router = APIRouter()


def to_schema(obligation: RecurringObligation) -> ObligationSchema:
    return ObligationSchema(
        id=obligation.id,
        title=obligation.title,
        amount=obligation.amount,
        kind=obligation.kind,
        recurrence=obligation.recurrence,
        anchor_date=obligation.anchor_date,
        total_installments=obligation.total_installments,
        excluded_occurrences=sorted(obligation.excluded_occurrences),
        settled_occurrences=sorted(obligation.settled_occurrences),
        category=obligation.category,
        linked_account_id=obligation.linked_account_id,
    )


def _default_title(kind: str) -> str:
    return "Fixed income" if kind == INCOME else "Fixed expense"


def _ensure_card_exists(db: Session, card_id: Optional[str]) -> None:
    if card_id and not CreditCardRepository(db).exists(card_id):
        raise CreditCardNotFoundError(f"Credit card {card_id} not found")


def _from_request(obligation_id: str, body: ObligationRequest) -> RecurringObligation:
    title = body.title.strip() or _default_title(body.kind)
    return RecurringObligation(
        id=obligation_id,
        title=title,
        amount=body.amount,
        kind=body.kind,
        recurrence=body.recurrence,
        anchor_date=body.anchor_date,
        total_installments=body.total_installments if body.recurrence == "installments" else None,
        category=body.category or title,
        linked_account_id=body.linked_account_id,
    ).validate()


@router.post("/obligations", response_model=ObligationSchema, status_code=201)
def create_obligation(body: ObligationRequest, request: Request, db: Session = Depends(get_db)):
    """Create an obligation; installments recurrence requires total_installments"""
    try:
        obligation = _from_request(str(uuid.uuid4()), body)
        _ensure_card_exists(db, obligation.linked_account_id)
    except (InvalidObligationError, CreditCardNotFoundError) as e:
        raise HTTPException(status_code=422, detail=str(e))

    ObligationRepository(db).create(obligation)
    db.commit()

    record_obligation_mutation("create")
    log_obligation_change(get_request_id(request), "create", obligation.id)
    return to_schema(obligation)


@router.get("/obligations", response_model=List[ObligationSchema])
def list_obligations(db: Session = Depends(get_db)):
    return [to_schema(o) for o in ObligationRepository(db).list_all()]


@router.get("/obligations/{obligation_id}", response_model=ObligationSchema)
def get_obligation(obligation_id: str, db: Session = Depends(get_db)):
    try:
        return to_schema(ObligationRepository(db).get(obligation_id))
    except ObligationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/obligations/{obligation_id}", response_model=ObligationSchema)
def replace_obligation(
    obligation_id: str,
    body: ObligationRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Replace the whole series definition, keeping its exclusions and settled dates"""
    try:
        edited = _from_request(obligation_id, body)
        _ensure_card_exists(db, edited.linked_account_id)
        updated = ObligationRepository(db).update(
            obligation_id,
            lambda current: replace(
                edited,
                excluded_occurrences=current.excluded_occurrences,
                settled_occurrences=current.settled_occurrences,
            ),
        )
        db.commit()
    except ObligationNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except (InvalidObligationError, CreditCardNotFoundError) as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))

    record_obligation_mutation("update")
    log_obligation_change(get_request_id(request), "update", obligation_id)
    return to_schema(updated)


@router.delete("/obligations/{obligation_id}", status_code=204)
def delete_obligation(obligation_id: str, request: Request, db: Session = Depends(get_db)):
    """Delete the whole series"""
    try:
        ObligationRepository(db).delete(obligation_id)
        db.commit()
    except ObligationNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    record_obligation_mutation("delete")
    log_obligation_change(get_request_id(request), "delete", obligation_id)
    return Response(status_code=204)


@router.post(
    "/obligations/{obligation_id}/occurrences/{occurrence_date}/settlement",
    response_model=ObligationSchema,
)
def toggle_occurrence_settlement(
    obligation_id: str,
    request: Request,
    occurrence_date: date = Depends(get_occurrence_date),
    db: Session = Depends(get_db),
):
    """Mark one occurrence paid/received, or undo it"""
    try:
        updated = ObligationRepository(db).update(
            obligation_id, lambda current: toggle_settled(current, occurrence_date)
        )
        db.commit()
    except (ObligationNotFoundError, OccurrenceNotFoundError) as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    record_obligation_mutation("settle")
    log_obligation_change(get_request_id(request), "settle", obligation_id, occurrence_date.isoformat())
    return to_schema(updated)


@router.delete(
    "/obligations/{obligation_id}/occurrences/{occurrence_date}",
    response_model=ObligationSchema,
)
def delete_occurrence(
    obligation_id: str,
    request: Request,
    occurrence_date: date = Depends(get_occurrence_date),
    db: Session = Depends(get_db),
):
    """Remove only this occurrence; the rest of the series is kept"""
    try:
        updated = ObligationRepository(db).update(
            obligation_id, lambda current: exclude_occurrence(current, occurrence_date)
        )
        db.commit()
    except (ObligationNotFoundError, OccurrenceNotFoundError) as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    record_obligation_mutation("exclude")
    log_obligation_change(get_request_id(request), "exclude", obligation_id, occurrence_date.isoformat())
    return to_schema(updated)


@router.put(
    "/obligations/{obligation_id}/occurrences/{occurrence_date}",
    response_model=OccurrenceEditResponse,
)
def edit_single_occurrence(
    obligation_id: str,
    body: OccurrenceEditRequest,
    request: Request,
    occurrence_date: date = Depends(get_occurrence_date),
    db: Session = Depends(get_db),
):
    """
    Edit one occurrence without touching the rest of the series.

    Flow for recurring obligations (one transaction):
    1. Exclude the occurrence date from the original series
    2. Insert a single obligation anchored at that date with the edited fields
    """
    changes = body.model_dump(exclude_none=True)
    repo = ObligationRepository(db)
    try:
        _ensure_card_exists(db, changes.get("linked_account_id"))
        current = repo.get(obligation_id, for_update=True)
        updated, local_version = edit_occurrence(current, occurrence_date, str(uuid.uuid4()), **changes)
        repo.save(updated)
        if local_version is not None:
            repo.create(local_version)
        db.commit()
    except (ObligationNotFoundError, OccurrenceNotFoundError) as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except (InvalidObligationError, CreditCardNotFoundError) as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))

    action = "split" if local_version is not None else "update"
    record_obligation_mutation(action)
    log_obligation_change(get_request_id(request), action, obligation_id, occurrence_date.isoformat())
    return OccurrenceEditResponse(
        original=to_schema(updated),
        local_version=to_schema(local_version) if local_version is not None else None,
    )
