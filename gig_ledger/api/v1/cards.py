"""/v1/cards - Credit cards that expense obligations are billed to"""

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from gig_ledger.api.dependencies import get_request_id
from gig_ledger.api.v1.schemas import CreditCardRequest, CreditCardSchema
from gig_ledger.domain.exceptions import CreditCardNotFoundError, InvalidCreditCardError
from gig_ledger.domain.models import CreditCard
from gig_ledger.infrastructure.database.repositories import CreditCardRepository
from gig_ledger.infrastructure.database.session import get_db

router = APIRouter()


def to_card_schema(card: CreditCard) -> CreditCardSchema:
    return CreditCardSchema(id=card.id, name=card.name, color=card.color, limit=card.limit)


def _from_request(card_id: str, body: CreditCardRequest) -> CreditCard:
    return CreditCard(id=card_id, name=body.name.strip(), color=body.color, limit=body.limit).validate()


@router.post("/cards", response_model=CreditCardSchema, status_code=201)
def create_card(body: CreditCardRequest, request: Request, db: Session = Depends(get_db)):
    try:
        card = _from_request(str(uuid.uuid4()), body)
    except InvalidCreditCardError as e:
        raise HTTPException(status_code=422, detail=str(e))

    CreditCardRepository(db).create(card)
    db.commit()

    logging.info("Credit card created", extra={"request_id": get_request_id(request), "card_id": card.id})
    return to_card_schema(card)


@router.get("/cards", response_model=List[CreditCardSchema])
def list_cards(db: Session = Depends(get_db)):
    return [to_card_schema(c) for c in CreditCardRepository(db).list_all()]


@router.put("/cards/{card_id}", response_model=CreditCardSchema)
def replace_card(card_id: str, body: CreditCardRequest, request: Request, db: Session = Depends(get_db)):
    try:
        card = CreditCardRepository(db).save(_from_request(card_id, body))
        db.commit()
    except CreditCardNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidCreditCardError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))

    logging.info("Credit card updated", extra={"request_id": get_request_id(request), "card_id": card_id})
    return to_card_schema(card)


@router.delete("/cards/{card_id}", status_code=204)
def delete_card(card_id: str, request: Request, db: Session = Depends(get_db)):
    """Delete a card; obligations billed to it stay, unlinked"""
    try:
        unlinked = CreditCardRepository(db).delete(card_id)
        db.commit()
    except CreditCardNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    logging.info(
        "Credit card deleted",
        extra={"request_id": get_request_id(request), "card_id": card_id, "unlinked_obligations": unlinked},
    )
    return Response(status_code=204)
