"""/v1/transactions - Manually recorded earnings and spendings"""

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from gig_ledger.api.dependencies import get_request_id
from gig_ledger.api.v1.schemas import TransactionRequest, TransactionSchema
from gig_ledger.domain.exceptions import TransactionNotFoundError
from gig_ledger.domain.models import Transaction
from gig_ledger.infrastructure.database.repositories import TransactionRepository
from gig_ledger.infrastructure.database.session import get_db

router = APIRouter()


@router.post("/transactions", response_model=TransactionSchema, status_code=201)
def create_transaction(body: TransactionRequest, request: Request, db: Session = Depends(get_db)):
    transaction = Transaction(
        id=str(uuid.uuid4()),
        amount=body.amount,
        kind=body.kind,
        date=body.date,
        description=body.description.strip(),
    )
    TransactionRepository(db).create(transaction)
    db.commit()

    logging.info(
        "Transaction recorded",
        extra={"request_id": get_request_id(request), "transaction_id": transaction.id, "kind": transaction.kind},
    )
    return TransactionSchema.model_validate(transaction, from_attributes=True)


@router.get("/transactions", response_model=List[TransactionSchema])
def list_transactions(db: Session = Depends(get_db)):
    """All transactions, newest first"""
    return [
        TransactionSchema.model_validate(t, from_attributes=True)
        for t in TransactionRepository(db).list_all()
    ]


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: str, request: Request, db: Session = Depends(get_db)):
    try:
        TransactionRepository(db).delete(transaction_id)
        db.commit()
    except TransactionNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    logging.info(
        "Transaction deleted",
        extra={"request_id": get_request_id(request), "transaction_id": transaction_id},
    )
    return Response(status_code=204)
