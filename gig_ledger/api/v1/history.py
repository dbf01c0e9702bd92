"""GET /v1/history - Income per billing cycle across a year"""

from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gig_ledger.api.dependencies import get_cycle_config, get_today
from gig_ledger.api.v1.schemas import CycleIncomeSchema, HistoryResponse
from gig_ledger.domain.goals import cycle_income_history
from gig_ledger.domain.models import CycleConfig
from gig_ledger.infrastructure.database.repositories import TransactionRepository
from gig_ledger.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/history", response_model=HistoryResponse)
def get_history(
    year: Optional[int] = Query(None, ge=1970, le=2100, description="Calendar year, defaults to the current one"),
    today: date = Depends(get_today),
    config: CycleConfig = Depends(get_cycle_config),
    db: Session = Depends(get_db),
):
    """
    Income received in each of the twelve billing cycles opening in ``year``.

    A wrapping cycle is listed under the month it starts in.
    """
    year = year or today.year
    history = cycle_income_history(year, config, TransactionRepository(db).list_all())

    return HistoryResponse(
        year=year,
        cycles=[
            CycleIncomeSchema(
                month=entry.month,
                start_date=entry.period.start_date,
                end_date=entry.period.end_date,
                label=entry.period.label(),
                income=entry.income,
            )
            for entry in history
        ],
        total=sum((entry.income for entry in history), Decimal("0")),
    )
