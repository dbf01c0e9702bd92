"""/v1/days-off - Days the user will not work"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from gig_ledger.api.dependencies import get_cycle_config, get_request_id, get_today, parse_date_param
from gig_ledger.api.v1.schemas import DayOffToggleResponse, DaysOffResponse
from gig_ledger.domain.billing_cycle import resolve_for_config
from gig_ledger.domain.exceptions import PastDayOffError
from gig_ledger.domain.models import CycleConfig
from gig_ledger.infrastructure.database.repositories import DayOffRepository
from gig_ledger.infrastructure.database.session import get_db

router = APIRouter()


def ensure_day_off_editable(day: date, today: date, config: CycleConfig) -> None:
    """Days already gone in the current cycle are frozen; they no longer affect the target"""
    current = resolve_for_config(today, config)
    if current.contains(day) and day < today:
        raise PastDayOffError(f"{day.isoformat()} has already passed in the current cycle")


@router.get("/days-off", response_model=DaysOffResponse)
def list_days_off(db: Session = Depends(get_db)):
    return DaysOffResponse(dates=sorted(DayOffRepository(db).list_dates()))


@router.post("/days-off/{day}", response_model=DayOffToggleResponse)
def toggle_day_off(
    day: str,
    request: Request,
    today: date = Depends(get_today),
    config: CycleConfig = Depends(get_cycle_config),
    db: Session = Depends(get_db),
):
    """Mark a day off, or back to a work day"""
    parsed = parse_date_param(day)
    try:
        ensure_day_off_editable(parsed, today, config)
    except PastDayOffError as e:
        raise HTTPException(status_code=409, detail=str(e))

    is_day_off = DayOffRepository(db).toggle(parsed)
    db.commit()

    logging.info(
        "Day off toggled",
        extra={"request_id": get_request_id(request), "date": parsed.isoformat(), "is_day_off": is_day_off},
    )
    return DayOffToggleResponse(date=parsed, is_day_off=is_day_off)
