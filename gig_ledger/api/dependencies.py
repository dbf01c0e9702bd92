"""Dependency injection for FastAPI endpoints"""

from datetime import date
from typing import Optional

from fastapi import Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from gig_ledger.domain.exceptions import InvalidDateError
from gig_ledger.domain.models import CycleConfig
from gig_ledger.infrastructure.database.repositories import SettingsRepository
from gig_ledger.infrastructure.database.session import get_db
from gig_ledger.utils.date_utils import parse_local_date


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_today() -> date:
    """Local calendar date; overridden in tests"""
    return date.today()


def parse_date_param(value: str) -> date:
    """Parse a YYYY-MM-DD path/query value, rejecting malformed input with 422"""
    try:
        return parse_local_date(value)
    except InvalidDateError as e:
        raise HTTPException(status_code=422, detail=str(e))


def get_reference_date(
    reference: Optional[str] = Query(None, description="Reference date (YYYY-MM-DD), defaults to today"),
    today: date = Depends(get_today),
) -> date:
    if reference is None:
        return today
    return parse_date_param(reference)


def get_cycle_config(db: Session = Depends(get_db)) -> CycleConfig:
    """Persisted cycle configuration, or the configured default"""
    return SettingsRepository(db).get_cycle_config()


def get_occurrence_date(occurrence_date: str) -> date:
    return parse_date_param(occurrence_date)
