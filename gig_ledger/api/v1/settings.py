"""GET/PUT /v1/settings/cycle - Billing cycle configuration"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from gig_ledger.api.dependencies import get_cycle_config, get_request_id
from gig_ledger.api.v1.schemas import CycleSettingsSchema
from gig_ledger.domain.exceptions import InvalidCycleConfigError
from gig_ledger.domain.models import CycleConfig
from gig_ledger.infrastructure.database.repositories import SettingsRepository
from gig_ledger.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/settings/cycle", response_model=CycleSettingsSchema)
def get_cycle_settings(config: CycleConfig = Depends(get_cycle_config)):
    return CycleSettingsSchema(start_day=config.start_day, end_day=config.end_day)


@router.put("/settings/cycle", response_model=CycleSettingsSchema)
def update_cycle_settings(
    body: CycleSettingsSchema,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Save the cycle start/end day.

    Out-of-range days are rejected here so the resolver never sees them.
    """
    request_id = get_request_id(request)
    try:
        config = CycleConfig(start_day=body.start_day, end_day=body.end_day).validate()
    except InvalidCycleConfigError as e:
        raise HTTPException(status_code=422, detail=str(e))

    SettingsRepository(db).save_cycle_config(config)
    db.commit()

    logging.info(
        "Cycle settings updated",
        extra={"request_id": request_id, "start_day": config.start_day, "end_day": config.end_day},
    )
    return CycleSettingsSchema(start_day=config.start_day, end_day=config.end_day)
