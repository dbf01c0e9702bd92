"""GET /v1/cycle - Resolve the billing period for a reference date"""

from datetime import date
from fastapi import APIRouter, Depends, Query

from gig_ledger.api.dependencies import get_cycle_config, get_reference_date, get_today
from gig_ledger.api.v1.schemas import PeriodSchema
from gig_ledger.domain.billing_cycle import classify_period, resolve_for_config, shift_cycle
from gig_ledger.domain.models import BillingPeriod, CycleConfig

router = APIRouter()


def build_period_schema(period: BillingPeriod, today: date, config: CycleConfig) -> PeriodSchema:
    return PeriodSchema(
        start_date=period.start_date,
        end_date=period.end_date,
        days=period.days,
        label=period.label(),
        status=classify_period(period, resolve_for_config(today, config)),
    )


@router.get("/cycle", response_model=PeriodSchema)
def get_cycle(
    offset: int = Query(0, description="Cycles before (negative) or after the reference cycle"),
    reference: date = Depends(get_reference_date),
    today: date = Depends(get_today),
    config: CycleConfig = Depends(get_cycle_config),
):
    """
    Resolve the billing period containing the reference date.

    Returns:
        Period boundaries (inclusive) and whether it is past, current or future
    """
    period = shift_cycle(reference, config, offset)
    return build_period_schema(period, today, config)
