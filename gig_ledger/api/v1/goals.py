"""GET /v1/goals - Daily earnings target for a billing period"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from gig_ledger.api.dependencies import get_cycle_config, get_reference_date, get_request_id, get_today
from gig_ledger.api.v1.cycle import build_period_schema
from gig_ledger.api.v1.occurrences import to_summary_schema
from gig_ledger.api.v1.schemas import DailyTargetSchema, GoalsResponse, TimelineBucketSchema
from gig_ledger.domain.billing_cycle import CURRENT, FUTURE, shift_cycle
from gig_ledger.domain.goals import (
    build_timeline,
    compute_daily_target,
    earnings_on,
    forecast_daily_target,
    summarize_period,
    week_earnings,
)
from gig_ledger.domain.models import CycleConfig
from gig_ledger.domain.recurrence import project_occurrences
from gig_ledger.infrastructure.database.repositories import (
    DayOffRepository,
    ObligationRepository,
    TransactionRepository,
)
from gig_ledger.infrastructure.database.session import get_db
from gig_ledger.infrastructure.observability.logging import log_goal_evaluation
from gig_ledger.infrastructure.observability.metrics import record_goal_evaluation

router = APIRouter()


@router.get("/goals", response_model=GoalsResponse)
def get_goals(
    request: Request,
    offset: int = Query(0, description="Cycles before (negative) or after the reference cycle"),
    reference: date = Depends(get_reference_date),
    today: date = Depends(get_today),
    config: CycleConfig = Depends(get_cycle_config),
    db: Session = Depends(get_db),
):
    """
    Compute what is left to earn in a billing period.

    Flow:
    1. Resolve the period and project obligations into it
    2. Summarize settled vs outstanding amounts against manual transactions
    3. Current period: daily target over remaining work days plus weekly timeline
       Future period: forecast over all of its work days
    """
    period = shift_cycle(reference, config, offset)
    period_schema = build_period_schema(period, today, config)

    occurrences = project_occurrences(
        ObligationRepository(db).list_all(), period.start_date, period.end_date
    )
    transactions = TransactionRepository(db).list_all()
    days_off = DayOffRepository(db).list_dates()
    summary = summarize_period(occurrences, transactions, period)

    response = GoalsResponse(
        period=period_schema,
        summary=to_summary_schema(summary),
        earned_today=earnings_on(transactions, today),
        earned_this_week=week_earnings(transactions, today),
    )

    if period_schema.status == CURRENT:
        daily_target = compute_daily_target(summary.remaining_to_earn, period, days_off, today)
        response.daily_target = DailyTargetSchema.model_validate(daily_target, from_attributes=True)
        response.timeline = [
            TimelineBucketSchema.model_validate(bucket, from_attributes=True)
            for bucket in build_timeline(today, period, days_off, daily_target.target)
        ]
        if daily_target.goal_met:
            state = "met"
        elif daily_target.cycle_ended:
            state = "cycle_ended"
        else:
            state = "on_track"
        log_goal_evaluation(
            get_request_id(request),
            period.label(),
            str(summary.remaining_to_earn),
            daily_target.remaining_work_days,
            daily_target.cycle_ended,
        )
    elif period_schema.status == FUTURE:
        response.forecast_daily_target = forecast_daily_target(summary.bills_gap, period, days_off)
        state = "forecast"
    else:
        state = "past"

    record_goal_evaluation(state)
    return response
