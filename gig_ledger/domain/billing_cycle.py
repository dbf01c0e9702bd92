"""Billing cycle resolution - maps a reference date onto its billing period"""

from datetime import date, timedelta
from typing import Optional

from gig_ledger.domain.models import BillingPeriod, CycleConfig
from gig_ledger.utils.date_utils import add_months, clamp_day, days_in_month

PAST = "past"
CURRENT = "current"
FUTURE = "future"


def resolve_cycle(reference: date, start_day: int, end_day: Optional[int] = None) -> BillingPeriod:
    """
    Return the billing period containing ``reference``.

    Rules:
    - Automatic end day (``end_day`` None) is ``start_day - 1``, except that a
      cycle starting on day 1 is the plain calendar month.
    - Start and end days are clamped to each month's length independently
      (day 31 in February becomes the 28th/29th).
    - ``end_day < start_day`` wraps the cycle across a month boundary.
    - A date that starts a cycle belongs to that cycle; when clamping makes the
      previous cycle's end collide with the next start, the previous cycle
      ends the day before.

    Inputs are assumed valid (1..31); see ``CycleConfig.validate``.

    Example:
        resolve_cycle(date(2024, 3, 10), 20) -> 2024-02-20 .. 2024-03-19
        resolve_cycle(date(2024, 3, 25), 20) -> 2024-03-20 .. 2024-04-19
    """
    year, month = reference.year, reference.month

    if end_day is not None:
        effective_end = end_day
    elif start_day == 1:
        effective_end = days_in_month(year, month)
    else:
        effective_end = start_day - 1

    current_start = clamp_day(year, month, start_day)
    current_end = clamp_day(year, month, effective_end)

    if effective_end < start_day:
        # Wrapping: starts in month M, ends in month M+1
        if reference >= current_start:
            start_date = current_start
            end_date = _wrapped_end(current_start, start_day, effective_end)
        else:
            start_date = _month_boundary(year, month, -1, start_day)
            end_date = min(current_end, current_start - timedelta(days=1))
    elif reference > current_end:
        start_date = _month_boundary(year, month, 1, start_day)
        end_date = _month_boundary(year, month, 1, effective_end)
    elif reference < current_start:
        start_date = _month_boundary(year, month, -1, start_day)
        end_date = _month_boundary(year, month, -1, effective_end)
    else:
        start_date = current_start
        end_date = current_end

    return BillingPeriod(start_date=start_date, end_date=end_date)


def resolve_for_config(reference: date, config: CycleConfig) -> BillingPeriod:
    return resolve_cycle(reference, config.start_day, config.end_day)


def shift_cycle(reference: date, config: CycleConfig, offset: int) -> BillingPeriod:
    """Period ``offset`` cycles before (negative) or after the one containing ``reference``"""
    period = resolve_for_config(reference, config)
    if offset == 0:
        return period
    anchor = add_months(period.start_date, offset, config.start_day)
    return resolve_for_config(anchor, config)


def classify_period(period: BillingPeriod, current: BillingPeriod) -> str:
    """Position of a viewed period relative to the current one"""
    if period.start_date == current.start_date:
        return CURRENT
    if period.start_date > current.end_date:
        return FUTURE
    return PAST


def _month_boundary(year: int, month: int, offset: int, day: int) -> date:
    return add_months(date(year, month, 1), offset, day)


def _wrapped_end(start_date: date, start_day: int, end_day: int) -> date:
    end_date = _month_boundary(start_date.year, start_date.month, 1, end_day)
    next_start = _month_boundary(start_date.year, start_date.month, 1, start_day)
    return min(end_date, next_start - timedelta(days=1))
