"""Goal allocation - how much to earn per remaining work day to close the cycle's gap"""

from datetime import date, timedelta
from decimal import Decimal
from typing import AbstractSet, Iterable, List

from gig_ledger.domain.billing_cycle import resolve_for_config
from gig_ledger.domain.models import (
    EXPENSE,
    INCOME,
    BillingPeriod,
    CycleConfig,
    CycleIncome,
    DailyTarget,
    Occurrence,
    PeriodSummary,
    TimelineBucket,
    Transaction,
)
from gig_ledger.utils.date_utils import clamp_day, generate_date_range, is_same_week

ZERO = Decimal("0")
HUNDRED = Decimal("100")
SUNDAY = 6

FIRST_BUCKET_LABEL = "This week"
TAIL_BUCKET_LABEL = "Rest of cycle"


def summarize_period(
    occurrences: Iterable[Occurrence],
    transactions: Iterable[Transaction],
    period: BillingPeriod,
) -> PeriodSummary:
    """
    Aggregate a period's projected occurrences and manual transactions.

    - bills_gap: unsettled expenses minus unsettled incomes, floored at zero
    - surplus: the opposite difference, reported separately, never folded into the gap
    - free_balance: manual net plus settled fixed incomes minus settled fixed expenses
    - remaining_to_earn: what the gap still needs once free balance is applied
    """
    occurrences = list(occurrences)

    total_expenses = _sum(o.amount for o in occurrences if o.kind == EXPENSE)
    total_incomes = _sum(o.amount for o in occurrences if o.kind == INCOME)
    unsettled_expenses = _sum(o.amount for o in occurrences if o.kind == EXPENSE and not o.is_settled)
    unsettled_incomes = _sum(o.amount for o in occurrences if o.kind == INCOME and not o.is_settled)
    settled_expenses = total_expenses - unsettled_expenses
    settled_incomes = total_incomes - unsettled_incomes

    in_period = [t for t in transactions if period.contains(t.date)]
    manual_balance = _sum(t.amount for t in in_period if t.kind == INCOME) - _sum(
        t.amount for t in in_period if t.kind == EXPENSE
    )
    free_balance = manual_balance - settled_expenses + settled_incomes

    difference = unsettled_expenses - unsettled_incomes
    bills_gap = max(ZERO, difference)
    remaining_to_earn = max(ZERO, bills_gap - free_balance)

    if total_expenses > 0:
        progress = (total_expenses - remaining_to_earn) / total_expenses * HUNDRED
        progress_percent = min(HUNDRED, max(ZERO, progress)).quantize(Decimal("0.01"))
    else:
        progress_percent = HUNDRED

    return PeriodSummary(
        total_expenses=total_expenses,
        total_incomes=total_incomes,
        unsettled_expenses=unsettled_expenses,
        unsettled_incomes=unsettled_incomes,
        bills_gap=bills_gap,
        surplus=max(ZERO, -difference),
        free_balance=free_balance,
        remaining_to_earn=remaining_to_earn,
        progress_percent=progress_percent,
    )


def cycle_income_history(
    year: int,
    config: CycleConfig,
    transactions: Iterable[Transaction],
) -> List[CycleIncome]:
    """
    Income per billing cycle for each month of ``year``.

    Month N maps to the cycle that opens on the configured start day of that
    month, clamped to the month length (start day 31 opens in February on
    its last day).
    """
    incomes = [t for t in transactions if t.kind == INCOME]
    history: List[CycleIncome] = []
    for month in range(1, 13):
        period = resolve_for_config(clamp_day(year, month, config.start_day), config)
        history.append(
            CycleIncome(
                month=month,
                period=period,
                income=_sum(t.amount for t in incomes if period.contains(t.date)),
            )
        )
    return history


def compute_daily_target(
    outstanding_gap: Decimal,
    period: BillingPeriod,
    days_off: AbstractSet[date],
    today: date,
) -> DailyTarget:
    """
    Spread the outstanding gap across the work days left in the period.

    Today counts only when it is itself a work day. With no work days left the
    whole gap is returned as a lump figure flagged ``cycle_ended``; a gap of
    zero or less always yields a target of zero.

    Example:
        gap 300, six days left with one day off -> 5 work days, target 60
    """
    remaining_work_days = len(_work_days(max(today, period.start_date), period.end_date, days_off))
    today_is_work_day = period.contains(today) and today not in days_off
    cycle_ended = remaining_work_days == 0

    if outstanding_gap <= 0:
        target = ZERO
    elif cycle_ended:
        target = outstanding_gap
    else:
        target = outstanding_gap / remaining_work_days

    return DailyTarget(
        target=target,
        remaining_work_days=remaining_work_days,
        today_is_work_day=today_is_work_day,
        cycle_ended=cycle_ended,
        goal_met=outstanding_gap <= 0,
    )


def forecast_daily_target(
    outstanding_gap: Decimal,
    period: BillingPeriod,
    days_off: AbstractSet[date],
) -> Decimal:
    """Daily figure for a period that has not started: the gap over all its work days"""
    work_days = len(_work_days(period.start_date, period.end_date, days_off))
    if work_days == 0 or outstanding_gap <= 0:
        return ZERO
    return outstanding_gap / work_days


def build_timeline(
    today: date,
    period: BillingPeriod,
    days_off: AbstractSet[date],
    target: Decimal,
) -> List[TimelineBucket]:
    """
    Group the rest of the period into Monday-Sunday chunks starting today.

    The first chunk is always present, even with no work days; later chunks
    without work days are skipped.
    """
    start = max(today, period.start_date)
    if start > period.end_date:
        return []

    buckets: List[TimelineBucket] = []
    week_number = 1
    block_start = start
    work_days = 0

    for day in generate_date_range(start, period.end_date):
        if day not in days_off:
            work_days += 1

        is_tail = day == period.end_date
        if day.weekday() != SUNDAY and not is_tail:
            continue

        is_first = not buckets
        if work_days > 0 or is_first:
            if is_first:
                label = FIRST_BUCKET_LABEL
            elif is_tail:
                label = TAIL_BUCKET_LABEL
            else:
                week_number += 1
                label = f"Week {week_number}"
            buckets.append(
                TimelineBucket(
                    label=label,
                    start=block_start,
                    end=day,
                    work_days=work_days,
                    amount=target * work_days,
                    is_current=is_first,
                )
            )
        block_start = day + timedelta(days=1)
        work_days = 0

    return buckets


def earnings_on(transactions: Iterable[Transaction], day: date) -> Decimal:
    return _sum(t.amount for t in transactions if t.kind == INCOME and t.date == day)


def week_earnings(transactions: Iterable[Transaction], day: date) -> Decimal:
    """Income recorded in the Monday-based week containing ``day``"""
    return _sum(t.amount for t in transactions if t.kind == INCOME and is_same_week(t.date, day))


def _work_days(start: date, end: date, days_off: AbstractSet[date]) -> List[date]:
    if start > end:
        return []
    return [day for day in generate_date_range(start, end) if day not in days_off]


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)
