"""Unit tests for daily target allocation and the weekly timeline"""

from datetime import date, timedelta
from decimal import Decimal
from gig_ledger.domain.goals import (
    build_timeline,
    compute_daily_target,
    cycle_income_history,
    earnings_on,
    forecast_daily_target,
    summarize_period,
    week_earnings,
)
from gig_ledger.domain.models import BillingPeriod, CycleConfig, Occurrence, Transaction
from gig_ledger.utils.date_utils import generate_date_range

MARCH = BillingPeriod(date(2024, 3, 1), date(2024, 3, 31))
TODAY = date(2024, 3, 13)  # Wednesday


def occurrence(obligation_id: str, amount: str, kind: str, settled: bool = False) -> Occurrence:
    return Occurrence(
        obligation_id=obligation_id,
        occurrence_date=date(2024, 3, 10),
        amount=Decimal(amount),
        kind=kind,
        title=obligation_id,
        is_settled=settled,
    )


def transaction(amount: str, kind: str, day: date) -> Transaction:
    return Transaction(id=f"{kind}-{day}-{amount}", amount=Decimal(amount), kind=kind, date=day)


def test_daily_target_spreads_gap_over_work_days():
    """Six days left, one of them off: 300 over 5 days"""
    period = BillingPeriod(date(2024, 3, 1), date(2024, 3, 18))
    result = compute_daily_target(Decimal("300"), period, {date(2024, 3, 16)}, TODAY)

    assert result.remaining_work_days == 5
    assert result.target == Decimal("60")
    assert result.today_is_work_day is True
    assert result.cycle_ended is False
    assert result.goal_met is False


def test_daily_target_excludes_today_when_off():
    period = BillingPeriod(date(2024, 3, 1), date(2024, 3, 18))
    result = compute_daily_target(Decimal("300"), period, {TODAY}, TODAY)

    assert result.remaining_work_days == 5
    assert result.today_is_work_day is False


def test_zero_gap_means_zero_target():
    for gap in (Decimal("0"), Decimal("-50")):
        result = compute_daily_target(gap, MARCH, set(), TODAY)
        assert result.target == Decimal("0")
        assert result.goal_met is True
        assert result.remaining_work_days == 19


def test_exhausted_cycle_returns_lump_sum():
    period = BillingPeriod(date(2024, 3, 1), date(2024, 3, 14))
    result = compute_daily_target(Decimal("420.50"), period, {date(2024, 3, 13), date(2024, 3, 14)}, TODAY)

    assert result.remaining_work_days == 0
    assert result.cycle_ended is True
    assert result.target == Decimal("420.50")


def test_cycle_already_over():
    result = compute_daily_target(Decimal("100"), BillingPeriod(date(2024, 2, 1), date(2024, 2, 29)), set(), TODAY)
    assert result.cycle_ended is True
    assert result.today_is_work_day is False
    assert result.target == Decimal("100")


def test_daily_target_counts_from_period_start_when_today_is_earlier():
    april = BillingPeriod(date(2024, 4, 1), date(2024, 4, 30))
    result = compute_daily_target(Decimal("300"), april, set(), TODAY)
    assert result.remaining_work_days == 30
    assert result.target == Decimal("10")


def test_forecast_uses_all_work_days():
    april = BillingPeriod(date(2024, 4, 1), date(2024, 4, 30))
    days_off = set(generate_date_range(date(2024, 4, 1), date(2024, 4, 10)))
    assert forecast_daily_target(Decimal("400"), april, days_off) == Decimal("20")
    assert forecast_daily_target(Decimal("0"), april, days_off) == Decimal("0")
    assert forecast_daily_target(Decimal("400"), april, set(generate_date_range(april.start_date, april.end_date))) == 0


def test_timeline_buckets_by_week():
    buckets = build_timeline(TODAY, MARCH, set(), Decimal("10"))

    assert [(b.label, b.start, b.end, b.work_days) for b in buckets] == [
        ("This week", date(2024, 3, 13), date(2024, 3, 17), 5),
        ("Week 2", date(2024, 3, 18), date(2024, 3, 24), 7),
        ("Rest of cycle", date(2024, 3, 25), date(2024, 3, 31), 7),
    ]
    assert [b.amount for b in buckets] == [Decimal("50"), Decimal("70"), Decimal("70")]
    assert [b.is_current for b in buckets] == [True, False, False]


def test_timeline_skips_empty_weeks_but_keeps_first():
    period = BillingPeriod(date(2024, 3, 11), date(2024, 4, 10))
    days_off = set(generate_date_range(date(2024, 3, 13), date(2024, 3, 24)))
    buckets = build_timeline(TODAY, period, days_off, Decimal("25"))

    assert [(b.label, b.start, b.end, b.work_days) for b in buckets] == [
        ("This week", date(2024, 3, 13), date(2024, 3, 17), 0),
        ("Week 2", date(2024, 3, 25), date(2024, 3, 31), 7),
        ("Week 3", date(2024, 4, 1), date(2024, 4, 7), 7),
        ("Rest of cycle", date(2024, 4, 8), date(2024, 4, 10), 3),
    ]
    assert buckets[0].amount == Decimal("0")


def test_timeline_single_partial_week():
    period = BillingPeriod(date(2024, 3, 1), date(2024, 3, 15))
    buckets = build_timeline(TODAY, period, set(), Decimal("30"))

    assert len(buckets) == 1
    assert buckets[0].label == "This week"
    assert buckets[0].end == date(2024, 3, 15)
    assert buckets[0].amount == Decimal("90")


def test_timeline_empty_after_cycle_end():
    assert build_timeline(TODAY, BillingPeriod(date(2024, 2, 1), date(2024, 2, 29)), set(), Decimal("1")) == []


def test_summarize_period():
    occurrences = [
        occurrence("rent", "900", "expense"),
        occurrence("phone", "100", "expense", settled=True),
        occurrence("rental-income", "300", "income"),
        occurrence("bonus", "200", "income", settled=True),
    ]
    transactions = [
        transaction("250", "income", date(2024, 3, 12)),
        transaction("50", "expense", date(2024, 3, 12)),
        transaction("999", "income", date(2024, 2, 28)),  # previous cycle
    ]

    summary = summarize_period(occurrences, transactions, MARCH)

    assert summary.total_expenses == Decimal("1000")
    assert summary.total_incomes == Decimal("500")
    assert summary.unsettled_expenses == Decimal("900")
    assert summary.unsettled_incomes == Decimal("300")
    assert summary.bills_gap == Decimal("600")
    assert summary.surplus == Decimal("0")
    assert summary.free_balance == Decimal("300")
    assert summary.remaining_to_earn == Decimal("300")
    assert summary.progress_percent == Decimal("70.00")


def test_summarize_period_reports_surplus_separately():
    occurrences = [occurrence("rent", "400", "expense"), occurrence("salary", "1000", "income")]
    summary = summarize_period(occurrences, [], MARCH)

    assert summary.bills_gap == Decimal("0")
    assert summary.surplus == Decimal("600")
    assert summary.remaining_to_earn == Decimal("0")
    assert summary.progress_percent == Decimal("100.00")


def test_summarize_empty_period():
    summary = summarize_period([], [], MARCH)
    assert summary.bills_gap == Decimal("0")
    assert summary.remaining_to_earn == Decimal("0")
    assert summary.progress_percent == Decimal("100")


def test_earnings_today_and_this_week():
    transactions = [
        transaction("80", "income", date(2024, 3, 13)),
        transaction("20", "expense", date(2024, 3, 13)),
        transaction("120", "income", date(2024, 3, 11)),
        transaction("60", "income", date(2024, 3, 10)),  # previous week (Sunday)
    ]
    assert earnings_on(transactions, TODAY) == Decimal("80")
    assert week_earnings(transactions, TODAY) == Decimal("200")


def test_income_history_calendar_months():
    transactions = [
        transaction("100", "income", date(2024, 1, 31)),
        transaction("40", "income", date(2024, 3, 1)),
        transaction("60", "expense", date(2024, 3, 2)),
        transaction("999", "income", date(2025, 1, 1)),
    ]
    history = cycle_income_history(2024, CycleConfig(start_day=1), transactions)

    assert [h.month for h in history] == list(range(1, 13))
    assert [h.income for h in history[:3]] == [Decimal("100"), Decimal("0"), Decimal("40")]
    assert history[1].period == BillingPeriod(date(2024, 2, 1), date(2024, 2, 29))
    assert history[11].income == Decimal("0")


def test_income_history_wrapping_cycles():
    """Each month maps to the cycle opening on its 20th"""
    transactions = [transaction("50", "income", date(2024, 1, 10)), transaction("80", "income", date(2024, 1, 25))]
    history = cycle_income_history(2024, CycleConfig(start_day=20), transactions)

    assert history[0].period == BillingPeriod(date(2024, 1, 20), date(2024, 2, 19))
    assert history[0].income == Decimal("80")  # 10/01 belongs to the December cycle
    assert history[11].period == BillingPeriod(date(2024, 12, 20), date(2025, 1, 19))


def test_income_history_clamped_start_day_is_contiguous():
    history = cycle_income_history(2024, CycleConfig(start_day=31), [])

    assert history[0].period == BillingPeriod(date(2024, 1, 31), date(2024, 2, 28))
    assert history[1].period == BillingPeriod(date(2024, 2, 29), date(2024, 3, 30))
    assert history[3].period == BillingPeriod(date(2024, 4, 30), date(2024, 5, 30))
    for previous, following in zip(history, history[1:]):
        assert following.period.start_date == previous.period.end_date + timedelta(days=1)
