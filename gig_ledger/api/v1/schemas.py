"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, Dict, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer

from gig_ledger.domain.exceptions import InvalidDateError
from gig_ledger.utils.date_utils import parse_local_date

CENT = Decimal("0.01")


def _canonical_date(value):
    if isinstance(value, str):
        try:
            return parse_local_date(value)
        except InvalidDateError as e:
            raise ValueError(str(e)) from e
    return value


def _money_to_json(value: Decimal) -> float:
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


# YYYY-MM-DD on the wire; a trailing time component is ignored
CanonicalDate = Annotated[date, BeforeValidator(_canonical_date)]

# Decimal internally, plain number rounded to cents on the wire
Money = Annotated[Decimal, PlainSerializer(_money_to_json, return_type=float, when_used="json")]

# Storage keeps two decimal places; finer amounts are rejected rather than rounded
Amount = Annotated[Money, Field(gt=0, max_digits=12, decimal_places=2)]

Kind = Literal["income", "expense"]
Recurrence = Literal["single", "monthly", "installments"]


class CycleSettingsSchema(BaseModel):
    """Billing cycle configuration; end_day null means automatic"""

    start_day: int = Field(1, ge=1, le=31, description="Day of month the cycle starts")
    end_day: Optional[int] = Field(None, ge=1, le=31, description="Day of month the cycle ends")


class PeriodSchema(BaseModel):
    """Resolved billing period"""

    start_date: date
    end_date: date
    days: int
    label: str
    status: Literal["past", "current", "future"]


class ObligationRequest(BaseModel):
    """Request body for creating or replacing an obligation"""

    title: str = ""
    amount: Amount
    kind: Kind
    recurrence: Recurrence = "monthly"
    anchor_date: CanonicalDate
    total_installments: Optional[int] = Field(None, ge=1)
    category: Optional[str] = None
    linked_account_id: Optional[str] = None


class OccurrenceEditRequest(BaseModel):
    """Changes applied to a single occurrence"""

    title: Optional[str] = None
    amount: Optional[Amount] = None
    kind: Optional[Kind] = None
    category: Optional[str] = None
    linked_account_id: Optional[str] = None


class ObligationSchema(BaseModel):
    id: str
    title: str
    amount: Money
    kind: Kind
    recurrence: Recurrence
    anchor_date: date
    total_installments: Optional[int] = None
    excluded_occurrences: List[date] = []
    settled_occurrences: List[date] = []
    category: Optional[str] = None
    linked_account_id: Optional[str] = None


class OccurrenceEditResponse(BaseModel):
    """Result of editing one occurrence; local_version is set when the series was split"""

    original: ObligationSchema
    local_version: Optional[ObligationSchema] = None


class OccurrenceSchema(BaseModel):
    obligation_id: str
    occurrence_date: date
    amount: Money
    kind: Kind
    title: str
    is_settled: bool
    installment_index: Optional[int] = None
    total_installments: Optional[int] = None
    category: Optional[str] = None
    linked_account_id: Optional[str] = None


class SummarySchema(BaseModel):
    total_expenses: Money
    total_incomes: Money
    unsettled_expenses: Money
    unsettled_incomes: Money
    bills_gap: Money
    surplus: Money
    free_balance: Money
    remaining_to_earn: Money
    progress_percent: Money


class CardInvoiceSchema(BaseModel):
    """Card expense total for the period; available is null when no limit is set"""

    card_id: str
    name: str
    total: Money
    limit: Money
    available: Optional[Money] = None
    over_limit: bool


class OccurrencesResponse(BaseModel):
    """Response for GET /v1/occurrences"""

    period: PeriodSchema
    occurrences: List[OccurrenceSchema]
    summary: SummarySchema
    invoice_totals: Dict[str, Money]
    invoices: List[CardInvoiceSchema] = []


class TransactionRequest(BaseModel):
    amount: Amount
    kind: Kind
    date: CanonicalDate
    description: str = ""


class TransactionSchema(BaseModel):
    id: str
    amount: Money
    kind: Kind
    date: date
    description: str


class DaysOffResponse(BaseModel):
    dates: List[date]


class DayOffToggleResponse(BaseModel):
    date: date
    is_day_off: bool


class DailyTargetSchema(BaseModel):
    target: Money
    remaining_work_days: int
    today_is_work_day: bool
    cycle_ended: bool
    goal_met: bool


class TimelineBucketSchema(BaseModel):
    label: str
    start: date
    end: date
    work_days: int
    amount: Money
    is_current: bool


class GoalsResponse(BaseModel):
    """Response for GET /v1/goals"""

    period: PeriodSchema
    summary: SummarySchema
    daily_target: Optional[DailyTargetSchema] = None
    forecast_daily_target: Optional[Money] = None
    timeline: List[TimelineBucketSchema] = []
    earned_today: Money
    earned_this_week: Money


class CreditCardRequest(BaseModel):
    """Request body for creating or replacing a credit card"""

    name: str = Field(..., min_length=1)
    color: str = ""
    limit: Money = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)


class CreditCardSchema(BaseModel):
    id: str
    name: str
    color: str
    limit: Money


class CycleIncomeSchema(BaseModel):
    month: int
    start_date: date
    end_date: date
    label: str
    income: Money


class HistoryResponse(BaseModel):
    """Response for GET /v1/history"""

    year: int
    cycles: List[CycleIncomeSchema]
    total: Money

