"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import FrozenSet, Optional

from gig_ledger.domain.exceptions import InvalidCreditCardError, InvalidCycleConfigError, InvalidObligationError

INCOME = "income"
EXPENSE = "expense"
KINDS = {INCOME, EXPENSE}

SINGLE = "single"
MONTHLY = "monthly"
INSTALLMENTS = "installments"
RECURRENCES = {SINGLE, MONTHLY, INSTALLMENTS}


@dataclass(frozen=True)
class CycleConfig:
    """Billing cycle boundaries; ``end_day`` None means automatic"""

    start_day: int = 1
    end_day: Optional[int] = None

    def validate(self) -> "CycleConfig":
        """Reject days outside 1..31. Call where configuration is accepted."""
        if not 1 <= self.start_day <= 31:
            raise InvalidCycleConfigError(f"start_day must be within 1..31, got {self.start_day}")
        if self.end_day is not None and not 1 <= self.end_day <= 31:
            raise InvalidCycleConfigError(f"end_day must be within 1..31, got {self.end_day}")
        return self


@dataclass(frozen=True)
class BillingPeriod:
    """Inclusive date window of one billing cycle"""

    start_date: date
    end_date: date

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def contains(self, value: date) -> bool:
        return self.start_date <= value <= self.end_date

    def start_datetime(self) -> datetime:
        return datetime.combine(self.start_date, time.min)

    def end_datetime(self) -> datetime:
        return datetime.combine(self.end_date, time.max)

    def label(self) -> str:
        return f"{self.start_date:%d/%m} - {self.end_date:%d/%m}"


@dataclass(frozen=True)
class RecurringObligation:
    """Fixed income or expense line from which dated occurrences are derived"""

    id: str
    title: str
    amount: Decimal
    kind: str  # "income" or "expense"
    recurrence: str  # "single", "monthly" or "installments"
    anchor_date: date
    total_installments: Optional[int] = None
    excluded_occurrences: FrozenSet[date] = field(default_factory=frozenset)
    settled_occurrences: FrozenSet[date] = field(default_factory=frozenset)
    category: Optional[str] = None
    linked_account_id: Optional[str] = None

    def validate(self) -> "RecurringObligation":
        if self.amount <= 0:
            raise InvalidObligationError("amount must be greater than zero")
        if self.kind not in KINDS:
            raise InvalidObligationError(f"Unsupported kind: {self.kind}")
        if self.recurrence not in RECURRENCES:
            raise InvalidObligationError(f"Unsupported recurrence: {self.recurrence}")
        if self.recurrence == INSTALLMENTS:
            if self.total_installments is None or self.total_installments < 1:
                raise InvalidObligationError("installments recurrence requires total_installments >= 1")
        elif self.total_installments is not None:
            raise InvalidObligationError("total_installments is only valid for installments recurrence")
        return self


@dataclass(frozen=True)
class Occurrence:
    """Single dated instance of an obligation inside one billing period (never stored)"""

    obligation_id: str
    occurrence_date: date
    amount: Decimal
    kind: str
    title: str
    is_settled: bool
    installment_index: Optional[int] = None
    total_installments: Optional[int] = None
    category: Optional[str] = None
    linked_account_id: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Manually recorded earning or spending"""

    id: str
    amount: Decimal
    kind: str  # "income" or "expense"
    date: date
    description: str = ""


@dataclass
class PeriodSummary:
    """Settled vs outstanding aggregates for one billing period"""

    total_expenses: Decimal
    total_incomes: Decimal
    unsettled_expenses: Decimal
    unsettled_incomes: Decimal
    bills_gap: Decimal
    surplus: Decimal
    free_balance: Decimal
    remaining_to_earn: Decimal
    progress_percent: Decimal


@dataclass
class DailyTarget:
    """Earnings needed per remaining work day to close the gap"""

    target: Decimal
    remaining_work_days: int
    today_is_work_day: bool
    cycle_ended: bool
    goal_met: bool


@dataclass
class TimelineBucket:
    """Weekly chunk of the remaining cycle with its projected sub-goal"""

    label: str
    start: date
    end: date
    work_days: int
    amount: Decimal
    is_current: bool


@dataclass(frozen=True)
class CreditCard:
    """Card that expense obligations can be billed to"""

    id: str
    name: str
    color: str = ""
    limit: Decimal = Decimal("0")  # 0 means no limit set

    def validate(self) -> "CreditCard":
        if not self.name.strip():
            raise InvalidCreditCardError("name must not be empty")
        if self.limit < 0:
            raise InvalidCreditCardError("limit must not be negative")
        return self


@dataclass
class CardInvoice:
    """A card's expense total for one billing period, against its limit"""

    card_id: str
    name: str
    total: Decimal
    limit: Decimal
    available: Optional[Decimal]
    over_limit: bool


@dataclass
class CycleIncome:
    """Income received during the billing cycle that opens in ``month``"""

    month: int
    period: BillingPeriod
    income: Decimal
