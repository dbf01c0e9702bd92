"""GET /v1/occurrences - Obligation occurrences projected into a billing period"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gig_ledger.api.dependencies import get_cycle_config, get_reference_date, get_today
from gig_ledger.api.v1.cycle import build_period_schema
from gig_ledger.api.v1.schemas import CardInvoiceSchema, OccurrenceSchema, OccurrencesResponse, SummarySchema
from gig_ledger.domain.billing_cycle import shift_cycle
from gig_ledger.domain.goals import summarize_period
from gig_ledger.domain.models import CycleConfig, Occurrence, PeriodSummary
from gig_ledger.domain.recurrence import card_invoices, invoice_totals, project_occurrences
from gig_ledger.infrastructure.database.repositories import (
    CreditCardRepository,
    ObligationRepository,
    TransactionRepository,
)
from gig_ledger.infrastructure.database.session import get_db

router = APIRouter()


def to_occurrence_schemas(occurrences: List[Occurrence]) -> List[OccurrenceSchema]:
    # Unsettled first, then by date
    ordered = sorted(occurrences, key=lambda o: (o.is_settled, o.occurrence_date, o.title))
    return [OccurrenceSchema.model_validate(o, from_attributes=True) for o in ordered]


def to_summary_schema(summary: PeriodSummary) -> SummarySchema:
    return SummarySchema.model_validate(summary, from_attributes=True)


@router.get("/occurrences", response_model=OccurrencesResponse)
def get_occurrences(
    offset: int = Query(0, description="Cycles before (negative) or after the reference cycle"),
    reference: date = Depends(get_reference_date),
    today: date = Depends(get_today),
    config: CycleConfig = Depends(get_cycle_config),
    db: Session = Depends(get_db),
):
    """
    Project every obligation into the billing period of the reference date.

    Returns:
        Occurrences with settled state, period totals and per-card invoices
    """
    period = shift_cycle(reference, config, offset)
    occurrences = project_occurrences(
        ObligationRepository(db).list_all(), period.start_date, period.end_date
    )
    transactions = TransactionRepository(db).list_between(period.start_date, period.end_date)

    return OccurrencesResponse(
        period=build_period_schema(period, today, config),
        occurrences=to_occurrence_schemas(occurrences),
        summary=to_summary_schema(summarize_period(occurrences, transactions, period)),
        invoice_totals=invoice_totals(occurrences),
        invoices=[
            CardInvoiceSchema.model_validate(invoice, from_attributes=True)
            for invoice in card_invoices(occurrences, CreditCardRepository(db).list_all())
        ],
    )
