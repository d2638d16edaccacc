"""Period projection - resolves stored and recurring records into one month's entries"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence, Tuple, TypeVar

from finance_tracker.domain.exceptions import MalformedDateError
from finance_tracker.domain.models import (
    EMIRecord,
    ExpenseRecord,
    IncomeRecord,
    PaymentMode,
    Period,
    Projection,
    RecurrenceType,
)
from finance_tracker.utils.date_utils import clamp_day, months_between, parse_date

Record = TypeVar("Record", ExpenseRecord, IncomeRecord)

EMI_CATEGORY_PREFIX = "EMI - "


def remaining_months(emi: EMIRecord, as_of: date) -> int:
    """
    Months left on an EMI as of a date.

    Only the calendar month counts: an EMI started on the 31st has a full month
    elapsed on the 1st of the next month, whatever its due day.

    Example:
        start 2024-01-15, 12 months, as_of 2024-07-03 → 12 - 6 = 6
    """
    start = parse_date(emi.start_date)
    elapsed = months_between(start, as_of)
    return max(0, emi.total_months - elapsed)


def is_emi_active(emi: EMIRecord, as_of: date) -> bool:
    return remaining_months(emi, as_of) > 0


def warn_malformed_emi(emi: EMIRecord, error: MalformedDateError) -> None:
    logging.warning(
        f"Skipping EMI with malformed start date: {error}",
        extra={"record_id": emi.id, "step": "projection_skip"},
    )


def active_emis(emis: Sequence[EMIRecord], as_of: date) -> List[EMIRecord]:
    """EMIs with months left as of a date; EMIs with unparseable start dates are left out"""
    active = []
    for emi in emis:
        try:
            if is_emi_active(emi, as_of):
                active.append(emi)
        except MalformedDateError as e:
            warn_malformed_emi(emi, e)
    return active


def _select_records(records: Sequence[Record], period: Period, dedupe: bool) -> Tuple[List[Record], int]:
    """
    Apply the one-time and recurring filters to one collection.

    Returns (one_time + recurring matches, number of records skipped).
    """
    one_time: List[Record] = []
    recurring: List[Record] = []
    skipped = 0

    for record in records:
        try:
            record_date = parse_date(record.date)
        except MalformedDateError as e:
            skipped += 1
            logging.warning(
                f"Skipping record with malformed date: {e}",
                extra={"record_id": record.id, "step": "projection_skip"},
            )
            continue

        in_period = period.start <= record_date <= period.end
        if in_period:
            one_time.append(record)

        if not record.is_recurring:
            continue

        # Yearly records only recur within the calendar year they were created in
        if record.recurring_type == RecurrenceType.MONTHLY.value:
            recurs = True
        elif record.recurring_type == RecurrenceType.YEARLY.value:
            recurs = record_date.year == period.year
        else:
            recurs = False

        if recurs and not (dedupe and in_period):
            recurring.append(record)

    return one_time + recurring, skipped


def synthesize_emi_entry(emi: EMIRecord, period: Period) -> ExpenseRecord:
    """Virtual expense for an EMI installment falling in `period`"""
    return ExpenseRecord(
        id=f"emi_{emi.id}",
        user_id=emi.user_id,
        date=clamp_day(period.year, period.month, emi.due_day),
        amount=emi.amount,
        category=f"{EMI_CATEGORY_PREFIX}{emi.name}",
        payment_mode=PaymentMode.CREDIT_CARD.value,
        payment_account_id=emi.payment_account_id,
        note=f"EMI payment due on {emi.due_day}th",
        emi_id=emi.id,
        is_recurring=True,
        recurring_type=RecurrenceType.MONTHLY.value,
        virtual=True,
    )


def _project_emis(emis: Sequence[EMIRecord], period: Period, today: date) -> Tuple[List[ExpenseRecord], int]:
    entries = []
    skipped = 0
    for emi in emis:
        try:
            start = parse_date(emi.start_date)
            active = is_emi_active(emi, today)
        except MalformedDateError as e:
            skipped += 1
            warn_malformed_emi(emi, e)
            continue

        if active and (start.year, start.month) <= (period.year, period.month):
            entries.append(synthesize_emi_entry(emi, period))
    return entries, skipped


def project_period(
    expenses: Sequence[ExpenseRecord],
    income: Sequence[IncomeRecord],
    emis: Sequence[EMIRecord],
    period: Period,
    today: date | None = None,
    dedupe: bool = True,
) -> Projection:
    """
    Compute the expense and income entries effective for a calendar month.

    Rules:
    - One-time: a record dated inside the period is included as-is
    - Monthly recurring: included in every period, before or after its date
    - Yearly recurring: included only when the period's year equals the record's year
    - EMIs: one virtual expense per EMI still active as of `today` whose start
      month is not after the period, dated on its due day
    - Records with unparseable dates are skipped individually

    Args:
        expenses: All of the user's stored expenses
        income: All of the user's stored income
        emis: All of the user's EMIs
        period: Target month
        today: Reference date for EMI activity (default: date.today())
        dedupe: When True a recurring record dated inside the period appears
            once; when False it appears for both the one-time and recurring match

    Returns:
        Projection with expenses (one-time, recurring, EMI) and income (one-time, recurring)
    """
    if today is None:
        today = date.today()

    projected_expenses, skipped_expenses = _select_records(expenses, period, dedupe)
    projected_income, skipped_income = _select_records(income, period, dedupe)
    emi_entries, skipped_emis = _project_emis(emis, period, today)

    return Projection(
        period=period,
        expenses=projected_expenses + emi_entries,
        income=projected_income,
        skipped=skipped_expenses + skipped_income + skipped_emis,
    )


def _entry_date(entry) -> date | None:
    try:
        return parse_date(entry.date)
    except MalformedDateError:
        return None


def aggregate_by_category(entries: Iterable[ExpenseRecord | IncomeRecord]) -> Dict[str, Decimal]:
    """Sum amounts per category (source for income), preserving first-seen order"""
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    for entry in entries:
        totals[entry.category] += Decimal(entry.amount)
    return dict(totals)


def total_for_date(entries: Iterable[ExpenseRecord | IncomeRecord], day: date) -> Decimal:
    return sum((Decimal(e.amount) for e in entries if _entry_date(e) == day), Decimal("0"))


def net_for_date(projection: Projection, day: date) -> Decimal:
    """Income minus expenses on a single day"""
    return total_for_date(projection.income, day) - total_for_date(projection.expenses, day)


def monthly_total(entries: Iterable[ExpenseRecord | IncomeRecord]) -> Decimal:
    return sum((Decimal(e.amount) for e in entries), Decimal("0"))
