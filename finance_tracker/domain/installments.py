"""Remaining installment schedule for an EMI"""

from datetime import date
from typing import List

from finance_tracker.domain.exceptions import MalformedDateError
from finance_tracker.domain.models import EMIRecord, Installment
from finance_tracker.domain.projection import remaining_months, warn_malformed_emi
from finance_tracker.utils.date_utils import add_months, clamp_day, parse_date


def generate_emi_schedule(emi: EMIRecord, today: date | None = None) -> List[Installment]:
    """
    List the installments still owed on an EMI.

    Requirements:
    - One installment per remaining month, starting with the current month
    - Due day clamped to the month's length (31 → 28/29/30 where needed)
    - Every installment is the EMI's fixed monthly amount

    Args:
        emi: Loan to schedule
        today: Reference date (default: date.today())

    Returns:
        Installments in due-date order, empty when the EMI is complete or its
        start date cannot be parsed

    Example:
        start 2024-01-15, 12 months, today 2024-10-02 → remaining 3:
        2024-10-15, 2024-11-15, 2024-12-15
    """
    if today is None:
        today = date.today()

    try:
        start = parse_date(emi.start_date)
    except MalformedDateError as e:
        warn_malformed_emi(emi, e)
        return []

    left = remaining_months(emi, today)
    if left <= 0:
        return []

    # A loan that has not started yet is scheduled from its start month
    first = max((today.year, today.month), (start.year, start.month))
    count = min(left, emi.total_months)
    elapsed = emi.total_months - count

    installments = []
    for i in range(count):
        year, month = add_months(first[0], first[1], i)
        installments.append(
            Installment(
                due_date=clamp_day(year, month, emi.due_day),
                amount=emi.amount,
                installment_number=elapsed + i + 1,
            )
        )

    return installments
