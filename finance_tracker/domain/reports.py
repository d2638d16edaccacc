"""Dashboard, calendar and report aggregations built on the period projection"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, List, Sequence

from finance_tracker.domain.models import (
    DaySummary,
    EMIRecord,
    EMIStatus,
    ExpenseRecord,
    IncomeRecord,
    Period,
    Projection,
)
from finance_tracker.domain.projection import (
    active_emis,
    aggregate_by_category,
    monthly_total,
    net_for_date,
    project_period,
    remaining_months,
    total_for_date,
)
from finance_tracker.utils.date_utils import generate_date_range

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


@dataclass
class DashboardSummary:
    period: Period
    monthly_expenses: Decimal
    monthly_income: Decimal
    monthly_net: Decimal
    total_expenses: Decimal
    total_income: Decimal
    net_amount: Decimal
    active_emi_count: int
    category_breakdown: Dict[str, Decimal]


@dataclass
class TrendPoint:
    name: str
    expenses: Decimal
    income: Decimal


def dashboard_summary(
    projection: Projection,
    expenses: Sequence[ExpenseRecord],
    income: Sequence[IncomeRecord],
    emis: Sequence[EMIRecord],
    today: date,
) -> DashboardSummary:
    """
    Headline numbers for the dashboard.

    Monthly figures come from `projection`. All-time totals sum every stored
    record plus one installment per EMI still active today.
    """
    monthly_expenses = monthly_total(projection.expenses)
    monthly_income = monthly_total(projection.income)

    active = active_emis(emis, today)
    total_expenses = monthly_total(expenses) + sum((Decimal(e.amount) for e in active), Decimal("0"))
    total_income = monthly_total(income)

    return DashboardSummary(
        period=projection.period,
        monthly_expenses=monthly_expenses,
        monthly_income=monthly_income,
        monthly_net=monthly_income - monthly_expenses,
        total_expenses=total_expenses,
        total_income=total_income,
        net_amount=total_income - total_expenses,
        active_emi_count=len(active),
        category_breakdown=aggregate_by_category(projection.expenses),
    )


def calendar_month(projection: Projection) -> List[DaySummary]:
    """One summary per day of the projected month"""
    return [
        DaySummary(
            date=day,
            expenses=total_for_date(projection.expenses, day),
            income=total_for_date(projection.income, day),
            net=net_for_date(projection, day),
        )
        for day in generate_date_range(projection.period.start, projection.period.end)
    ]


def project_year(
    expenses: Sequence[ExpenseRecord],
    income: Sequence[IncomeRecord],
    emis: Sequence[EMIRecord],
    year: int,
    today: date,
    dedupe: bool = True,
) -> List[Projection]:
    """Twelve monthly projections, January first"""
    return [
        project_period(expenses, income, emis, Period(year, month), today=today, dedupe=dedupe)
        for month in range(1, 13)
    ]


def yearly_trend(projections: Sequence[Projection]) -> List[TrendPoint]:
    """Projected expense and income totals per month"""
    return [
        TrendPoint(
            name=MONTH_NAMES[p.period.month - 1],
            expenses=monthly_total(p.expenses),
            income=monthly_total(p.income),
        )
        for p in projections
    ]


def quarterly_summary(trend: Sequence[TrendPoint]) -> List[TrendPoint]:
    """Fold a twelve-month trend into Q1-Q4"""
    quarters = []
    for index in range(4):
        months = trend[index * 3:index * 3 + 3]
        quarters.append(
            TrendPoint(
                name=f"Q{index + 1}",
                expenses=sum((m.expenses for m in months), Decimal("0")),
                income=sum((m.income for m in months), Decimal("0")),
            )
        )
    return quarters


def payment_mode_breakdown(entries: Sequence[ExpenseRecord]) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = {}
    for entry in entries:
        totals[entry.payment_mode] = totals.get(entry.payment_mode, Decimal("0")) + Decimal(entry.amount)
    return totals


def top_categories(entries: Sequence[ExpenseRecord], limit: int = 8) -> List[tuple[str, Decimal]]:
    """Largest expense categories first"""
    totals = aggregate_by_category(entries)
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)[:limit]


def savings_rate(income_total: Decimal, expense_total: Decimal) -> float:
    """Share of income left after expenses, in percent"""
    if income_total <= 0:
        return 0.0
    return round(float((income_total - expense_total) / income_total * 100), 1)


def emi_status(emis: Sequence[EMIRecord], today: date) -> List[EMIStatus]:
    """
    Active EMIs with their position in the current month.

    An EMI is "due" once today's day of month has reached its due day,
    otherwise "upcoming". Due EMIs sort first, then by days until due.
    EMIs whose start date cannot be parsed are left out.
    """
    statuses = []
    for emi in active_emis(emis, today):
        left = remaining_months(emi, today)
        is_due = today.day >= emi.due_day
        statuses.append(
            EMIStatus(
                emi=emi,
                status="due" if is_due else "upcoming",
                days_until_due=0 if is_due else emi.due_day - today.day,
                remaining_months=left,
            )
        )
    return sorted(statuses, key=lambda s: (s.status != "due", s.days_until_due))
