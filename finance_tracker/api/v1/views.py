"""Projection-backed views: /v1/projection, /v1/dashboard, /v1/calendar, /v1/reports"""

import time
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_current_user, get_request_id
from finance_tracker.api.v1.converters import expense_schema, income_schema
from finance_tracker.api.v1.schemas import (
    CalendarResponse,
    CategoryTotal,
    DashboardResponse,
    DaySchema,
    EMIStatusSchema,
    ProjectionResponse,
    ReportResponse,
    TrendPointSchema,
)
from finance_tracker.config import settings
from finance_tracker.domain.exceptions import InvalidPeriodError
from finance_tracker.domain.models import EMIRecord, ExpenseRecord, IncomeRecord, Period
from finance_tracker.domain.projection import monthly_total, project_period
from finance_tracker.domain.reports import (
    calendar_month,
    dashboard_summary,
    emi_status,
    payment_mode_breakdown,
    project_year,
    quarterly_summary,
    savings_rate,
    top_categories,
    yearly_trend,
)
from finance_tracker.infrastructure.database.models import User
from finance_tracker.infrastructure.database.repositories import (
    EMIRepository,
    ExpenseRepository,
    IncomeRepository,
)
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.logging import log_projection
from finance_tracker.infrastructure.observability.metrics import record_projection

router = APIRouter()


@dataclass
class Snapshot:
    """Immutable view of one user's records at request time"""

    expenses: List[ExpenseRecord]
    income: List[IncomeRecord]
    emis: List[EMIRecord]


def load_snapshot(db: Session, user: User) -> Snapshot:
    """Fetch every expense, income and EMI for the user (unfiltered)"""
    return Snapshot(
        expenses=[row.to_domain() for row in ExpenseRepository(db).list_by_owner(user.id)],
        income=[row.to_domain() for row in IncomeRepository(db).list_by_owner(user.id)],
        emis=[row.to_domain() for row in EMIRepository(db).list_by_owner(user.id)],
    )


def resolve_period(year: Optional[int], month: Optional[int], today: date) -> Period:
    """Period from query params, defaulting to the current month; invalid → 422"""
    try:
        return Period(year if year is not None else today.year, month if month is not None else today.month)
    except InvalidPeriodError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _finish(request: Request, user: User, view: str, period: str, projection, start_time: float) -> None:
    duration = time.time() - start_time
    record_projection(view, projection.skipped, duration)
    log_projection(
        get_request_id(request),
        str(user.id),
        view,
        period,
        len(projection.expenses),
        len(projection.income),
        projection.skipped,
        duration * 1000,
    )


@router.get("/projection", response_model=ProjectionResponse)
def get_projection(
    request: Request,
    year: Optional[int] = Query(None, description="Target year (default: current)"),
    month: Optional[int] = Query(None, description="Target month 1-12 (default: current)"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Expenses and income effective for one month.

    Includes one-time records dated in the month, recurring records, and one
    virtual entry per active EMI.
    """
    start_time = time.time()
    today = date.today()
    period = resolve_period(year, month, today)

    snapshot = load_snapshot(db, current_user)
    projection = project_period(
        snapshot.expenses,
        snapshot.income,
        snapshot.emis,
        period,
        today=today,
        dedupe=settings.dedupe_recurring_entries,
    )
    _finish(request, current_user, "projection", str(period), projection, start_time)

    return ProjectionResponse(
        period=str(period),
        expenses=[expense_schema(e) for e in projection.expenses],
        income=[income_schema(i) for i in projection.income],
        total_expenses=monthly_total(projection.expenses),
        total_income=monthly_total(projection.income),
        skipped_records=projection.skipped,
    )


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    request: Request,
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Monthly and all-time totals, category breakdown and the five latest expenses"""
    start_time = time.time()
    today = date.today()
    period = resolve_period(year, month, today)

    snapshot = load_snapshot(db, current_user)
    projection = project_period(
        snapshot.expenses, snapshot.income, snapshot.emis, period,
        today=today, dedupe=settings.dedupe_recurring_entries,
    )
    summary = dashboard_summary(projection, snapshot.expenses, snapshot.income, snapshot.emis, today)
    _finish(request, current_user, "dashboard", str(period), projection, start_time)

    # Snapshot is already newest first
    recent = snapshot.expenses[:5]

    return DashboardResponse(
        period=str(period),
        monthly_expenses=summary.monthly_expenses,
        monthly_income=summary.monthly_income,
        monthly_net=summary.monthly_net,
        total_expenses=summary.total_expenses,
        total_income=summary.total_income,
        net_amount=summary.net_amount,
        active_emi_count=summary.active_emi_count,
        category_breakdown=summary.category_breakdown,
        recent_expenses=[expense_schema(e) for e in recent],
    )


@router.get("/calendar", response_model=CalendarResponse)
def get_calendar(
    request: Request,
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Per-day expense, income and net totals for one month"""
    start_time = time.time()
    today = date.today()
    period = resolve_period(year, month, today)

    snapshot = load_snapshot(db, current_user)
    projection = project_period(
        snapshot.expenses, snapshot.income, snapshot.emis, period,
        today=today, dedupe=settings.dedupe_recurring_entries,
    )
    _finish(request, current_user, "calendar", str(period), projection, start_time)

    return CalendarResponse(
        period=str(period),
        days=[
            DaySchema(date=d.date, expenses=d.expenses, income=d.income, net=d.net)
            for d in calendar_month(projection)
        ],
        expenses=[expense_schema(e) for e in projection.expenses],
        income=[income_schema(i) for i in projection.income],
    )


@router.get("/reports/{year}", response_model=ReportResponse)
def get_report(
    year: int,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Yearly report built from twelve monthly projections.

    Returns:
        Monthly trend, quarterly totals, savings rate, top categories and
        payment modes across the year, and the current EMI status list
    """
    start_time = time.time()
    today = date.today()
    resolve_period(year, 1, today)

    snapshot = load_snapshot(db, current_user)
    projections = project_year(
        snapshot.expenses, snapshot.income, snapshot.emis, year,
        today=today, dedupe=settings.dedupe_recurring_entries,
    )
    trend = yearly_trend(projections)

    year_expenses = [e for p in projections for e in p.expenses]
    year_income = [i for p in projections for i in p.income]
    # Every monthly projection sees the same snapshot, so they all skip the same records
    skipped = projections[0].skipped

    total_expenses = monthly_total(year_expenses)
    total_income = monthly_total(year_income)

    duration = time.time() - start_time
    record_projection("reports", skipped, duration)
    log_projection(
        get_request_id(request), str(current_user.id), "reports", str(year),
        len(year_expenses), len(year_income), skipped, duration * 1000,
    )

    return ReportResponse(
        year=year,
        monthly_trend=[TrendPointSchema(name=p.name, expenses=p.expenses, income=p.income) for p in trend],
        quarterly=[TrendPointSchema(name=q.name, expenses=q.expenses, income=q.income) for q in quarterly_summary(trend)],
        total_expenses=total_expenses,
        total_income=total_income,
        net_amount=total_income - total_expenses,
        savings_rate=savings_rate(total_income, total_expenses),
        top_categories=[CategoryTotal(name=name, value=value) for name, value in top_categories(year_expenses)],
        payment_modes=payment_mode_breakdown(year_expenses),
        emi_status=[
            EMIStatusSchema(
                id=s.emi.id,
                name=s.emi.name,
                amount=s.emi.amount,
                due_day=s.emi.due_day,
                status=s.status,
                days_until_due=s.days_until_due,
                remaining_months=s.remaining_months,
            )
            for s in emi_status(snapshot.emis, today)
        ],
    )
