"""Unit tests for the period projection"""

import pytest
from datetime import date
from decimal import Decimal

from conftest import make_emi, make_expense, make_income
from finance_tracker.domain.exceptions import InvalidPeriodError
from finance_tracker.domain.models import Period
from finance_tracker.domain.projection import (
    aggregate_by_category,
    monthly_total,
    net_for_date,
    project_period,
    remaining_months,
    total_for_date,
)


# --- remaining_months ---


def test_remaining_months_counts_calendar_months():
    """Start 2024-01-15, 12 months: six months elapsed by July"""
    emi = make_emi(start=date(2024, 1, 15), total_months=12)
    assert remaining_months(emi, date(2024, 7, 1)) == 6


def test_remaining_months_ignores_day_of_month():
    """A start on the 31st counts a full month as soon as the month changes"""
    emi = make_emi(start=date(2024, 1, 31), due_day=5, total_months=3)
    assert remaining_months(emi, date(2024, 2, 1)) == 2


def test_remaining_months_floors_at_zero():
    emi = make_emi(start=date(2024, 1, 15), total_months=12)
    assert remaining_months(emi, date(2025, 2, 1)) == 0
    assert remaining_months(emi, date(2030, 1, 1)) == 0


def test_remaining_months_non_increasing_and_zero_at_term():
    emi = make_emi(start=date(2023, 11, 20), total_months=6)
    values = []
    year, month = 2023, 11
    for _ in range(10):
        values.append(remaining_months(emi, date(year, month, 1)))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)

    assert all(a >= b for a, b in zip(values, values[1:]))
    assert values[6] == 0  # 2024-05 is six whole months past 2023-11


# --- one-time records ---


def test_one_time_record_included_only_in_its_month():
    expense = make_expense(day=date(2024, 3, 10))

    assert project_period([expense], [], [], Period(2024, 3)).expenses == [expense]
    assert project_period([expense], [], [], Period(2024, 2)).expenses == []
    assert project_period([expense], [], [], Period(2024, 4)).expenses == []


def test_one_time_record_on_period_boundaries():
    first = make_expense("a", day=date(2024, 2, 1))
    last = make_expense("b", day=date(2024, 2, 29))

    projection = project_period([first, last], [], [], Period(2024, 2))

    assert [e.id for e in projection.expenses] == ["a", "b"]


# --- recurring records ---


@pytest.mark.parametrize("period", [Period(2020, 1), Period(2024, 2), Period(2024, 11), Period(2031, 7)])
def test_monthly_recurring_included_in_every_period(period):
    expense = make_expense(day=date(2024, 3, 10), recurring_type="monthly")

    projection = project_period([expense], [], [], period)

    assert projection.expenses == [expense]


def test_monthly_recurring_in_own_month_counted_once_with_dedupe():
    expense = make_expense(day=date(2024, 3, 10), amount="500", recurring_type="monthly")

    projection = project_period([expense], [], [], Period(2024, 3), dedupe=True)

    assert len(projection.expenses) == 1
    assert monthly_total(projection.expenses) == Decimal("500")


def test_monthly_recurring_in_own_month_counted_twice_without_dedupe():
    expense = make_expense(day=date(2024, 3, 10), amount="500", recurring_type="monthly")

    projection = project_period([expense], [], [], Period(2024, 3), dedupe=False)

    assert len(projection.expenses) == 2
    assert monthly_total(projection.expenses) == Decimal("1000")


def test_yearly_recurring_only_within_same_year():
    salary = make_income(day=date(2024, 6, 1), amount="50000", recurring_type="yearly")

    for month in range(1, 13):
        projection = project_period([], [salary], [], Period(2024, month))
        assert projection.income == [salary], f"missing in 2024-{month:02d}"

    assert project_period([], [salary], [], Period(2025, 1)).income == []
    assert project_period([], [salary], [], Period(2023, 12)).income == []


def test_recurring_flag_without_type_behaves_as_one_time():
    expense = make_expense(day=date(2024, 3, 10))
    expense.is_recurring = True

    assert project_period([expense], [], [], Period(2024, 4)).expenses == []


def test_result_order_is_one_time_then_recurring_then_emi():
    one_time = make_expense("one", day=date(2024, 7, 2))
    recurring = make_expense("rec", day=date(2023, 1, 5), recurring_type="monthly")
    emi = make_emi(start=date(2024, 1, 15))

    projection = project_period([recurring, one_time], [], [emi], Period(2024, 7), today=date(2024, 7, 1))

    assert [e.id for e in projection.expenses] == ["one", "rec", "emi_emi-1"]


# --- EMI synthesis ---


def test_emi_synthesized_for_active_loan():
    emi = make_emi(start=date(2024, 1, 15), due_day=15, total_months=12, amount="2500", name="Car Loan")

    projection = project_period([], [], [emi], Period(2024, 7), today=date(2024, 7, 10))

    assert len(projection.expenses) == 1
    entry = projection.expenses[0]
    assert entry.date == date(2024, 7, 15)
    assert entry.amount == Decimal("2500")
    assert entry.category == "EMI - Car Loan"
    assert entry.is_recurring is True
    assert entry.recurring_type == "monthly"
    assert entry.emi_id == "emi-1"
    assert entry.virtual is True


def test_emi_excluded_when_completed():
    emi = make_emi(start=date(2024, 1, 15), total_months=12)

    projection = project_period([], [], [emi], Period(2025, 2), today=date(2025, 2, 3))

    assert projection.expenses == []


def test_emi_activity_uses_today_not_period():
    """A completed loan disappears from past periods too"""
    emi = make_emi(start=date(2024, 1, 15), total_months=12)

    projection = project_period([], [], [emi], Period(2024, 5), today=date(2025, 6, 1))

    assert projection.expenses == []


def test_emi_not_synthesized_before_start_month():
    emi = make_emi(start=date(2024, 6, 15), total_months=12)

    before = project_period([], [], [emi], Period(2024, 5), today=date(2024, 6, 1))
    start_month = project_period([], [], [emi], Period(2024, 6), today=date(2024, 6, 1))

    assert before.expenses == []
    assert len(start_month.expenses) == 1


def test_emi_started_late_in_previous_year_shows_early_next_year():
    emi = make_emi(start=date(2023, 11, 5), due_day=5, total_months=24)

    projection = project_period([], [], [emi], Period(2024, 2), today=date(2024, 2, 1))

    assert [e.date for e in projection.expenses] == [date(2024, 2, 5)]


def test_emi_due_day_clamped_to_short_month():
    emi = make_emi(start=date(2024, 1, 31), due_day=31, total_months=12)

    projection = project_period([], [], [emi], Period(2024, 2), today=date(2024, 2, 1))

    assert projection.expenses[0].date == date(2024, 2, 29)


def test_emis_never_produce_income():
    emi = make_emi()

    projection = project_period([], [], [emi], Period(2024, 3), today=date(2024, 3, 1))

    assert projection.income == []


# --- malformed input ---


def test_malformed_date_skips_only_that_record():
    good = make_expense("good", day=date(2024, 3, 10))
    bad = make_expense("bad")
    bad.date = "not-a-date"

    projection = project_period([bad, good], [], [], Period(2024, 3))

    assert [e.id for e in projection.expenses] == ["good"]
    assert projection.skipped == 1


def test_iso_string_dates_are_accepted():
    expense = make_expense(day=date(2024, 3, 10))
    expense.date = "2024-03-10T00:00:00.000Z"

    projection = project_period([expense], [], [], Period(2024, 3))

    assert projection.expenses == [expense]


def test_malformed_emi_start_date_is_skipped():
    emi = make_emi()
    emi.start_date = "31/31/2024"

    projection = project_period([], [], [emi], Period(2024, 3), today=date(2024, 3, 1))

    assert projection.expenses == []
    assert projection.skipped == 1


@pytest.mark.parametrize("month", [0, 13, -1])
def test_invalid_period_rejected(month):
    with pytest.raises(InvalidPeriodError):
        Period(2024, month)


# --- aggregations ---


def test_aggregate_by_category_matches_direct_sum():
    expenses = [
        make_expense("a", amount="100", category="Food"),
        make_expense("b", amount="250.50", category="Travel"),
        make_expense("c", amount="40", category="Food"),
    ]
    emi = make_emi(amount="2500", name="Phone")
    projection = project_period(expenses, [], [emi], Period(2024, 3), today=date(2024, 3, 1))

    totals = aggregate_by_category(projection.expenses)

    assert totals == {
        "Food": Decimal("140"),
        "Travel": Decimal("250.50"),
        "EMI - Phone": Decimal("2500"),
    }
    assert sum(totals.values()) == monthly_total(projection.expenses)


def test_total_and_net_for_date():
    expenses = [
        make_expense("a", day=date(2024, 3, 10), amount="100"),
        make_expense("b", day=date(2024, 3, 10), amount="50"),
        make_expense("c", day=date(2024, 3, 11), amount="75"),
    ]
    income = [make_income("i", day=date(2024, 3, 10), amount="1000")]
    projection = project_period(expenses, income, [], Period(2024, 3))

    assert total_for_date(projection.expenses, date(2024, 3, 10)) == Decimal("150")
    assert total_for_date(projection.expenses, date(2024, 3, 12)) == Decimal("0")
    assert net_for_date(projection, date(2024, 3, 10)) == Decimal("850")
    assert net_for_date(projection, date(2024, 3, 11)) == Decimal("-75")


def test_projection_is_idempotent():
    expenses = [make_expense(recurring_type="monthly"), make_expense("b", day=date(2024, 5, 2))]
    income = [make_income(recurring_type="yearly")]
    emis = [make_emi()]

    first = project_period(expenses, income, emis, Period(2024, 5), today=date(2024, 5, 1))
    second = project_period(expenses, income, emis, Period(2024, 5), today=date(2024, 5, 1))

    assert first == second
