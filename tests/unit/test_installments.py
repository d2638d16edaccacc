"""Unit tests for EMI installment schedules"""

from datetime import date
from decimal import Decimal

from conftest import make_emi
from finance_tracker.domain.installments import generate_emi_schedule


def test_schedule_covers_remaining_months():
    """Start 2024-01-15, 12 months, today 2024-10-02: three installments left"""
    emi = make_emi(start=date(2024, 1, 15), due_day=15, total_months=12)

    installments = generate_emi_schedule(emi, today=date(2024, 10, 2))

    assert [i.due_date for i in installments] == [
        date(2024, 10, 15),
        date(2024, 11, 15),
        date(2024, 12, 15),
    ]
    assert [i.installment_number for i in installments] == [10, 11, 12]
    assert all(i.amount == Decimal("2500") for i in installments)


def test_schedule_crosses_year_boundary():
    emi = make_emi(start=date(2024, 6, 5), due_day=5, total_months=8)

    installments = generate_emi_schedule(emi, today=date(2024, 11, 20))

    assert [i.due_date for i in installments] == [
        date(2024, 11, 5),
        date(2024, 12, 5),
        date(2025, 1, 5),
    ]


def test_schedule_clamps_due_day():
    emi = make_emi(start=date(2025, 1, 31), due_day=31, total_months=4)

    installments = generate_emi_schedule(emi, today=date(2025, 1, 2))

    assert [i.due_date for i in installments] == [
        date(2025, 1, 31),
        date(2025, 2, 28),
        date(2025, 3, 31),
        date(2025, 4, 30),
    ]


def test_future_loan_scheduled_from_start_month():
    emi = make_emi(start=date(2025, 3, 10), due_day=10, total_months=3)

    installments = generate_emi_schedule(emi, today=date(2025, 1, 15))

    assert len(installments) == 3
    assert installments[0].due_date == date(2025, 3, 10)
    assert [i.installment_number for i in installments] == [1, 2, 3]


def test_completed_loan_has_empty_schedule():
    emi = make_emi(start=date(2023, 1, 15), total_months=12)

    assert generate_emi_schedule(emi, today=date(2024, 3, 1)) == []


def test_schedule_total_matches_remaining_balance():
    emi = make_emi(start=date(2024, 1, 15), total_months=24, amount="1500.75")

    installments = generate_emi_schedule(emi, today=date(2024, 7, 1))

    assert len(installments) == 18
    assert sum(i.amount for i in installments) == Decimal("1500.75") * 18


def test_malformed_start_date_has_empty_schedule():
    emi = make_emi()
    emi.start_date = "not-a-date"

    assert generate_emi_schedule(emi, today=date(2024, 3, 1)) == []
