"""Domain record → response schema conversion shared by routers"""

from datetime import date

from finance_tracker.api.v1.schemas import AccountSchema, EMISchema, ExpenseSchema, IncomeSchema
from finance_tracker.domain.models import EMIRecord, ExpenseRecord, IncomeRecord, PaymentAccount
from finance_tracker.domain.projection import remaining_months


def expense_schema(record: ExpenseRecord) -> ExpenseSchema:
    return ExpenseSchema(
        id=record.id,
        date=record.date,
        amount=record.amount,
        category=record.category,
        payment_mode=record.payment_mode,
        payment_account_id=record.payment_account_id,
        note=record.note,
        emi_id=record.emi_id,
        is_recurring=record.is_recurring,
        recurring_type=record.recurring_type,
        virtual=record.virtual,
    )


def income_schema(record: IncomeRecord) -> IncomeSchema:
    return IncomeSchema(
        id=record.id,
        date=record.date,
        amount=record.amount,
        source=record.source,
        note=record.note,
        is_recurring=record.is_recurring,
        recurring_type=record.recurring_type,
    )


def emi_schema(record: EMIRecord, today: date) -> EMISchema:
    return EMISchema(
        id=record.id,
        name=record.name,
        amount=record.amount,
        start_date=record.start_date,
        due_day=record.due_day,
        total_months=record.total_months,
        remaining_months=remaining_months(record, today),
        payment_account_id=record.payment_account_id,
    )


def account_schema(record: PaymentAccount) -> AccountSchema:
    return AccountSchema(id=record.id, type=record.type, name=record.name, details=record.details)
