"""Pydantic schemas for API request/response validation"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from finance_tracker.domain.models import (
    ExpenseCategory,
    IncomeSource,
    PaymentMode,
    RecurrenceType,
)


# --- Auth ---


class RegisterRequest(BaseModel):
    """Request body for POST /v1/auth/register"""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class UserSchema(BaseModel):
    id: str
    name: str
    email: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class AuthResponse(TokenResponse):
    """Response for register and login"""

    message: str
    user: UserSchema


class VerifyResponse(BaseModel):
    message: str = "Token is valid"
    user: UserSchema


# --- Records ---


class RecurrenceFields(BaseModel):
    """Shared recurrence flag/period with the set-iff-recurring invariant"""

    model_config = ConfigDict(use_enum_values=True)

    is_recurring: bool = False
    recurring_type: Optional[RecurrenceType] = None

    @model_validator(mode="after")
    def check_recurrence(self):
        if self.is_recurring and self.recurring_type is None:
            raise ValueError("recurring_type is required when is_recurring is true")
        if not self.is_recurring and self.recurring_type is not None:
            raise ValueError("recurring_type must be empty when is_recurring is false")
        return self


class ExpenseRequest(RecurrenceFields):
    """Request body for creating or editing an expense"""

    date: date
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    category: ExpenseCategory
    payment_mode: PaymentMode
    payment_account_id: Optional[uuid.UUID] = None
    note: Optional[str] = None
    emi_id: Optional[uuid.UUID] = None

    @field_validator("category", mode="before")
    @classmethod
    def fallback_category(cls, value):
        return ExpenseCategory(value) if isinstance(value, str) else value


class ExpenseSchema(BaseModel):
    """Stored or projected expense"""

    id: str
    date: date
    amount: Decimal
    category: str
    payment_mode: str
    payment_account_id: Optional[str] = None
    note: Optional[str] = None
    emi_id: Optional[str] = None
    is_recurring: bool
    recurring_type: Optional[str] = None
    virtual: bool = False


class IncomeRequest(RecurrenceFields):
    """Request body for creating or editing income"""

    date: date
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    source: IncomeSource
    note: Optional[str] = None

    @field_validator("source", mode="before")
    @classmethod
    def fallback_source(cls, value):
        return IncomeSource(value) if isinstance(value, str) else value


class IncomeSchema(BaseModel):
    id: str
    date: date
    amount: Decimal
    source: str
    note: Optional[str] = None
    is_recurring: bool
    recurring_type: Optional[str] = None


class EMIRequest(BaseModel):
    """Request body for creating or editing an EMI"""

    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    start_date: date
    due_day: int = Field(..., ge=1, le=31)
    total_months: int = Field(..., ge=1, le=600)  # 50 years
    payment_account_id: uuid.UUID


class EMISchema(BaseModel):
    id: str
    name: str
    amount: Decimal
    start_date: date
    due_day: int
    total_months: int
    remaining_months: int
    payment_account_id: Optional[str] = None


class InstallmentSchema(BaseModel):
    """Single installment in an EMI schedule"""

    installment_number: int
    due_date: date
    amount: Decimal


class ScheduleResponse(BaseModel):
    """Response for GET /v1/emis/{emi_id}/schedule"""

    emi_id: str
    remaining_months: int
    installments: List[InstallmentSchema]


class AccountRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    type: PaymentMode
    name: str = Field(..., min_length=1)
    details: Optional[str] = None


class AccountSchema(BaseModel):
    id: str
    type: str
    name: str
    details: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


# --- Views ---


class ProjectionResponse(BaseModel):
    """Response for GET /v1/projection"""

    period: str
    expenses: List[ExpenseSchema]
    income: List[IncomeSchema]
    total_expenses: Decimal
    total_income: Decimal
    skipped_records: int


class DashboardResponse(BaseModel):
    period: str
    monthly_expenses: Decimal
    monthly_income: Decimal
    monthly_net: Decimal
    total_expenses: Decimal
    total_income: Decimal
    net_amount: Decimal
    active_emi_count: int
    category_breakdown: Dict[str, Decimal]
    recent_expenses: List[ExpenseSchema]


class DaySchema(BaseModel):
    date: date
    expenses: Decimal
    income: Decimal
    net: Decimal


class CalendarResponse(BaseModel):
    period: str
    days: List[DaySchema]
    expenses: List[ExpenseSchema]
    income: List[IncomeSchema]


class TrendPointSchema(BaseModel):
    name: str
    expenses: Decimal
    income: Decimal


class CategoryTotal(BaseModel):
    name: str
    value: Decimal


class EMIStatusSchema(BaseModel):
    id: str
    name: str
    amount: Decimal
    due_day: int
    status: str
    days_until_due: int
    remaining_months: int


class ReportResponse(BaseModel):
    """Response for GET /v1/reports/{year}"""

    year: int
    monthly_trend: List[TrendPointSchema]
    quarterly: List[TrendPointSchema]
    total_expenses: Decimal
    total_income: Decimal
    net_amount: Decimal
    savings_rate: float
    top_categories: List[CategoryTotal]
    payment_modes: Dict[str, Decimal]
    emi_status: List[EMIStatusSchema]
