"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from finance_tracker.domain.exceptions import InvalidPeriodError
from finance_tracker.utils.date_utils import month_bounds


class PaymentMode(str, Enum):
    CASH = "Cash"
    UPI = "UPI"
    CREDIT_CARD = "Credit Card"
    DEBIT_CARD = "Debit Card"


class RecurrenceType(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class ExpenseCategory(str, Enum):
    """Expense categories; unknown labels fall back to OTHER"""

    FOOD = "Food"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    RECHARGE = "Recharge"
    ROOM_RENT = "Room Rent"
    GROCERIES = "Groceries"
    FUEL = "Fuel"
    EDUCATION = "Education"
    INSURANCE = "Insurance"
    TAXES = "Taxes"
    GIFTS = "Gifts"
    TRAVEL = "Travel"
    UTILITIES = "Utilities"
    OTHER = "Other"

    @classmethod
    def _missing_(cls, value):
        return cls.OTHER


class IncomeSource(str, Enum):
    """Income sources; unknown labels fall back to OTHER"""

    SALARY = "Salary"
    FREELANCE = "Freelance"
    INVESTMENT = "Investment"
    BUSINESS = "Business"
    BONUS = "Bonus"
    RENTAL_INCOME = "Rental Income"
    INTEREST = "Interest"
    COMMISSION = "Commission"
    OTHER = "Other"

    @classmethod
    def _missing_(cls, value):
        return cls.OTHER


@dataclass
class ExpenseRecord:
    """
    Stored expense, or a virtual entry synthesized from an EMI.

    `category` is a plain string here: projected EMI entries carry
    "EMI - <name>" labels that are not part of ExpenseCategory.
    """

    id: str
    user_id: str
    date: date
    amount: Decimal
    category: str
    payment_mode: str = PaymentMode.CASH.value
    payment_account_id: Optional[str] = None
    note: Optional[str] = None
    emi_id: Optional[str] = None
    is_recurring: bool = False
    recurring_type: Optional[str] = None
    virtual: bool = False


@dataclass
class IncomeRecord:
    """Stored income entry"""

    id: str
    user_id: str
    date: date
    amount: Decimal
    source: str
    note: Optional[str] = None
    is_recurring: bool = False
    recurring_type: Optional[str] = None

    @property
    def category(self) -> str:
        return self.source


@dataclass
class EMIRecord:
    """Equated monthly installment loan"""

    id: str
    user_id: str
    name: str
    amount: Decimal
    start_date: date
    due_day: int
    total_months: int
    payment_account_id: Optional[str] = None


@dataclass
class PaymentAccount:
    """Account used to pay expenses and EMIs"""

    id: str
    user_id: str
    type: str
    name: str
    details: Optional[str] = None


@dataclass(frozen=True)
class Period:
    """A calendar month (month is 1-12)"""

    year: int
    month: int

    def __post_init__(self):
        if not isinstance(self.month, int) or not 1 <= self.month <= 12:
            raise InvalidPeriodError(f"Month must be between 1 and 12, got {self.month!r}")
        if not isinstance(self.year, int) or not 1 <= self.year <= 9999:
            raise InvalidPeriodError(f"Year out of range: {self.year!r}")

    @property
    def start(self) -> date:
        return month_bounds(self.year, self.month)[0]

    @property
    def end(self) -> date:
        return month_bounds(self.year, self.month)[1]

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass
class Projection:
    """Entries effective for one period"""

    period: Period
    expenses: List[ExpenseRecord] = field(default_factory=list)
    income: List[IncomeRecord] = field(default_factory=list)
    skipped: int = 0  # Records dropped for malformed dates


@dataclass
class Installment:
    """Single upcoming EMI payment"""

    due_date: date
    amount: Decimal
    installment_number: int


@dataclass
class DaySummary:
    """Calendar cell totals"""

    date: date
    expenses: Decimal
    income: Decimal
    net: Decimal


@dataclass
class EMIStatus:
    """Where an active EMI stands in the current month"""

    emi: EMIRecord
    status: str  # "due" or "upcoming"
    days_until_due: int
    remaining_months: int
