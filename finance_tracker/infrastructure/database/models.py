"""SQLAlchemy ORM models for users, credentials and finance records"""

import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Date, Integer, ForeignKey, Text, Numeric, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

from finance_tracker.domain.models import EMIRecord, ExpenseRecord, IncomeRecord, PaymentAccount

Base = declarative_base()


def _str_or_none(value) -> str | None:
    return str(value) if value is not None else None


class User(Base):
    """Registered user"""

    __tablename__ = "app_user"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")
    access_tokens = relationship("AccessToken", back_populates="user", cascade="all, delete-orphan")


class AccessToken(Base):
    """Short-lived bearer token, stored as a SHA-256 digest"""

    __tablename__ = "access_token"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True)
    token_digest = Column(String(64), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="access_tokens")


class RefreshToken(Base):
    """Long-lived token used to mint new access tokens"""

    __tablename__ = "refresh_token"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True)
    token_digest = Column(String(64), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="refresh_tokens")


class Expense(Base):
    """Expense record; emi_id and payment_account_id are loose references"""

    __tablename__ = "expense"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(Text, nullable=False)
    payment_mode = Column(Text, nullable=False)
    payment_account_id = Column(Uuid, nullable=True)
    note = Column(Text, nullable=True)
    emi_id = Column(Uuid, nullable=True)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_type = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    def to_domain(self) -> ExpenseRecord:
        return ExpenseRecord(
            id=str(self.id),
            user_id=str(self.user_id),
            date=self.date,
            amount=self.amount,
            category=self.category,
            payment_mode=self.payment_mode,
            payment_account_id=_str_or_none(self.payment_account_id),
            note=self.note,
            emi_id=_str_or_none(self.emi_id),
            is_recurring=self.is_recurring,
            recurring_type=self.recurring_type,
        )


class Income(Base):
    """Income record"""

    __tablename__ = "income"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    source = Column(Text, nullable=False)
    note = Column(Text, nullable=True)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_type = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    def to_domain(self) -> IncomeRecord:
        return IncomeRecord(
            id=str(self.id),
            user_id=str(self.user_id),
            date=self.date,
            amount=self.amount,
            source=self.source,
            note=self.note,
            is_recurring=self.is_recurring,
            recurring_type=self.recurring_type,
        )


class EMI(Base):
    """Installment loan"""

    __tablename__ = "emi"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    start_date = Column(Date, nullable=False)
    due_day = Column(Integer, nullable=False)
    total_months = Column(Integer, nullable=False)
    payment_account_id = Column(Uuid, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    def to_domain(self) -> EMIRecord:
        return EMIRecord(
            id=str(self.id),
            user_id=str(self.user_id),
            name=self.name,
            amount=self.amount,
            start_date=self.start_date,
            due_day=self.due_day,
            total_months=self.total_months,
            payment_account_id=_str_or_none(self.payment_account_id),
        )


class PaymentAccountRow(Base):
    """Payment account (immutable once created)"""

    __tablename__ = "payment_account"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    type = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def to_domain(self) -> PaymentAccount:
        return PaymentAccount(
            id=str(self.id),
            user_id=str(self.user_id),
            type=self.type,
            name=self.name,
            details=self.details,
        )
