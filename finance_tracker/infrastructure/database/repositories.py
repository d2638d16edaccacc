"""Data access layer for users, credentials and finance records"""

import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Type

from sqlalchemy.orm import Session

from finance_tracker.infrastructure.database.models import (
    EMI,
    AccessToken,
    Expense,
    Income,
    PaymentAccountRow,
    RefreshToken,
    User,
)


def parse_id(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    """UUID from a path/query value, or None when it is not a valid UUID"""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class UserRepository:
    """Repository for users and their tokens"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def create_user(self, name: str, email: str, password_hash: str) -> User:
        user = User(name=name, email=email.lower(), password_hash=password_hash)
        self.db.add(user)
        self.db.flush()  # Assigns the id without committing
        return user

    def add_access_token(self, user_id: uuid.UUID, token_digest: str, expires_at: datetime) -> AccessToken:
        token = AccessToken(user_id=user_id, token_digest=token_digest, expires_at=expires_at)
        self.db.add(token)
        return token

    def get_access_token(self, token_digest: str) -> Optional[AccessToken]:
        return self.db.query(AccessToken).filter(AccessToken.token_digest == token_digest).first()

    def add_refresh_token(self, user_id: uuid.UUID, token_digest: str, expires_at: datetime) -> RefreshToken:
        token = RefreshToken(user_id=user_id, token_digest=token_digest, expires_at=expires_at)
        self.db.add(token)
        return token

    def get_refresh_token(self, token_digest: str) -> Optional[RefreshToken]:
        return self.db.query(RefreshToken).filter(RefreshToken.token_digest == token_digest).first()

    def delete_refresh_tokens(self, user_id: uuid.UUID) -> int:
        """Drop every refresh token for a user (login keeps only the newest)"""
        return self.db.query(RefreshToken).filter(RefreshToken.user_id == user_id).delete()

    def delete_token(self, token: AccessToken | RefreshToken) -> None:
        self.db.delete(token)


class OwnedRecordRepository:
    """
    CRUD for rows owned by a single user.

    Subclasses set `model` and, where the list endpoint filters on a label
    column, `filter_field`.
    """

    model: Type = None
    filter_field: Optional[str] = None
    date_field: Optional[str] = "date"

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, user_id: uuid.UUID):
        return self.db.query(self.model).filter(self.model.user_id == user_id)

    def list_by_owner(
        self,
        user_id: uuid.UUID,
        start_date: date | None = None,
        end_date: date | None = None,
        label: str | None = None,
    ) -> List[Any]:
        """
        All rows for a user, newest first.

        Args:
            start_date / end_date: Inclusive date range; applied only when both are given
            label: Exact category (expenses) or source (income) to match
        """
        query = self._owned(user_id)

        if self.date_field and start_date and end_date:
            column = getattr(self.model, self.date_field)
            query = query.filter(column >= start_date, column <= end_date)

        if self.filter_field and label:
            query = query.filter(getattr(self.model, self.filter_field) == label)

        order_column = getattr(self.model, self.date_field) if self.date_field else self.model.created_at
        return query.order_by(order_column.desc(), self.model.created_at.desc()).all()

    def get(self, user_id: uuid.UUID, record_id: str | uuid.UUID) -> Optional[Any]:
        record_uuid = parse_id(record_id)
        if record_uuid is None:
            return None
        return self._owned(user_id).filter(self.model.id == record_uuid).first()

    def create(self, user_id: uuid.UUID, fields: Dict[str, Any]) -> Any:
        row = self.model(user_id=user_id, **fields)
        self.db.add(row)
        self.db.flush()
        return row

    def update(self, user_id: uuid.UUID, record_id: str | uuid.UUID, fields: Dict[str, Any]) -> Optional[Any]:
        """Overwrite fields of an owned row; None when it does not exist"""
        row = self.get(user_id, record_id)
        if row is None:
            return None
        for name, value in fields.items():
            setattr(row, name, value)
        self.db.flush()
        return row

    def delete(self, user_id: uuid.UUID, record_id: str | uuid.UUID) -> bool:
        """Delete an owned row; dependent references are left in place"""
        row = self.get(user_id, record_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.flush()
        return True


class ExpenseRepository(OwnedRecordRepository):
    model = Expense
    filter_field = "category"


class IncomeRepository(OwnedRecordRepository):
    model = Income
    filter_field = "source"


class EMIRepository(OwnedRecordRepository):
    model = EMI
    date_field = None


class PaymentAccountRepository(OwnedRecordRepository):
    model = PaymentAccountRow
    date_field = None
