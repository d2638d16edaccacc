"""/v1/accounts - payment accounts (no edit: accounts are immutable)"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_current_user, get_request_id
from finance_tracker.api.v1.converters import account_schema
from finance_tracker.api.v1.schemas import AccountRequest, AccountSchema, MessageResponse
from finance_tracker.infrastructure.database.models import User
from finance_tracker.infrastructure.database.repositories import PaymentAccountRepository
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.logging import log_mutation
from finance_tracker.infrastructure.observability.metrics import mutation_counter

router = APIRouter()


@router.get("/accounts", response_model=List[AccountSchema])
def list_accounts(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    rows = PaymentAccountRepository(db).list_by_owner(current_user.id)
    return [account_schema(row.to_domain()) for row in rows]


@router.post("/accounts", response_model=AccountSchema, status_code=201)
def create_account(
    body: AccountRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    row = PaymentAccountRepository(db).create(current_user.id, body.model_dump())
    db.commit()

    mutation_counter.labels(entity="account", action="create").inc()
    log_mutation(get_request_id(request), str(current_user.id), "account", "created", str(row.id))
    return account_schema(row.to_domain())


@router.delete("/accounts/{account_id}", response_model=MessageResponse)
def delete_account(
    account_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete an account; EMIs and expenses linked to it are left untouched"""
    if not PaymentAccountRepository(db).delete(current_user.id, account_id):
        db.rollback()
        raise HTTPException(status_code=404, detail="Account not found")
    db.commit()

    mutation_counter.labels(entity="account", action="delete").inc()
    log_mutation(get_request_id(request), str(current_user.id), "account", "deleted", account_id)
    return MessageResponse(message="Account deleted successfully")
