"""/v1/expenses - list, create, edit and delete expenses"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_current_user, get_request_id
from finance_tracker.api.v1.converters import expense_schema
from finance_tracker.api.v1.schemas import ExpenseRequest, ExpenseSchema, MessageResponse
from finance_tracker.infrastructure.database.models import User
from finance_tracker.infrastructure.database.repositories import ExpenseRepository
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.logging import log_mutation
from finance_tracker.infrastructure.observability.metrics import mutation_counter

router = APIRouter()


@router.get("/expenses", response_model=List[ExpenseSchema])
def list_expenses(
    start_date: Optional[date] = Query(None, description="Inclusive range start (needs end_date)"),
    end_date: Optional[date] = Query(None, description="Inclusive range end (needs start_date)"),
    category: Optional[str] = Query(None, description="Exact category"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Stored expenses for the current user, newest first"""
    rows = ExpenseRepository(db).list_by_owner(current_user.id, start_date, end_date, category)
    return [expense_schema(row.to_domain()) for row in rows]


@router.post("/expenses", response_model=ExpenseSchema, status_code=201)
def create_expense(
    body: ExpenseRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    row = ExpenseRepository(db).create(current_user.id, body.model_dump())
    db.commit()

    mutation_counter.labels(entity="expense", action="create").inc()
    log_mutation(get_request_id(request), str(current_user.id), "expense", "created", str(row.id))
    return expense_schema(row.to_domain())


@router.put("/expenses/{expense_id}", response_model=ExpenseSchema)
def update_expense(
    expense_id: str,
    body: ExpenseRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    row = ExpenseRepository(db).update(current_user.id, expense_id, body.model_dump())
    if row is None:
        db.rollback()
        raise HTTPException(status_code=404, detail="Expense not found")
    db.commit()

    mutation_counter.labels(entity="expense", action="update").inc()
    log_mutation(get_request_id(request), str(current_user.id), "expense", "updated", expense_id)
    return expense_schema(row.to_domain())


@router.delete("/expenses/{expense_id}", response_model=MessageResponse)
def delete_expense(
    expense_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not ExpenseRepository(db).delete(current_user.id, expense_id):
        db.rollback()
        raise HTTPException(status_code=404, detail="Expense not found")
    db.commit()

    mutation_counter.labels(entity="expense", action="delete").inc()
    log_mutation(get_request_id(request), str(current_user.id), "expense", "deleted", expense_id)
    return MessageResponse(message="Expense deleted successfully")
