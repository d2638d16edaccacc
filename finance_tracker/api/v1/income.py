"""/v1/income - list, create, edit and delete income"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_current_user, get_request_id
from finance_tracker.api.v1.converters import income_schema
from finance_tracker.api.v1.schemas import IncomeRequest, IncomeSchema, MessageResponse
from finance_tracker.infrastructure.database.models import User
from finance_tracker.infrastructure.database.repositories import IncomeRepository
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.logging import log_mutation
from finance_tracker.infrastructure.observability.metrics import mutation_counter

router = APIRouter()


@router.get("/income", response_model=List[IncomeSchema])
def list_income(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    source: Optional[str] = Query(None, description="Exact income source"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rows = IncomeRepository(db).list_by_owner(current_user.id, start_date, end_date, source)
    return [income_schema(row.to_domain()) for row in rows]


@router.post("/income", response_model=IncomeSchema, status_code=201)
def create_income(
    body: IncomeRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    row = IncomeRepository(db).create(current_user.id, body.model_dump())
    db.commit()

    mutation_counter.labels(entity="income", action="create").inc()
    log_mutation(get_request_id(request), str(current_user.id), "income", "created", str(row.id))
    return income_schema(row.to_domain())


@router.put("/income/{income_id}", response_model=IncomeSchema)
def update_income(
    income_id: str,
    body: IncomeRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    row = IncomeRepository(db).update(current_user.id, income_id, body.model_dump())
    if row is None:
        db.rollback()
        raise HTTPException(status_code=404, detail="Income not found")
    db.commit()

    mutation_counter.labels(entity="income", action="update").inc()
    log_mutation(get_request_id(request), str(current_user.id), "income", "updated", income_id)
    return income_schema(row.to_domain())


@router.delete("/income/{income_id}", response_model=MessageResponse)
def delete_income(
    income_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not IncomeRepository(db).delete(current_user.id, income_id):
        db.rollback()
        raise HTTPException(status_code=404, detail="Income not found")
    db.commit()

    mutation_counter.labels(entity="income", action="delete").inc()
    log_mutation(get_request_id(request), str(current_user.id), "income", "deleted", income_id)
    return MessageResponse(message="Income deleted successfully")
