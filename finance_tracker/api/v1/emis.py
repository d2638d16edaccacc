"""/v1/emis - installment loans and their remaining schedule"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_current_user, get_request_id
from finance_tracker.api.v1.converters import emi_schema
from finance_tracker.api.v1.schemas import (
    EMIRequest,
    EMISchema,
    InstallmentSchema,
    MessageResponse,
    ScheduleResponse,
)
from finance_tracker.domain.installments import generate_emi_schedule
from finance_tracker.domain.projection import remaining_months
from finance_tracker.infrastructure.database.models import User
from finance_tracker.infrastructure.database.repositories import EMIRepository
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.logging import log_mutation
from finance_tracker.infrastructure.observability.metrics import mutation_counter

router = APIRouter()


@router.get("/emis", response_model=List[EMISchema])
def list_emis(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """All EMIs, including completed ones (remaining_months == 0)"""
    today = date.today()
    rows = EMIRepository(db).list_by_owner(current_user.id)
    return [emi_schema(row.to_domain(), today) for row in rows]


@router.post("/emis", response_model=EMISchema, status_code=201)
def create_emi(
    body: EMIRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    row = EMIRepository(db).create(current_user.id, body.model_dump())
    db.commit()

    mutation_counter.labels(entity="emi", action="create").inc()
    log_mutation(get_request_id(request), str(current_user.id), "emi", "created", str(row.id))
    return emi_schema(row.to_domain(), date.today())


@router.put("/emis/{emi_id}", response_model=EMISchema)
def update_emi(
    emi_id: str,
    body: EMIRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    row = EMIRepository(db).update(current_user.id, emi_id, body.model_dump())
    if row is None:
        db.rollback()
        raise HTTPException(status_code=404, detail="EMI not found")
    db.commit()

    mutation_counter.labels(entity="emi", action="update").inc()
    log_mutation(get_request_id(request), str(current_user.id), "emi", "updated", emi_id)
    return emi_schema(row.to_domain(), date.today())


@router.delete("/emis/{emi_id}", response_model=MessageResponse)
def delete_emi(
    emi_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete an EMI; expenses that reference it keep their emi_id"""
    if not EMIRepository(db).delete(current_user.id, emi_id):
        db.rollback()
        raise HTTPException(status_code=404, detail="EMI not found")
    db.commit()

    mutation_counter.labels(entity="emi", action="delete").inc()
    log_mutation(get_request_id(request), str(current_user.id), "emi", "deleted", emi_id)
    return MessageResponse(message="EMI deleted successfully")


@router.get("/emis/{emi_id}/schedule", response_model=ScheduleResponse)
def get_emi_schedule(
    emi_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Remaining installments for an EMI.

    Returns:
        One installment per remaining month from the current month onward
    """
    row = EMIRepository(db).get(current_user.id, emi_id)
    if row is None:
        raise HTTPException(status_code=404, detail="EMI not found")

    today = date.today()
    emi = row.to_domain()
    installments = [
        InstallmentSchema(
            installment_number=inst.installment_number,
            due_date=inst.due_date,
            amount=inst.amount,
        )
        for inst in generate_emi_schedule(emi, today)
    ]

    return ScheduleResponse(
        emi_id=emi.id,
        remaining_months=remaining_months(emi, today),
        installments=installments,
    )
