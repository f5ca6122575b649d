"""
Transactions API - sales
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pharmadesk.api.deps import get_context, get_current_user
from pharmadesk.core import get_db
from pharmadesk.models import AppUser
from pharmadesk.schemas.transaction import (
    StatusUpdate, TransactionCreate, TransactionItemCreate, TransactionItemResponse, TransactionResponse,
)
from pharmadesk.services import ServiceContext, TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=List[TransactionResponse])
def list_transactions(
    patient_id: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return TransactionService.get_transactions(db, patient_id, status)


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(data: TransactionCreate, db: Session = Depends(get_db)):
    return TransactionService.create_transaction(db, data)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(transaction_id: int, db: Session = Depends(get_db)):
    return TransactionService.get_transaction_or_404(db, transaction_id)


@router.post("/{transaction_id}/items", response_model=TransactionItemResponse, status_code=status.HTTP_201_CREATED)
def add_transaction_item(
    transaction_id: int,
    data: TransactionItemCreate,
    ctx: ServiceContext = Depends(get_context),
):
    """Sell a medicine: stock is decremented with the line"""
    return TransactionService.add_item(ctx, transaction_id, data)


@router.patch("/{transaction_id}/status", response_model=TransactionResponse)
def update_transaction_status(
    transaction_id: int,
    data: StatusUpdate,
    ctx: ServiceContext = Depends(get_context),
    current_user: Optional[AppUser] = Depends(get_current_user),
):
    performed_by = current_user.id if current_user else None
    return TransactionService.update_status(ctx, transaction_id, data.status, performed_by)
