"""
Purchase Orders API
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pharmadesk.api.deps import get_context, get_current_user
from pharmadesk.core import get_db
from pharmadesk.models import AppUser
from pharmadesk.schemas.order import AuditEntryResponse, OrderCreate, OrderItemCreate, OrderItemResponse, OrderResponse
from pharmadesk.schemas.transaction import StatusUpdate
from pharmadesk.services import OrderService, ServiceContext

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=List[OrderResponse])
def list_orders(
    status: Optional[str] = Query(None),
    supplier_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return OrderService.get_orders(db, status, supplier_id)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(data: OrderCreate, db: Session = Depends(get_db)):
    return OrderService.create_order(db, data)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return OrderService.get_order_or_404(db, order_id)


@router.post("/{order_id}/items", response_model=OrderItemResponse, status_code=status.HTTP_201_CREATED)
def add_order_item(order_id: int, data: OrderItemCreate, ctx: ServiceContext = Depends(get_context)):
    return OrderService.add_item(ctx, order_id, data)


@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    data: StatusUpdate,
    ctx: ServiceContext = Depends(get_context),
    current_user: Optional[AppUser] = Depends(get_current_user),
):
    """Move the order along; entering delivered restocks its items"""
    performed_by = current_user.id if current_user else None
    return OrderService.update_status(ctx, order_id, data.status, performed_by)


@router.get("/{order_id}/history", response_model=List[AuditEntryResponse])
def get_order_history(order_id: int, db: Session = Depends(get_db)):
    return OrderService.get_history(db, order_id)
