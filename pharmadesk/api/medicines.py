"""
Medicines API
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from pharmadesk.api.deps import get_app_settings, get_context
from pharmadesk.core import Settings, get_db
from pharmadesk.core.exceptions import NotFound
from pharmadesk.schemas.medicine import ExpiringMedicineResponse, MedicineCreate, MedicineResponse, MedicineUpdate
from pharmadesk.services import AlertService, MedicineService, ServiceContext

router = APIRouter(prefix="/medicines", tags=["medicines"])


@router.get("", response_model=List[MedicineResponse])
def list_medicines(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    stock_status: Optional[str] = Query(None),
    kind: Optional[str] = Query(None),
    supplier_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return MedicineService.get_medicines(db, search, category, stock_status, kind, supplier_id)


@router.post("", response_model=MedicineResponse, status_code=status.HTTP_201_CREATED)
def create_medicine(data: MedicineCreate, db: Session = Depends(get_db)):
    return MedicineService.create_medicine(db, data)


# ===================== ALERT VIEWS =====================
# Declared before /{medicine_id} so the literal paths win

@router.get("/low-stock", response_model=List[MedicineResponse])
def low_stock_medicines(db: Session = Depends(get_db)):
    return AlertService.low_stock_medicines(db)


@router.get("/expiring", response_model=List[ExpiringMedicineResponse])
def expiring_medicines(
    days: Optional[int] = Query(None, ge=0),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    threshold = settings.EXPIRY_ALERT_DAYS if days is None else days
    return [
        ExpiringMedicineResponse(
            **MedicineResponse.model_validate(medicine).model_dump(exclude={"reorder_quantity"}),
            days_remaining=days_remaining,
        )
        for medicine, days_remaining in AlertService.expiring_medicines(db, threshold)
    ]


@router.get("/by-name/{name}", response_model=MedicineResponse)
def get_medicine_by_name(name: str, db: Session = Depends(get_db)):
    medicine = MedicineService.get_medicine_by_name(db, name)
    if not medicine:
        raise NotFound("Medicine", name)
    return medicine


# ===================== SINGLE MEDICINE =====================

@router.get("/{medicine_id}", response_model=MedicineResponse)
def get_medicine(medicine_id: int, db: Session = Depends(get_db)):
    return MedicineService.get_medicine_or_404(db, medicine_id)


@router.patch("/{medicine_id}", response_model=MedicineResponse)
def update_medicine(medicine_id: int, data: MedicineUpdate, ctx: ServiceContext = Depends(get_context)):
    medicine = MedicineService.update_medicine(ctx, medicine_id, data)
    if not medicine:
        raise NotFound("Medicine", medicine_id)
    return medicine


@router.delete("/{medicine_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_medicine(medicine_id: int, db: Session = Depends(get_db)):
    if not MedicineService.delete_medicine(db, medicine_id):
        raise NotFound("Medicine", medicine_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
