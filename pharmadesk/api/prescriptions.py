"""
Prescriptions API
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from pharmadesk.api.deps import get_context
from pharmadesk.core import get_db
from pharmadesk.core.exceptions import NotFound
from pharmadesk.schemas.prescription import (
    PrescriptionCreate, PrescriptionItemCreate, PrescriptionItemResponse, PrescriptionResponse, PrescriptionUpdate,
)
from pharmadesk.services import PrescriptionService, ServiceContext

router = APIRouter(prefix="/prescriptions", tags=["prescriptions"])


@router.get("", response_model=List[PrescriptionResponse])
def list_prescriptions(
    patient_id: Optional[int] = Query(None),
    doctor_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return PrescriptionService.get_prescriptions(db, patient_id, doctor_id, search)


@router.post("", response_model=PrescriptionResponse, status_code=status.HTTP_201_CREATED)
def create_prescription(data: PrescriptionCreate, ctx: ServiceContext = Depends(get_context)):
    return PrescriptionService.create_prescription(ctx, data)


@router.get("/patient/{patient_id}", response_model=List[PrescriptionResponse])
def get_patient_prescriptions(patient_id: int, db: Session = Depends(get_db)):
    return PrescriptionService.get_patient_prescriptions(db, patient_id)


@router.get("/{prescription_id}", response_model=PrescriptionResponse)
def get_prescription(prescription_id: int, db: Session = Depends(get_db)):
    prescription = PrescriptionService.get_prescription_by_id(db, prescription_id)
    if not prescription:
        raise NotFound("Prescription", prescription_id)
    return prescription


@router.patch("/{prescription_id}", response_model=PrescriptionResponse)
def update_prescription(prescription_id: int, data: PrescriptionUpdate, db: Session = Depends(get_db)):
    prescription = PrescriptionService.update_prescription(db, prescription_id, data)
    if not prescription:
        raise NotFound("Prescription", prescription_id)
    return prescription


@router.delete("/{prescription_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_prescription(prescription_id: int, db: Session = Depends(get_db)):
    if not PrescriptionService.delete_prescription(db, prescription_id):
        raise NotFound("Prescription", prescription_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{prescription_id}/items", response_model=PrescriptionItemResponse, status_code=status.HTTP_201_CREATED)
def add_prescription_item(prescription_id: int, data: PrescriptionItemCreate, db: Session = Depends(get_db)):
    return PrescriptionService.add_item(db, prescription_id, data)
