"""
Patients, Doctors & Suppliers API
"""
from typing import List, Optional, Type

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from pharmadesk.core import get_db
from pharmadesk.core.exceptions import NotFound
from pharmadesk.schemas.parties import (
    PatientCreate, PatientUpdate, PatientResponse,
    DoctorCreate, DoctorUpdate, DoctorResponse,
    SupplierCreate, SupplierUpdate, SupplierResponse,
)
from pharmadesk.services import DoctorService, PatientService, SupplierService
from pharmadesk.services.base import EntityService


def build_entity_router(
    service: Type[EntityService],
    prefix: str,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
) -> APIRouter:
    """CRUD endpoints for one reference entity"""
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])

    @router.get("", response_model=List[response_schema])
    def list_records(search: Optional[str] = Query(None), db: Session = Depends(get_db)):
        return service.list(db, search=search)

    @router.post("", response_model=response_schema, status_code=status.HTTP_201_CREATED)
    def create_record(data: create_schema, db: Session = Depends(get_db)):
        return service.create(db, data)

    @router.get("/{record_id}", response_model=response_schema)
    def get_record(record_id: int, db: Session = Depends(get_db)):
        return service.get_or_404(db, record_id)

    @router.patch("/{record_id}", response_model=response_schema)
    def update_record(record_id: int, data: update_schema, db: Session = Depends(get_db)):
        record = service.update(db, record_id, data)
        if not record:
            raise NotFound(service.resource, record_id)
        return record

    @router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_record(record_id: int, db: Session = Depends(get_db)):
        if not service.delete(db, record_id):
            raise NotFound(service.resource, record_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


patients_router = build_entity_router(PatientService, "/patients", PatientCreate, PatientUpdate, PatientResponse)
doctors_router = build_entity_router(DoctorService, "/doctors", DoctorCreate, DoctorUpdate, DoctorResponse)
suppliers_router = build_entity_router(SupplierService, "/suppliers", SupplierCreate, SupplierUpdate, SupplierResponse)
