"""
Entity Service - shared CRUD for the simple reference entities
"""
import logging
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import BaseModel
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pharmadesk.core.exceptions import ConsistencyError, NotFound, ValidationError

logger = logging.getLogger(__name__)


class EntityService:
    """Create / get / update / delete / list for one model.

    Subclasses set ``model``; ``references`` lists (model, column) pairs
    whose rows block a delete.
    """

    model: Any = None
    resource: str = "Record"
    search_fields: Sequence[str] = ("name",)
    references: Sequence[Tuple[Any, Any]] = ()

    @classmethod
    def list(cls, db: Session, search: Optional[str] = None, **filters) -> List[Any]:
        query = db.query(cls.model)

        for field, value in filters.items():
            if value is not None:
                query = query.filter(getattr(cls.model, field) == value)

        if search:
            search_term = f"%{search.lower()}%"
            conditions = [func.lower(getattr(cls.model, f)).like(search_term) for f in cls.search_fields]
            query = query.filter(or_(*conditions))

        return query.order_by(cls.model.id).all()

    @classmethod
    def get(cls, db: Session, record_id: int) -> Optional[Any]:
        return db.query(cls.model).filter(cls.model.id == record_id).first()

    @classmethod
    def get_or_404(cls, db: Session, record_id: int) -> Any:
        record = cls.get(db, record_id)
        if not record:
            raise NotFound(cls.resource, record_id)
        return record

    @classmethod
    def create(cls, db: Session, data: BaseModel) -> Any:
        record = cls.model(**data.model_dump())
        db.add(record)
        db.commit()
        db.refresh(record)
        logger.info(f"Created {cls.resource} {record.id}")
        return record

    @classmethod
    def update(cls, db: Session, record_id: int, patch: BaseModel) -> Optional[Any]:
        record = cls.get(db, record_id)
        if not record:
            return None

        for field, value in patch.model_dump(exclude_unset=True).items():
            setattr(record, field, value)

        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ValidationError(f"Invalid {cls.resource} update: {e.orig}") from e

        db.refresh(record)
        return record

    @classmethod
    def delete(cls, db: Session, record_id: int) -> bool:
        record = cls.get(db, record_id)
        if not record:
            return False

        ensure_unreferenced(db, cls.resource, record_id, cls.references)

        db.delete(record)
        db.commit()
        logger.info(f"Deleted {cls.resource} {record_id}")
        return True


def ensure_unreferenced(db: Session, resource: str, record_id: int, references) -> None:
    """Refuse to hard-delete a row other rows still point at."""
    for ref_model, column in references:
        count = db.query(func.count(ref_model.id)).filter(column == record_id).scalar()
        if count:
            raise ConsistencyError(
                f"{resource} {record_id} is referenced by {count} {ref_model.__tablename__} record(s)"
            )
