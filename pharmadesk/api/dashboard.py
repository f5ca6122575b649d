"""
Dashboard API
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pharmadesk.api.deps import get_app_settings
from pharmadesk.core import Settings, get_db
from pharmadesk.services import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats")
def dashboard_stats(db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)):
    return DashboardService.get_stats(db, expiry_days=settings.EXPIRY_ALERT_DAYS)
