"""
Notifications API - recent events, manual alert runs and per-user preferences
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pharmadesk.api.deps import get_app_settings, get_context, get_current_active_user, get_notifier, require_role
from pharmadesk.core import Settings, get_db
from pharmadesk.core.exceptions import ValidationError
from pharmadesk.models import AppUser
from pharmadesk.schemas.notification import NotificationPreferences, RecipientResponse
from pharmadesk.services import AlertService, NotificationCenter, PreferenceService, ServiceContext
from pharmadesk.services.notification_service import EVENT_KINDS

router = APIRouter(prefix="/notifications", tags=["notifications"])

# Staff allowed to fire alert runs by hand
can_trigger = require_role("admin", "pharmacist")


@router.get("")
def list_notifications(
    kind: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    notifier: NotificationCenter = Depends(get_notifier),
):
    """Most recent events first"""
    if kind and kind not in EVENT_KINDS:
        raise ValidationError(f"Unknown notification kind '{kind}'")
    return [event.to_dict() for event in notifier.recent(limit=limit, kind=kind)]


@router.post("/trigger/low-stock", dependencies=[Depends(can_trigger)])
def trigger_low_stock(ctx: ServiceContext = Depends(get_context)):
    count = AlertService.run_low_stock_check(ctx)
    return {"message": "Low stock check completed", "medicines": count}


@router.post("/trigger/expiring", dependencies=[Depends(can_trigger)])
def trigger_expiring(
    days: Optional[int] = Query(None, ge=0),
    ctx: ServiceContext = Depends(get_context),
    settings: Settings = Depends(get_app_settings),
):
    threshold = settings.EXPIRY_ALERT_DAYS if days is None else days
    count = AlertService.run_expiry_check(ctx, threshold)
    return {"message": "Expiry check completed", "medicines": count, "days_threshold": threshold}


@router.get("/preferences", response_model=NotificationPreferences)
def read_preferences(
    current_user: AppUser = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return PreferenceService.get_preferences(db, current_user)


@router.post("/preferences", response_model=NotificationPreferences)
def update_preferences(
    data: NotificationPreferences,
    current_user: AppUser = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Replace the caller's preferences; every kind must be given"""
    return PreferenceService.update_preferences(db, current_user, data)


@router.get("/recipients", response_model=List[RecipientResponse], dependencies=[Depends(require_role("admin"))])
def list_recipients(kind: str = Query(...), db: Session = Depends(get_db)):
    """Staff who would receive a notification of ``kind``"""
    return PreferenceService.recipients_for(db, kind)
