"""
Preference Service - per-user notification opt-in and recipient lookup

A user without a stored row receives every kind. Only active admin and
pharmacist accounts are recipients of outgoing notifications.
"""
import logging
from typing import Dict, List

from sqlalchemy import or_
from sqlalchemy.orm import Session, sessionmaker

from pharmadesk.core.exceptions import ValidationError
from pharmadesk.models import AppUser, NotificationPreference
from pharmadesk.schemas.notification import NotificationPreferences
from pharmadesk.services.notification_service import EVENT_KINDS

logger = logging.getLogger(__name__)

RECIPIENT_ROLES = ("admin", "pharmacist")

DEFAULT_PREFERENCES = {kind: True for kind in EVENT_KINDS}


class PreferenceService:
    """Notification preference business logic"""

    @staticmethod
    def get_preferences(db: Session, user: AppUser) -> Dict[str, bool]:
        preference = db.query(NotificationPreference).filter(NotificationPreference.user_id == user.id).first()
        if not preference:
            return dict(DEFAULT_PREFERENCES)
        return {kind: getattr(preference, kind) for kind in EVENT_KINDS}

    @staticmethod
    def update_preferences(db: Session, user: AppUser, data: NotificationPreferences) -> Dict[str, bool]:
        preference = db.query(NotificationPreference).filter(NotificationPreference.user_id == user.id).first()
        if not preference:
            preference = NotificationPreference(user_id=user.id)
            db.add(preference)

        for kind, enabled in data.model_dump().items():
            setattr(preference, kind, enabled)

        db.commit()
        logger.info(f"Notification preferences for {user.username}: {data.model_dump()}")
        return PreferenceService.get_preferences(db, user)

    @staticmethod
    def recipients_for(db: Session, kind: str) -> List[AppUser]:
        """Active staff in a recipient role who receive ``kind``"""
        if kind not in EVENT_KINDS:
            raise ValidationError(f"Unknown notification kind '{kind}'")

        opted_in = getattr(NotificationPreference, kind)
        return db.query(AppUser).outerjoin(
            NotificationPreference, NotificationPreference.user_id == AppUser.id
        ).filter(
            AppUser.is_active.is_(True),
            AppUser.role.in_(RECIPIENT_ROLES),
            or_(NotificationPreference.id.is_(None), opted_in.is_(True)),
        ).order_by(AppUser.id).all()


class RecipientDirectory:
    """Resolves an event kind to recipient contacts, with a session of its own per lookup"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def __call__(self, kind: str) -> List[Dict]:
        db = self.session_factory()
        try:
            return [
                {"username": user.username, "full_name": user.full_name, "email": user.email}
                for user in PreferenceService.recipients_for(db, kind)
            ]
        finally:
            db.close()
