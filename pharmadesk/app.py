"""
Application factory: builds the engine, session factory, lock registry,
notification center and alert scheduler for one app instance.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker

from pharmadesk import __version__
from pharmadesk.api.router import api_router
from pharmadesk.core import Base, Settings, build_engine, build_session_factory, get_settings
from pharmadesk.core.exceptions import register_exception_handlers
from pharmadesk.core.locks import KeyedLocks
from pharmadesk.core.logging_setup import setup_logging
from pharmadesk.jobs import AlertScheduler
from pharmadesk.seed import seed_demo_data
from pharmadesk.services import AuthService, NotificationCenter, RecipientDirectory, WebhookDeliverer, log_deliverer

logger = logging.getLogger(__name__)


def build_notifier(settings: Settings, session_factory: sessionmaker) -> NotificationCenter:
    executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="notify") if settings.NOTIFY_ASYNC else None
    notifier = NotificationCenter(history_size=settings.NOTIFICATION_HISTORY_SIZE, executor=executor)
    notifier.subscribe(log_deliverer)
    if settings.NOTIFY_WEBHOOK_URL:
        notifier.subscribe(WebhookDeliverer(
            settings.NOTIFY_WEBHOOK_URL,
            timeout=settings.NOTIFY_WEBHOOK_TIMEOUT,
            recipients=RecipientDirectory(session_factory),
        ))
        logger.info(f"Notifications forwarded to {settings.NOTIFY_WEBHOOK_URL}")
    return notifier


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and everything it owns from ``settings``"""
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOGS_PATH)

    engine = build_engine(settings.SQLALCHEMY_DATABASE_URI, echo=settings.DEBUG)
    # Create tables if not exist
    Base.metadata.create_all(bind=engine)
    session_factory = build_session_factory(engine)

    if settings.SEED_DEMO_DATA or settings.ADMIN_USERNAME:
        db = session_factory()
        try:
            if settings.ADMIN_USERNAME and settings.ADMIN_PASSWORD:
                AuthService.ensure_admin(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
            if settings.SEED_DEMO_DATA:
                seed_demo_data(db)
        finally:
            db.close()

    locks = KeyedLocks()
    notifier = build_notifier(settings, session_factory)
    scheduler = AlertScheduler(
        session_factory,
        locks,
        notifier,
        interval_hours=settings.ALERT_CHECK_INTERVAL_HOURS,
        expiry_days=settings.EXPIRY_ALERT_DAYS,
    )

    # Lifespan for startup/shutdown
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{settings.APP_NAME} starting on port {settings.APP_PORT}")
        if settings.SCHEDULER_ENABLED:
            scheduler.start()

        yield

        scheduler.stop()
        notifier.shutdown()
        engine.dispose()
        logger.info(f"{settings.APP_NAME} shutting down")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Pharmacy inventory, sales & purchasing",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.locks = locks
    app.state.notifier = notifier
    app.state.scheduler = scheduler

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    # Health check
    @app.get("/health")
    def health_check():
        return {"status": "healthy", "app": settings.APP_NAME, "version": __version__}

    return app
