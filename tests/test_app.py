"""Tests for the application factory, configuration and demo data."""

from pharmadesk.app import create_app
from pharmadesk.core import Settings
from pharmadesk.models import AppUser, Medicine
from pharmadesk.seed import seed_demo_data
from pharmadesk.services import AuthService
from pharmadesk.stock import derive_status


class TestSettings:

    def test_database_url_wins(self):
        assert Settings(DATABASE_URL="sqlite://").SQLALCHEMY_DATABASE_URI == "sqlite://"

    def test_postgres_when_server_set(self):
        settings = Settings(DATABASE_URL=None, POSTGRES_SERVER="db", POSTGRES_DB="pharmacy")

        assert settings.SQLALCHEMY_DATABASE_URI.startswith("postgresql+psycopg://")
        assert settings.SQLALCHEMY_DATABASE_URI.endswith("@db:5432/pharmacy")

    def test_sqlite_file_fallback(self):
        settings = Settings(DATABASE_URL=None, POSTGRES_SERVER=None, SQLITE_PATH="/tmp/x.db")

        assert settings.SQLALCHEMY_DATABASE_URI == "sqlite:////tmp/x.db"


class TestCreateApp:

    def test_apps_do_not_share_state(self, settings):
        first = create_app(settings)
        second = create_app(settings)

        assert first.state.locks is not second.state.locks
        assert first.state.notifier is not second.state.notifier
        assert first.state.engine is not second.state.engine

    def test_configured_admin_is_created_once(self, db):
        """The startup admin account exists and ensuring it again does not duplicate it."""
        AuthService.ensure_admin(db, "admin", "another-password")

        admins = db.query(AppUser).filter(AppUser.role == "admin").all()

        assert [u.username for u in admins] == ["admin"]

    def test_no_admin_without_credentials(self, settings):
        app = create_app(settings.model_copy(update={"ADMIN_USERNAME": None}))
        session = app.state.session_factory()

        assert session.query(AppUser).count() == 0
        session.close()


class TestSeedDemoData:

    def test_seed_is_idempotent(self, db):
        created = seed_demo_data(db)

        assert created > 0
        assert seed_demo_data(db) == 0

    def test_seeded_statuses_are_derived(self, db):
        seed_demo_data(db)

        for medicine in db.query(Medicine).all():
            assert medicine.stock_status == derive_status(medicine.stock_quantity).value

    def test_alert_run_over_seeded_catalogue(self, app):
        session = app.state.session_factory()
        seed_demo_data(session)
        session.close()

        result = app.state.scheduler.run_checks()

        assert result["low_stock"] == 2
        assert result["expiring"] == 2
