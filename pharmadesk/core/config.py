from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "PharmaDesk"
    APP_PORT: int = 9210
    DEBUG: bool = False
    SECRET_KEY: str = "pharmadesk-secret-key-change-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    # Administrator account created at startup when both are set
    ADMIN_USERNAME: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    # Database (DATABASE_URL wins, then PostgreSQL, then SQLite file)
    DATABASE_URL: Optional[str] = None
    SQLITE_PATH: str = "./pharmadesk.db"
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "pharmadesk"
    POSTGRES_PORT: int = 5432

    # Logging
    LOG_LEVEL: str = "INFO"
    LOGS_PATH: Optional[str] = None

    # Alerts & notifications
    EXPIRY_ALERT_DAYS: int = 30
    ALERT_CHECK_INTERVAL_HOURS: int = 24
    SCHEDULER_ENABLED: bool = True
    NOTIFY_WEBHOOK_URL: Optional[str] = None
    NOTIFY_WEBHOOK_TIMEOUT: float = 5.0
    NOTIFY_ASYNC: bool = True
    NOTIFICATION_HISTORY_SIZE: int = 200

    SEED_DEMO_DATA: bool = False

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.POSTGRES_SERVER:
            return f"postgresql+psycopg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        return f"sqlite:///{self.SQLITE_PATH}"

    class Config:
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_settings() -> Settings:
    return Settings()
