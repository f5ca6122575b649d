from .config import Settings, get_settings
from .database import Base, build_engine, build_session_factory, get_db

__all__ = ["Settings", "get_settings", "Base", "build_engine", "build_session_factory", "get_db"]
