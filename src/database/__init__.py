from src.database.base import Base, IntegerPrimaryKeyMixin, TimestampMixin
from src.database.engine import async_session, engine
from src.database.session import get_db

__all__ = [
    "Base",
    "IntegerPrimaryKeyMixin",
    "TimestampMixin",
    "async_session",
    "engine",
    "get_db",
]
