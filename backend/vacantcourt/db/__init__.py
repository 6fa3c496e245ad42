from vacantcourt.db.base import Base
from vacantcourt.db.session import get_engine, get_session_factory, make_engine, make_session_factory, new_session
from vacantcourt.db.tables import ALL_TABLE_NAMES

__all__ = [
    "get_engine",
    "get_session_factory",
    "new_session",
    "Base",
    "ALL_TABLE_NAMES",
    "make_engine",
    "make_session_factory",
]
