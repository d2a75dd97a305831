"""Database module for actionscout."""

from actionscout.db.models import ActionElement, Base, UserAction, Website
from actionscout.db.session import close_db, get_session_factory, init_db

__all__ = [
    "ActionElement",
    "Base",
    "UserAction",
    "Website",
    "close_db",
    "get_session_factory",
    "init_db",
]
