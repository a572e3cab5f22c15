"""Database module."""

from accessgate.api.db.session import get_db, init_db, close_db
from accessgate.api.db.models import Base, Account, AccessLog
from accessgate.api.db.stores import IdentityStore

__all__ = ["get_db", "init_db", "close_db", "Base", "Account", "AccessLog", "IdentityStore"]
