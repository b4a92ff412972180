"""Session module."""

from .sqlite_backend import DurableSessionStore, SqliteSessionBackend
from .store import ISessionStore, InMemorySessionStore

__all__ = [
    "ISessionStore",
    "InMemorySessionStore",
    "SqliteSessionBackend",
    "DurableSessionStore",
]
